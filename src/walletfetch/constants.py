"""
Constants and configuration values for walletfetch.

This module contains hardcoded URLs, timeouts, preset names and environment
variable names used throughout the package.
"""

# Providers
PROVIDER_METAMASK = "metamask"
PROVIDER_PHANTOM = "phantom"
SUPPORTED_PROVIDERS = (PROVIDER_METAMASK, PROVIDER_PHANTOM)

# Providers whose archives unpack into a nested dist/ folder
NESTED_DIST_PROVIDERS = (PROVIDER_PHANTOM,)
NESTED_DIST_DIR_NAME = "dist"

# Release resolution
LATEST_VERSION = "latest"
GITHUB_API_BASE = "https://api.github.com/repos"
METAMASK_RELEASES_URL = f"{GITHUB_API_BASE}/metamask/metamask-extension/releases"
METAMASK_DOWNLOAD_URL_TEMPLATE = (
    "https://github.com/MetaMask/metamask-extension/releases/download/"
    "v{version}/metamask-chrome-{version}.zip"
)
METAMASK_FILENAME_TEMPLATE = "metamask-chrome-{version}.zip"
METAMASK_TAG_TEMPLATE = "metamask-chrome-{version}"

# Phantom has no public release feed yet
PHANTOM_STATIC_FILENAME = "phantom-chrome-latest"
PHANTOM_STATIC_DOWNLOAD_URL = "chrome-dist.zip"
PHANTOM_STATIC_TAG_NAME = "phantom-chrome-latest"

# Cache layout
DOWNLOADS_DIR_NAME = "downloads"
MANIFEST_FILE_NAME = "manifest.json"
ARCHIVE_TEMP_SUFFIX = ".zip.part"

# Networks
LOCALHOST_NETWORK = "localhost"
DEFAULT_LOCAL_RPC_URL = "http://127.0.0.1:8545"
UNKNOWN_NETWORK_NAME = "unknown"

# Network timeouts (in seconds)
GITHUB_API_TIMEOUT = 10
DEFAULT_REQUEST_TIMEOUT = 30
LOCAL_RPC_TIMEOUT = 10
DEFAULT_CHUNK_SIZE = 8192
MAX_MOVE_WORKERS = 8

# Configuration
APP_NAME = "walletfetch"
CONFIG_FILE_NAME = "walletfetch.yaml"
LOCAL_TEST_PACKAGE_PATH = "./src/walletfetch"

# Environment variable names
GH_USERNAME_ENV_VAR = "GH_USERNAME"
GH_PAT_ENV_VAR = "GH_PAT"
CACHE_DIR_ENV_VAR = "WALLETFETCH_CACHE_DIR"
RPC_URL_ENV_VAR = "WALLETFETCH_RPC_URL"
LOCAL_TEST_ENV_VAR = "WALLETFETCH_LOCAL_TEST"
LOG_LEVEL_ENV_VAR = "WALLETFETCH_LOG_LEVEL"

# Logging configuration
LOGGER_NAME = "walletfetch"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5
LOG_FILE_NAME = "walletfetch.log"
