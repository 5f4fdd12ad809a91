"""
walletfetch - wallet extension builds for browser end-to-end tests

Resolves which network a test run targets and downloads MetaMask or Phantom
extension builds into a local cache.

Core Components:
- network: network selection (presets, localhost, custom networks)
- releases: release resolvers per provider
- fetcher: archive download, extraction and dist flattening
- probe: filesystem existence helpers
- provider: prepare_provider() orchestration
- settings: configuration file and environment handling
"""

from .exceptions import (
    ConfigFileError,
    ConfigurationError,
    DownloadError,
    NetworkSelectionError,
    NetworkUnreachableError,
    ProbeError,
    RateLimitError,
    ResolutionError,
    WalletFetchError,
)
from .fetcher import MoveReport, fetch_and_extract, flatten_directory
from .network import (
    PRESET_NETWORKS,
    NetworkConfig,
    NetworkDescriptor,
    NetworkRegistry,
    query_local_network,
)
from .probe import ensure_dir, exists
from .provider import prepare_provider
from .releases import (
    GithubReleaseResolver,
    ReleaseDescriptor,
    ReleaseResolver,
    StaticReleaseResolver,
    get_resolver,
    resolve_release,
)
from .settings import GithubCredentials, Settings, get_package_path, load_settings

__all__ = [
    # Network selection
    "PRESET_NETWORKS",
    "NetworkConfig",
    "NetworkDescriptor",
    "NetworkRegistry",
    "query_local_network",
    # Releases
    "GithubReleaseResolver",
    "ReleaseDescriptor",
    "ReleaseResolver",
    "StaticReleaseResolver",
    "get_resolver",
    "resolve_release",
    # Downloads and cache
    "MoveReport",
    "ensure_dir",
    "exists",
    "fetch_and_extract",
    "flatten_directory",
    "prepare_provider",
    # Settings
    "GithubCredentials",
    "Settings",
    "get_package_path",
    "load_settings",
    # Errors
    "ConfigFileError",
    "ConfigurationError",
    "DownloadError",
    "NetworkSelectionError",
    "NetworkUnreachableError",
    "ProbeError",
    "RateLimitError",
    "ResolutionError",
    "WalletFetchError",
]
