"""
Prepare a wallet extension build for a test run.

prepare_provider() resolves the requested release, downloads it into the
cache when it is not there yet and returns the directory holding the
unpacked extension.
"""

from pathlib import Path
from typing import Optional

from walletfetch.constants import MANIFEST_FILE_NAME
from walletfetch.fetcher import fetch_and_extract
from walletfetch.log_utils import logger
from walletfetch.probe import ensure_dir, exists
from walletfetch.releases import get_resolver
from walletfetch.settings import Settings, load_settings


def is_provider_cached(provider_dir: Path) -> bool:
    """
    A cache entry counts only when both the directory and its manifest.json exist.
    """
    return exists(provider_dir) and exists(provider_dir / MANIFEST_FILE_NAME)


def prepare_provider(
    provider: str,
    version: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Path:
    """
    Make sure the requested provider build is unpacked in the cache.

    Parameters:
        provider (str): Provider key, "metamask" or "phantom".
        version (Optional[str]): Explicit version, or None / "latest".
        settings (Optional[Settings]): Cache location and credentials; loaded
            from the config file and environment when omitted.

    Returns:
        Path: `<cache_dir>/<tag_name>`. Returned even when the download was
        skipped; the caller is responsible for checking its contents.

    Raises:
        ResolutionError: If the release cannot be resolved.
        ProbeError: If the cache cannot be inspected or created.
        DownloadError: If downloading or extracting the build fails.
    """
    if settings is None:
        settings = load_settings()

    release = get_resolver(provider, settings.credentials).resolve(version)
    ensure_dir(settings.cache_dir)

    provider_dir = Path(settings.cache_dir) / release.tag_name
    if is_provider_cached(provider_dir):
        logger.info(f"{provider} is already downloaded: {provider_dir}")
    else:
        fetch_and_extract(
            provider,
            release.download_url,
            provider_dir,
            credentials=settings.credentials,
        )

    return provider_dir
