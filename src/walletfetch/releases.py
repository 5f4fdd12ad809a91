"""
Release Resolvers

This module turns a provider key and a version string into the filename,
download URL and tag of one wallet extension build.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests  # type: ignore[import-untyped]

from walletfetch.constants import (
    GH_PAT_ENV_VAR,
    GH_USERNAME_ENV_VAR,
    LATEST_VERSION,
    METAMASK_DOWNLOAD_URL_TEMPLATE,
    METAMASK_FILENAME_TEMPLATE,
    METAMASK_RELEASES_URL,
    METAMASK_TAG_TEMPLATE,
    PHANTOM_STATIC_DOWNLOAD_URL,
    PHANTOM_STATIC_FILENAME,
    PHANTOM_STATIC_TAG_NAME,
    PROVIDER_METAMASK,
    PROVIDER_PHANTOM,
    SUPPORTED_PROVIDERS,
)
from walletfetch.exceptions import RateLimitError, ResolutionError
from walletfetch.log_utils import logger
from walletfetch.settings import GithubCredentials
from walletfetch.utils import make_github_api_request


@dataclass(frozen=True)
class ReleaseDescriptor:
    """Identifies one downloadable build of a provider."""

    filename: str
    """The archive filename"""

    download_url: str
    """Direct URL of the archive"""

    tag_name: str
    """Release tag; also the name of the cache directory"""


def is_latest(version: Optional[str]) -> bool:
    return not version or version == LATEST_VERSION


class ReleaseResolver(ABC):
    """Resolves a version string into a ReleaseDescriptor."""

    provider: str

    @abstractmethod
    def resolve(self, version: Optional[str] = None) -> ReleaseDescriptor:
        """
        Resolve `version` for this provider.

        Parameters:
            version (Optional[str]): An explicit version, or None / "latest" for the newest release.

        Returns:
            ReleaseDescriptor: The build to download.

        Raises:
            ResolutionError: If the release cannot be determined.
        """


class GithubReleaseResolver(ReleaseResolver):
    """
    Resolves releases published on GitHub.

    The newest release is looked up through the releases listing API.
    Explicit versions are built from URL templates without any request.

    Usage:
        resolver = GithubReleaseResolver(credentials=GithubCredentials.from_env())
        release = resolver.resolve("10.25.0")
    """

    provider = PROVIDER_METAMASK

    def __init__(
        self,
        releases_url: str = METAMASK_RELEASES_URL,
        credentials: Optional[GithubCredentials] = None,
        download_url_template: str = METAMASK_DOWNLOAD_URL_TEMPLATE,
        filename_template: str = METAMASK_FILENAME_TEMPLATE,
        tag_template: str = METAMASK_TAG_TEMPLATE,
    ):
        """
        Initialize the resolver.

        Parameters:
            releases_url (str): GitHub API URL listing the repository's releases.
            credentials (Optional[GithubCredentials]): Basic-auth credentials for the listing request.
            download_url_template (str): Template for explicit versions; `{version}` is substituted.
            filename_template (str): Filename template for explicit versions.
            tag_template (str): Tag template for explicit versions.
        """
        self.releases_url = releases_url
        self.credentials = credentials
        self.download_url_template = download_url_template
        self.filename_template = filename_template
        self.tag_template = tag_template

    def resolve(self, version: Optional[str] = None) -> ReleaseDescriptor:
        logger.debug(
            f"Trying to find {self.provider} version {version} in GitHub releases.."
        )
        if is_latest(version):
            release = self._resolve_latest()
        else:
            release = self._resolve_explicit(version)
        logger.debug(
            f"{self.provider} version found! Filename: {release.filename}; "
            f"Download url: {release.download_url}; Tag name: {release.tag_name}"
        )
        return release

    def _resolve_explicit(self, version: str) -> ReleaseDescriptor:
        return ReleaseDescriptor(
            filename=self.filename_template.format(version=version),
            download_url=self.download_url_template.format(version=version),
            tag_name=self.tag_template.format(version=version),
        )

    def _resolve_latest(self) -> ReleaseDescriptor:
        try:
            releases_data = self._fetch_releases()
            latest = releases_data[0]
            asset = latest["assets"][0]
            return ReleaseDescriptor(
                filename=asset["name"],
                download_url=asset["browser_download_url"],
                tag_name=latest["tag_name"],
            )
        except RateLimitError as e:
            e.provider = self.provider
            raise
        except (
            requests.RequestException,
            ValueError,
            KeyError,
            IndexError,
            TypeError,
        ) as e:
            raise ResolutionError(
                f"[resolve_release] Unable to fetch {self.provider} releases from GitHub",
                provider=self.provider,
                url=self.releases_url,
                details=str(e),
            ) from e

    def _fetch_releases(self) -> List[Dict[str, Any]]:
        """
        Fetch the raw releases listing, newest first.

        Raises:
            RateLimitError: When GitHub answers 403.
            requests.RequestException: For transport or HTTP failures.
            ValueError: When the response body is not a JSON list.
        """
        response = make_github_api_request(
            self.releases_url,
            self.credentials,
            custom_403_message=(
                f"[resolve_release] Unable to fetch {self.provider} releases from GitHub "
                "because you've been rate limited! Please set "
                f"{GH_USERNAME_ENV_VAR} and {GH_PAT_ENV_VAR} environment variables "
                "to avoid this issue or retry again."
            ),
        )
        releases_data = response.json()
        if not isinstance(releases_data, list):
            raise ValueError(
                f"expected a list of releases, got {type(releases_data).__name__}"
            )
        logger.debug(
            "Fetched %d releases from %s", len(releases_data), self.releases_url
        )
        return releases_data


class StaticReleaseResolver(ReleaseResolver):
    """
    Returns the same descriptor for every version.

    Used for providers without a public release feed.
    """

    def __init__(
        self, descriptor: ReleaseDescriptor, provider: str = PROVIDER_PHANTOM
    ):
        self.descriptor = descriptor
        self.provider = provider

    def resolve(self, version: Optional[str] = None) -> ReleaseDescriptor:
        logger.debug(
            f"Using fixed {self.provider} release {self.descriptor.tag_name} "
            f"(requested version: {version})"
        )
        return self.descriptor


PHANTOM_STATIC_RELEASE = ReleaseDescriptor(
    filename=PHANTOM_STATIC_FILENAME,
    download_url=PHANTOM_STATIC_DOWNLOAD_URL,
    tag_name=PHANTOM_STATIC_TAG_NAME,
)


def get_resolver(
    provider: str, credentials: Optional[GithubCredentials] = None
) -> ReleaseResolver:
    """
    Return the release resolver for `provider`.

    Raises:
        ResolutionError: If the provider is not supported.
    """
    if provider == PROVIDER_METAMASK:
        return GithubReleaseResolver(credentials=credentials)
    if provider == PROVIDER_PHANTOM:
        # No public release feed yet
        return StaticReleaseResolver(PHANTOM_STATIC_RELEASE)
    raise ResolutionError(
        f"[resolve_release] Unsupported provider '{provider}'",
        provider=provider,
        details=f"supported providers: {', '.join(SUPPORTED_PROVIDERS)}",
    )


def resolve_release(
    provider: str,
    version: Optional[str] = None,
    credentials: Optional[GithubCredentials] = None,
) -> ReleaseDescriptor:
    """Resolve `version` of `provider` into a ReleaseDescriptor."""
    return get_resolver(provider, credentials).resolve(version)
