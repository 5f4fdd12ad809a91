# src/walletfetch/utils.py
import importlib.metadata
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

import requests

from walletfetch.constants import GITHUB_API_TIMEOUT
from walletfetch.exceptions import RateLimitError
from walletfetch.log_utils import logger

if TYPE_CHECKING:
    from walletfetch.settings import GithubCredentials

# Cache for the User-Agent string to avoid repeated metadata lookups
_USER_AGENT_CACHE = None


def get_user_agent() -> str:
    """
    Get the User-Agent string used for HTTP requests.

    Returns:
        The string `walletfetch/{version}`, where `{version}` is the installed package version or `unknown` if the version cannot be determined.
    """
    global _USER_AGENT_CACHE

    if _USER_AGENT_CACHE is None:
        try:
            app_version = importlib.metadata.version("walletfetch")
        except importlib.metadata.PackageNotFoundError:
            app_version = "unknown"

        _USER_AGENT_CACHE = f"walletfetch/{app_version}"

    return _USER_AGENT_CACHE


def _parse_rate_limit_header(header_value: Any) -> Optional[int]:
    """
    Parse an X-RateLimit-* header value into an integer.

    Returns:
        The integer value, or None when the header is missing or not numeric.
    """
    if header_value is None:
        return None
    try:
        return int(str(header_value).strip())
    except (TypeError, ValueError):
        return None


def _format_reset_time(reset_value: Optional[int]) -> str:
    if reset_value is None:
        return "unknown"
    try:
        return datetime.fromtimestamp(reset_value, timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S UTC"
        )
    except (OverflowError, OSError, ValueError):
        return "unknown"


def make_github_api_request(
    url: str,
    credentials: Optional["GithubCredentials"] = None,
    custom_403_message: Optional[str] = None,
) -> requests.Response:
    """
    Perform a GitHub API GET request with optional basic authentication.

    Parameters:
        url (str): GitHub API URL to request.
        credentials (Optional[GithubCredentials]): Username and personal access token sent as basic auth when present.
        custom_403_message (Optional[str]): Message used for the RateLimitError raised on 403 responses.

    Returns:
        requests.Response: The successful HTTP response.

    Raises:
        RateLimitError: When GitHub answers 403.
        requests.HTTPError: For any other HTTP error status.
        requests.RequestException: For lower-level network or request errors.
    """
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": get_user_agent(),
    }

    auth = credentials.as_auth() if credentials else None
    if auth:
        logger.debug("Using GitHub credentials for API authentication")
    else:
        logger.debug(
            "No GitHub credentials available - using unauthenticated API requests"
        )

    logger.debug(f"Making GitHub API request: {url}")
    try:
        response = requests.get(
            url, timeout=GITHUB_API_TIMEOUT, headers=headers, auth=auth
        )
        response.raise_for_status()
    except requests.HTTPError as e:
        if e.response is not None and e.response.status_code == 403:
            reset_time = _parse_rate_limit_header(
                e.response.headers.get("X-RateLimit-Reset")
            )
            error_msg = custom_403_message or "GitHub API access forbidden."
            if reset_time is not None:
                error_msg = f"{error_msg} Rate limit resets at {_format_reset_time(reset_time)}."
            logger.error(error_msg)
            raise RateLimitError(error_msg, url=url, reset_time=reset_time) from e
        raise

    remaining = _parse_rate_limit_header(response.headers.get("X-RateLimit-Remaining"))
    if remaining is not None:
        logger.debug(f"GitHub API rate-limit remaining: {remaining}")
        if remaining <= 10:
            logger.warning(
                f"GitHub API rate limit running low: {remaining} requests remaining"
            )

    return response
