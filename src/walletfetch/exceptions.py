"""
Custom exceptions for walletfetch.

Every error raised by the package derives from WalletFetchError. Messages are
prefixed with the operation that failed (for example `[download]`) and the
original exception is always chained as `__cause__`.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from walletfetch.fetcher import MoveReport


class WalletFetchError(Exception):
    """
    Base exception for all walletfetch errors.

    Catch this to handle any failure raised by the package.
    """

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(WalletFetchError):
    """Exception raised when configuration values are invalid."""

    pass


class ConfigFileError(ConfigurationError):
    """Exception raised when the configuration file cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


# =============================================================================
# Release Resolution Errors
# =============================================================================


class ResolutionError(WalletFetchError):
    """
    Exception raised when a release descriptor cannot be resolved.

    Attributes:
        provider: The provider key that was being resolved.
        url: The release listing URL that was queried, if any.
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        url: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.provider = provider
        self.url = url


class RateLimitError(ResolutionError):
    """
    Exception raised when the GitHub API answers a release listing with 403.

    Attributes:
        status_code: Always 403.
        reset_time: Unix timestamp at which the rate limit resets, if known.
    """

    def __init__(
        self,
        message: str = "GitHub API rate limit exceeded",
        provider: Optional[str] = None,
        url: Optional[str] = None,
        reset_time: Optional[int] = None,
    ) -> None:
        super().__init__(
            message,
            provider=provider,
            url=url,
            details=f"Resets at: {reset_time}" if reset_time is not None else None,
        )
        self.status_code = 403
        self.reset_time = reset_time


# =============================================================================
# Download Errors
# =============================================================================


class DownloadError(WalletFetchError):
    """
    Exception raised when downloading, extracting or flattening an archive fails.

    Attributes:
        url: The archive URL.
        destination: The directory the archive was being extracted into.
        move_report: The flattening report when the failure happened while
            moving nested files, otherwise None.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        destination: Optional[str] = None,
        move_report: Optional["MoveReport"] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url
        self.destination = destination
        self.move_report = move_report


# =============================================================================
# File System Errors
# =============================================================================


class ProbeError(WalletFetchError):
    """
    Exception raised when a filesystem probe fails for a reason other than
    the path not existing (permissions, I/O errors, missing parent, ...).
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


# =============================================================================
# Network Selection Errors
# =============================================================================


class NetworkSelectionError(WalletFetchError):
    """Base exception for network selection failures."""

    pass


class NetworkUnreachableError(NetworkSelectionError):
    """Exception raised when the local chain endpoint cannot be queried."""

    def __init__(
        self,
        message: str,
        rpc_url: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.rpc_url = rpc_url

