"""
Archive download and extraction for provider builds.

Downloads a zip archive, extracts it into the provider's cache directory and,
for providers that package their build under `dist/`, moves the payload up
one level.
"""

import os
import shutil
import tempfile
import time
import zipfile
import zlib
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Union

import requests

from walletfetch.constants import (
    ARCHIVE_TEMP_SUFFIX,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    MAX_MOVE_WORKERS,
    NESTED_DIST_DIR_NAME,
    NESTED_DIST_PROVIDERS,
)
from walletfetch.exceptions import DownloadError
from walletfetch.log_utils import logger
from walletfetch.utils import get_user_agent

if TYPE_CHECKING:
    from walletfetch.settings import GithubCredentials

Pathish = Union[str, Path]


@dataclass
class MoveReport:
    """Outcome of a batch of file moves."""

    moved: List[Path] = field(default_factory=list)
    """Destination paths of entries that were moved"""

    failed: Dict[Path, OSError] = field(default_factory=dict)
    """Source paths that could not be moved, with the error raised"""

    @property
    def ok(self) -> bool:
        return not self.failed


def _is_safe_archive_member(member_name: str) -> bool:
    """
    Determine whether an archive member name is safe to extract.

    Returns:
        `True` if the member name contains no absolute paths, parent-directory references, or null bytes, `False` otherwise.
    """
    if not member_name or member_name.startswith(("/", "\\")):
        return False
    if "\x00" in member_name:
        return False
    normalized = os.path.normpath(member_name)
    if os.path.isabs(normalized):
        return False
    if normalized == ".." or normalized.startswith(f"..{os.sep}"):
        return False
    if os.altsep and normalized.startswith(f"..{os.altsep}"):
        return False
    return True


def _safe_extract_path(extract_dir: str, member_name: str) -> str:
    """
    Resolve the absolute extraction path of `member_name` inside `extract_dir`.

    Raises:
        ValueError: If the resolved path is outside extract_dir.
    """
    real_extract_dir = os.path.realpath(extract_dir)
    normalized_path = os.path.realpath(os.path.join(real_extract_dir, member_name))
    if os.path.commonpath([real_extract_dir, normalized_path]) != real_extract_dir:
        raise ValueError(
            f"Unsafe extraction path '{member_name}' is outside base '{extract_dir}'"
        )
    return normalized_path


def download_archive(
    url: str,
    target_path: Pathish,
    credentials: Optional["GithubCredentials"] = None,
) -> int:
    """
    Stream `url` into `target_path`.

    With credentials the request is sent with basic auth and
    `Accept: application/octet-stream`, which GitHub requires for asset
    downloads through the API.

    Returns:
        int: Number of bytes written.

    Raises:
        requests.RequestException: For transport or HTTP failures.
        OSError: If the file cannot be written.
    """
    headers = {"User-Agent": get_user_agent()}
    auth = None
    if credentials:
        headers["Accept"] = "application/octet-stream"
        auth = credentials.as_auth()
        logger.debug("Using GitHub credentials for archive download")

    start_time = time.time()
    downloaded_bytes = 0
    response = requests.get(
        url,
        headers=headers,
        auth=auth,
        stream=True,
        timeout=DEFAULT_REQUEST_TIMEOUT,
    )
    try:
        logger.debug(
            f"Received HTTP response status code: {response.status_code} for URL: {url}"
        )
        response.raise_for_status()
        with open(target_path, "wb") as file:
            for chunk in response.iter_content(chunk_size=DEFAULT_CHUNK_SIZE):
                if chunk:
                    file.write(chunk)
                    downloaded_bytes += len(chunk)
    finally:
        response.close()

    logger.debug(
        "Downloaded %d bytes from %s in %.2fs",
        downloaded_bytes,
        url,
        time.time() - start_time,
    )
    return downloaded_bytes


def extract_archive(zip_path: Pathish, extract_dir: Pathish) -> List[Path]:
    """
    Extract every file of a zip archive into `extract_dir`.

    Members with absolute paths, parent-directory references or null bytes
    are skipped with a warning.

    Returns:
        List[Path]: Paths of the extracted files.

    Raises:
        zipfile.BadZipFile: If the archive or a member's CRC is corrupted.
        zlib.error, EOFError: If a member's compressed data is damaged.
        RuntimeError: For encrypted members or unsupported compression.
        OSError: If a file cannot be written.
    """
    extract_dir = os.fspath(extract_dir)
    extracted_files: List[Path] = []

    with zipfile.ZipFile(zip_path, "r") as zip_ref:
        for file_info in zip_ref.infolist():
            file_name = file_info.filename
            if not _is_safe_archive_member(file_name):
                logger.warning(
                    "Skipping unsafe archive member %s (possible traversal)",
                    file_name,
                )
                continue
            try:
                extract_path = _safe_extract_path(extract_dir, file_name)
            except ValueError as e:
                logger.warning(f"Skipping unsafe extraction path: {e}")
                continue

            if file_info.is_dir():
                os.makedirs(extract_path, exist_ok=True)
                continue

            os.makedirs(os.path.dirname(extract_path), exist_ok=True)
            with zip_ref.open(file_info) as source, open(extract_path, "wb") as target:
                shutil.copyfileobj(source, target)
            extracted_files.append(Path(extract_path))

    logger.debug(f"Extracted {len(extracted_files)} files to {extract_dir}")
    return extracted_files


def _move_entry(source: Path, destination: Path) -> Path:
    os.rename(source, destination)
    return destination


def flatten_directory(source_dir: Pathish, destination_dir: Pathish) -> MoveReport:
    """
    Move every entry of `source_dir` into `destination_dir` as one batch.

    The moves run concurrently with no ordering between them and nothing is
    rolled back. `source_dir` itself is left in place.

    Returns:
        MoveReport: Which moves succeeded and which failed.

    Raises:
        OSError: If `source_dir` cannot be listed.
    """
    source_dir = Path(source_dir)
    destination_dir = Path(destination_dir)
    entries = sorted(source_dir.iterdir())
    report = MoveReport()
    if not entries:
        return report

    logger.debug(
        f"Moving {len(entries)} entries from {source_dir} to {destination_dir}"
    )
    with ThreadPoolExecutor(
        max_workers=min(MAX_MOVE_WORKERS, len(entries))
    ) as executor:
        futures = {
            entry: executor.submit(_move_entry, entry, destination_dir / entry.name)
            for entry in entries
        }
        for entry, future in futures.items():
            try:
                report.moved.append(future.result())
            except OSError as e:
                logger.error(f"Failed to move {entry} to {destination_dir}: {e}")
                report.failed[entry] = e

    return report


def _relocate(paths: List[Path], old_root: Path, new_root: Path) -> List[Path]:
    relocated = []
    for path in paths:
        try:
            relocated.append(new_root / path.relative_to(old_root))
        except ValueError:
            relocated.append(path)
    return relocated


def fetch_and_extract(
    provider: str,
    url: str,
    destination: Pathish,
    credentials: Optional["GithubCredentials"] = None,
) -> List[Path]:
    """
    Download the archive at `url` and extract it into `destination`.

    Providers that ship their build inside a `dist` folder are flattened so
    the extension's files sit directly under `destination`; the emptied
    `dist` folder is left in place.

    Parameters:
        provider (str): Provider key; decides whether the archive is flattened.
        url (str): Archive URL.
        destination (Pathish): Directory to extract into; created if missing.
        credentials (Optional[GithubCredentials]): Enables the authenticated download.

    Returns:
        List[Path]: The extracted files at their final locations.

    Raises:
        DownloadError: On any download, extraction or move failure.
    """
    destination = Path(destination)
    logger.debug(
        f"Trying to download and extract file from: {url} to following path: {destination}"
    )

    def _error(reason: object, move_report: Optional[MoveReport] = None):
        return DownloadError(
            f"[download] Unable to download provider release from: {url} to: {destination}",
            url=url,
            destination=str(destination),
            move_report=move_report,
            details=str(reason),
        )

    temp_path: Optional[str] = None
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            prefix=f".{destination.name}.",
            suffix=ARCHIVE_TEMP_SUFFIX,
            dir=destination.parent,
        )
        os.close(fd)

        download_archive(url, temp_path, credentials)
        destination.mkdir(parents=True, exist_ok=True)
        extracted = extract_archive(temp_path, destination)

        if provider in NESTED_DIST_PROVIDERS:
            nested_dir = destination / NESTED_DIST_DIR_NAME
            report = flatten_directory(nested_dir, destination)
            if not report.ok:
                raise _error(
                    f"{len(report.failed)} of {len(report.failed) + len(report.moved)} "
                    f"entries could not be moved out of {nested_dir}",
                    move_report=report,
                ) from next(iter(report.failed.values()))
            extracted = _relocate(
                extracted, nested_dir.resolve(), destination.resolve()
            )
    except (
        requests.RequestException,
        zipfile.BadZipFile,
        zlib.error,
        EOFError,
        RuntimeError,
        OSError,
    ) as e:
        # RuntimeError covers encrypted members and unsupported compression
        raise _error(e) from e
    finally:
        if temp_path and os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError as e:
                logger.debug(f"Could not remove temporary archive {temp_path}: {e}")

    logger.info(f"Downloaded {provider} build to {destination}")
    return extracted
