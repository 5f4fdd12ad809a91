"""
Filesystem existence probes used to decide whether a provider is cached.

Only "not found" is treated as a normal outcome; every other filesystem
error is raised as ProbeError.
"""

import os
from typing import Union

from walletfetch.exceptions import ProbeError
from walletfetch.log_utils import logger

Pathish = Union[str, "os.PathLike[str]"]


def exists(path: Pathish) -> bool:
    """
    Check whether a file or directory exists at `path`.

    Returns:
        bool: `True` if the path exists, `False` if the filesystem reports it as not found.

    Raises:
        ProbeError: For any other access failure (permissions, I/O errors, ...).
    """
    logger.debug(f"Checking if directory or file exists on path: {path}")
    try:
        os.stat(path)
        return True
    except FileNotFoundError:
        logger.debug(f"Directory or file doesn't exist: {path}")
        return False
    except OSError as e:
        raise ProbeError(
            f"[exists] Unhandled error while checking {path}",
            path=os.fspath(path),
            details=str(e),
        ) from e


def ensure_dir(path: Pathish) -> bool:
    """
    Make sure a directory exists at `path`, creating a single level if needed.

    Parent directories are not created.

    Returns:
        bool: Always `True` when the directory exists or was created.

    Raises:
        ProbeError: When the path cannot be probed or created (including a missing parent).
    """
    if exists(path):
        return True

    logger.debug(f"Creating directory as it doesn't exist: {path}")
    try:
        os.mkdir(path)
    except FileExistsError:
        # Another caller created it between the probe and mkdir
        pass
    except OSError as e:
        raise ProbeError(
            f"[ensure_dir] Unable to create directory {path}",
            path=os.fspath(path),
            details=str(e),
        ) from e
    return True
