"""
Configuration loading for walletfetch.

Settings come from an optional YAML file in the platformdirs user config
directory and are overridden by environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import platformdirs
import yaml

from walletfetch.constants import (
    APP_NAME,
    CACHE_DIR_ENV_VAR,
    CONFIG_FILE_NAME,
    DEFAULT_LOCAL_RPC_URL,
    DOWNLOADS_DIR_NAME,
    GH_PAT_ENV_VAR,
    GH_USERNAME_ENV_VAR,
    LOCAL_TEST_ENV_VAR,
    LOCAL_TEST_PACKAGE_PATH,
    RPC_URL_ENV_VAR,
)
from walletfetch.exceptions import ConfigFileError
from walletfetch.log_utils import logger


@dataclass(frozen=True)
class GithubCredentials:
    """Basic-auth credentials for GitHub release listings and downloads."""

    username: str
    token: str

    @classmethod
    def from_values(
        cls, username: Optional[str], token: Optional[str]
    ) -> Optional["GithubCredentials"]:
        """
        Build credentials only when both values are present.

        Returns:
            GithubCredentials or None if either value is missing or blank.
        """
        username = (username or "").strip()
        token = (token or "").strip()
        if username and token:
            return cls(username=username, token=token)
        return None

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> Optional["GithubCredentials"]:
        """Read GH_USERNAME and GH_PAT from the environment."""
        env = os.environ if environ is None else environ
        return cls.from_values(env.get(GH_USERNAME_ENV_VAR), env.get(GH_PAT_ENV_VAR))

    def as_auth(self) -> Tuple[str, str]:
        return (self.username, self.token)

    def __repr__(self) -> str:
        return f"GithubCredentials(username={self.username!r}, token='***')"


@dataclass
class Settings:
    """Resolved runtime settings."""

    cache_dir: Path
    credentials: Optional[GithubCredentials] = None
    rpc_url: str = DEFAULT_LOCAL_RPC_URL


def get_package_path() -> Path:
    """
    Return the directory of the walletfetch package.

    When WALLETFETCH_LOCAL_TEST is set, the checkout copy under the current
    working directory is used instead of the installed package.
    """
    if os.environ.get(LOCAL_TEST_ENV_VAR):
        return Path(LOCAL_TEST_PACKAGE_PATH)
    return Path(__file__).resolve().parent


def get_config_file() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME)) / CONFIG_FILE_NAME


def load_config_file(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the YAML configuration file.

    Parameters:
        config_file (Optional[Path]): Explicit file to read; defaults to
            `walletfetch.yaml` in the platformdirs user config directory.

    Returns:
        Dict[str, Any]: The parsed mapping, or an empty dict when the file
        does not exist or is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is not valid YAML, or
            does not contain a mapping.
    """
    path = Path(config_file) if config_file is not None else get_config_file()
    if not path.exists():
        logger.debug(f"No configuration file at {path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigFileError(
            f"[load_settings] Unable to read configuration file {path}",
            path=str(path),
            details=str(e),
        ) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigFileError(
            f"[load_settings] Configuration file {path} must contain a mapping",
            path=str(path),
            details=f"got {type(config).__name__}",
        )

    logger.debug(f"Loaded configuration from {path}")
    return config


def load_settings(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from the config file and the environment.

    Environment variables take precedence over file values. Credentials are
    only used when both a username and a token are available.
    """
    env = os.environ if environ is None else environ
    config = load_config_file(config_file)

    def _pick(env_var: str, config_key: str) -> Optional[str]:
        value = env.get(env_var)
        if value:
            return value
        file_value = config.get(config_key)
        return str(file_value) if file_value not in (None, "") else None

    credentials = GithubCredentials.from_values(
        _pick(GH_USERNAME_ENV_VAR, "GH_USERNAME"),
        _pick(GH_PAT_ENV_VAR, "GH_PAT"),
    )
    if credentials is None:
        logger.debug(
            f"No {GH_USERNAME_ENV_VAR}/{GH_PAT_ENV_VAR} found - using unauthenticated GitHub requests"
        )

    cache_dir_value = _pick(CACHE_DIR_ENV_VAR, "CACHE_DIR")
    cache_dir = (
        Path(cache_dir_value).expanduser()
        if cache_dir_value
        else get_package_path() / DOWNLOADS_DIR_NAME
    )

    return Settings(
        cache_dir=cache_dir,
        credentials=credentials,
        rpc_url=_pick(RPC_URL_ENV_VAR, "LOCAL_RPC_URL") or DEFAULT_LOCAL_RPC_URL,
    )
