import io
import zipfile
from pathlib import Path
from unittest.mock import MagicMock

import platformdirs
import pytest
import requests

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.request."
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    """Register the markers used across the suite."""
    for marker in (
        "unit: fast isolated tests",
        "network: network selection tests",
        "releases: release resolution tests",
        "downloads: archive download and cache tests",
    ):
        config.addinivalue_line("markers", marker)


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs and walletfetch environment variables at a temporary layout.

    Credentials and cache overrides from the developer's shell are removed so
    every test starts unauthenticated with no configuration file.
    """
    base = tmp_path_factory.mktemp("walletfetch")
    config_dir = base / "config"
    config_dir.mkdir(parents=True, exist_ok=True)

    for var in (
        "GH_USERNAME",
        "GH_PAT",
        "WALLETFETCH_CACHE_DIR",
        "WALLETFETCH_RPC_URL",
        "WALLETFETCH_LOCAL_TEST",
    ):
        monkeypatch.delenv(var, raising=False)

    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )


def pytest_runtest_setup():
    """
    Prevent real network requests during tests by replacing requests entry points with a blocking callable.
    """
    requests.get = _block_network
    requests.post = _block_network
    requests.put = _block_network
    requests.delete = _block_network
    requests.head = _block_network
    requests.patch = _block_network
    requests.options = _block_network
    requests.Session.request = _block_network


def build_zip(files):
    """
    Build an in-memory zip archive.

    Parameters:
        files (dict): Mapping of archive member names to text or bytes content.

    Returns:
        bytes: The archive content.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def make_response(status_code=200, json_data=None, content=b"", headers=None):
    """
    Create a mocked requests.Response.

    `raise_for_status` raises requests.HTTPError for 4xx/5xx codes and
    `iter_content` yields `content` in two chunks.
    """
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.headers = headers or {}
    response.json.return_value = json_data

    def _raise_for_status():
        if status_code >= 400:
            raise requests.HTTPError(f"{status_code} Error", response=response)

    response.raise_for_status.side_effect = _raise_for_status
    middle = len(content) // 2
    response.iter_content.side_effect = lambda chunk_size=None: iter(
        [content[:middle], content[middle:]]
    )
    return response


@pytest.fixture
def zip_bytes():
    return build_zip


@pytest.fixture
def mock_response():
    return make_response


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    return tmp_path / "downloads"
