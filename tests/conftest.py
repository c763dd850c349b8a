"""Pytest configuration and shared fixtures for cocoons-ftp tests."""

import json
import pytest
from pathlib import Path
from typing import Callable, Optional

from tests.fakes import InMemoryFTPSession


# Test constants
TEST_FTP_HOST = "127.0.0.1"
TEST_FTP_PORT = 2121
TEST_FTP_USER = "testuser"
TEST_FTP_PASS = "testpass"


@pytest.fixture
def remote() -> InMemoryFTPSession:
    """Provide a connected in-memory FTP session with an empty root."""
    session = InMemoryFTPSession()
    session._connected = True
    return session


@pytest.fixture
def site_tree(tmp_path: Path) -> Path:
    """
    Create a generated site under <tmp>/site/target.

    target/index.html, target/.git/config (hidden),
    target/assets/style.css
    """
    target = tmp_path / "site" / "target"
    (target / ".git").mkdir(parents=True)
    (target / ".git" / "config").write_text("[core]\n")
    (target / "assets").mkdir()
    (target / "index.html").write_text("<html>home</html>")
    (target / "assets" / "style.css").write_text("body { color: black; }")
    return target


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing cocoons.json into <tmp>/site."""

    def _write(data: Optional[dict] = None, raw: Optional[str] = None) -> Path:
        site_folder = tmp_path / "site"
        site_folder.mkdir(parents=True, exist_ok=True)
        config_file = site_folder / "cocoons.json"
        config_file.write_text(raw if raw is not None else json.dumps(data), encoding="utf-8")
        return site_folder

    return _write


@pytest.fixture
def ftp_section() -> dict:
    """Provide a valid "ftp" section of cocoons.json."""
    return {
        "host": TEST_FTP_HOST,
        "port": TEST_FTP_PORT,
        "user": TEST_FTP_USER,
        "password": TEST_FTP_PASS,
        "deleteExistingFiles": True,
    }
