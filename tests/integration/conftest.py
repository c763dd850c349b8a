"""Fixtures for integration tests against a local FTP server."""

import pytest

from .mock_ftp_server import MockFTPServer


@pytest.fixture
def ftp_server():
    """Provide a running local FTP server."""
    server = MockFTPServer()
    server.start()
    yield server
    server.stop()
