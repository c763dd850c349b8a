"""FTP session management for cocoons-ftp.

Provides ConnectionState enum, FTPConnectionConfig dataclass,
RemoteEntry listing rows and the FTPSession class that owns the
single connection used during a deployment.
"""

import logging
import re
import socket
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from ftplib import FTP, all_errors, error_perm
from pathlib import Path
from typing import List, Optional

from cocoons_ftp.ftp.exceptions import (
    FTPConnectionError,
    FTPAuthenticationError,
    FTPCreateError,
    FTPDeleteError,
    FTPNotConnectedError,
    FTPPathError,
    FTPTimeoutError,
    FTPUploadError,
)

logger = logging.getLogger("cocoons_ftp.session")

# MLSD reply codes meaning "command not implemented"
MLSD_UNSUPPORTED_CODES = ("500", "501", "502")

# LIST output formats
UNIX_MODE_PATTERN = re.compile(r"^[-dlbcps][-rwxsStT]{9}")
MS_DATE_PATTERN = re.compile(r"^\d{2}-\d{2}-\d{2,4}$")
TOTAL_LINE_PATTERN = re.compile(r"^total\s+\d+\s*$", re.IGNORECASE)


class ConnectionState(Enum):
    """FTP connection state."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class RemoteEntryType(Enum):
    """Kind of entry returned by a remote listing."""
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True)
class RemoteEntry:
    """One row of a remote directory listing."""
    name: str
    type: RemoteEntryType
    raw_type: str = ""

    @property
    def is_file(self) -> bool:
        return self.type == RemoteEntryType.FILE

    @property
    def is_directory(self) -> bool:
        return self.type == RemoteEntryType.DIRECTORY


@dataclass
class FTPConnectionConfig:
    """FTP connection configuration."""
    host: str
    port: int = 21
    username: str = "anonymous"
    folder: Optional[str] = None
    passive_mode: bool = True
    timeout: int = 30
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.host:
            raise ValueError("Host is required")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {self.port}")
        if not 5 <= self.timeout <= 300:
            raise ValueError(f"Timeout must be between 5 and 300, got {self.timeout}")

    @property
    def server(self) -> str:
        """Human-readable server location, including the remote folder."""
        location = f"{self.host}:{self.port}"
        if self.folder:
            location = f"{location}/{self.folder.lstrip('/')}"
        return location


def join_remote_path(parent: str, name: str) -> str:
    """Join a remote directory and an entry name with '/'."""
    return f"{parent.rstrip('/')}/{name}"


def _parse_unix_line(line: str) -> Optional[RemoteEntry]:
    parts = line.split(None, 8)
    if len(parts) < 9 or not UNIX_MODE_PATTERN.match(parts[0]):
        return None

    name = parts[8]
    flag = parts[0][0]
    if flag == "d":
        entry_type = RemoteEntryType.DIRECTORY
    elif flag == "-":
        entry_type = RemoteEntryType.FILE
    else:
        entry_type = RemoteEntryType.OTHER
        if flag == "l" and " -> " in name:
            name = name.split(" -> ", 1)[0]
    return RemoteEntry(name=name, type=entry_type, raw_type=flag)


def _parse_ms_line(line: str) -> Optional[RemoteEntry]:
    parts = line.split(None, 3)
    if len(parts) < 4 or not MS_DATE_PATTERN.match(parts[0]):
        return None

    dir_or_size, name = parts[2], parts[3]
    if dir_or_size.upper() == "<DIR>":
        return RemoteEntry(name=name, type=RemoteEntryType.DIRECTORY, raw_type="<DIR>")
    if dir_or_size.isdigit():
        return RemoteEntry(name=name, type=RemoteEntryType.FILE, raw_type="file")
    return None


def parse_list_line(line: str) -> Optional[RemoteEntry]:
    """
    Parse one LIST line in Unix or Microsoft format.

    Args:
        line: Raw line, e.g. "drwxr-xr-x  2 root root 4096 Jan  1 12:00 assets"
            or "01-01-20  12:00PM       <DIR>          assets"

    Returns:
        RemoteEntry, or None for blank lines, "total N" lines and the
        "." / ".." entries

    Raises:
        ValueError: If the line is in neither format
    """
    if not line.strip() or TOTAL_LINE_PATTERN.match(line):
        return None

    entry = _parse_unix_line(line) or _parse_ms_line(line)
    if entry is None:
        raise ValueError(f"Unrecognized LIST line: {line!r}")

    if entry.name in (".", ".."):
        return None
    return entry


class FTPSession:
    """Owns one authenticated FTP connection and its primitive operations."""

    # Block size for FTP transfers (8KB)
    BLOCK_SIZE = 8192

    def __init__(self):
        """Initialize the session."""
        self._ftp: Optional[FTP] = None
        self._config: Optional[FTPConnectionConfig] = None
        self._state = ConnectionState.DISCONNECTED
        self._connected_at: Optional[datetime] = None
        self._last_activity: Optional[datetime] = None
        self._error_message: Optional[str] = None

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """True if currently connected."""
        return self._state == ConnectionState.CONNECTED

    @property
    def config(self) -> Optional[FTPConnectionConfig]:
        """Current connection configuration."""
        return self._config

    @property
    def connected_at(self) -> Optional[datetime]:
        """Timestamp when connection was established."""
        return self._connected_at

    @property
    def last_activity(self) -> Optional[datetime]:
        """Timestamp of last successful operation."""
        return self._last_activity

    @property
    def error_message(self) -> Optional[str]:
        """Last error message if state is ERROR."""
        return self._error_message

    @property
    def ftp(self) -> FTP:
        """
        Get the underlying FTP object.

        Raises:
            FTPNotConnectedError: If not connected
        """
        if not self.is_connected or self._ftp is None:
            raise FTPNotConnectedError("FTP access")
        return self._ftp

    def __enter__(self) -> "FTPSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    def connect(self, config: FTPConnectionConfig, password: str = "") -> None:
        """
        Establish FTP connection and enter the configured folder.

        Args:
            config: Connection configuration
            password: FTP password

        Raises:
            FTPConnectionError: If connection fails
            FTPAuthenticationError: If login fails
            FTPTimeoutError: If connection times out
            FTPPathError: If the remote folder cannot be entered
        """
        self._config = config
        self._state = ConnectionState.CONNECTING
        self._error_message = None

        logger.info(f"Connecting to the FTP server: {config.host}:{config.port}")
        try:
            self._ftp = FTP()
            self._ftp.set_debuglevel(1 if config.debug else 0)

            try:
                welcome = self._ftp.connect(
                    host=config.host,
                    port=config.port,
                    timeout=config.timeout
                )
            except socket.timeout:
                raise FTPTimeoutError("Connection", config.timeout)
            except (socket.error, OSError) as e:
                raise FTPConnectionError(config.host, config.port, e)
            logger.debug(f"Server welcome: {welcome}")

            try:
                self._ftp.login(user=config.username, passwd=password)
            except error_perm as e:
                raise FTPAuthenticationError(config.username, e)

            self._ftp.set_pasv(config.passive_mode)

            if config.folder:
                logger.info(f"Change current directory: {config.folder}")
                try:
                    self._ftp.cwd(config.folder)
                except all_errors as e:
                    raise FTPPathError(config.folder, "change directory to", e)

            self._state = ConnectionState.CONNECTED
            self._connected_at = datetime.now()
            self._last_activity = self._connected_at
            logger.info("Successfully connected to the FTP server")

        except (FTPConnectionError, FTPAuthenticationError, FTPTimeoutError, FTPPathError) as e:
            self._fail(str(e))
            raise
        except Exception as e:
            self._fail(str(e))
            raise FTPConnectionError(config.host, config.port, e)

    def _fail(self, message: str) -> None:
        """Record a connection failure and drop the socket."""
        self._state = ConnectionState.ERROR
        self._error_message = message
        if self._ftp:
            try:
                self._ftp.close()
            except Exception as e:
                logger.debug(f"Error closing failed connection: {e}")
        self._ftp = None

    def disconnect(self) -> None:
        """Close FTP connection gracefully. Errors are logged, never raised."""
        if self._ftp:
            try:
                self._ftp.quit()
                logger.debug("FTP server logout")
            except Exception as e:
                logger.warning(f"FTP logout error: {e}")
                try:
                    self._ftp.close()
                except Exception as close_error:
                    logger.debug(f"Error closing connection: {close_error}")

        self._ftp = None
        self._state = ConnectionState.DISCONNECTED
        self._connected_at = None

    def _update_activity(self) -> None:
        """Update last activity timestamp."""
        self._last_activity = datetime.now()

    def list_directory(self, path: str = ".") -> List[RemoteEntry]:
        """
        List the immediate children of a remote directory.

        Uses MLSD and falls back to LIST for servers without MLSD support.

        Args:
            path: Remote directory path

        Returns:
            List of RemoteEntry

        Raises:
            FTPNotConnectedError: If not connected
            FTPPathError: If the directory cannot be listed
        """
        ftp = self.ftp
        try:
            entries = self._mlsd(ftp, path)
        except error_perm as e:
            if not str(e).startswith(MLSD_UNSUPPORTED_CODES):
                raise FTPPathError(path, "list", e)
            logger.debug(f"MLSD not supported, falling back to LIST: {e}")
            entries = self._list(ftp, path)
        except all_errors as e:
            raise FTPPathError(path, "list", e)

        self._update_activity()
        return entries

    def _mlsd(self, ftp: FTP, path: str) -> List[RemoteEntry]:
        """List a directory using MLSD type facts."""
        entries = []
        for name, facts in ftp.mlsd(path, facts=["type"]):
            raw_type = facts.get("type", "").lower()
            if raw_type in ("cdir", "pdir") or name in (".", ".."):
                continue
            if raw_type == "file":
                entry_type = RemoteEntryType.FILE
            elif raw_type == "dir":
                entry_type = RemoteEntryType.DIRECTORY
            else:
                entry_type = RemoteEntryType.OTHER
            entries.append(RemoteEntry(name=name, type=entry_type, raw_type=raw_type))
        return entries

    def _list(self, ftp: FTP, path: str) -> List[RemoteEntry]:
        """List a directory using LIST output parsing."""
        lines: List[str] = []
        try:
            ftp.dir(path, lines.append)
        except all_errors as e:
            raise FTPPathError(path, "list", e)

        entries = []
        for line in lines:
            try:
                entry = parse_list_line(line)
            except ValueError as e:
                raise FTPPathError(path, "list", e)
            if entry is not None:
                entries.append(entry)
        return entries

    def delete_file(self, path: str) -> None:
        """
        Delete one remote file.

        Raises:
            FTPNotConnectedError: If not connected
            FTPDeleteError: If the server refuses the deletion
        """
        logger.info(f"Delete remote file: {path}")
        try:
            self.ftp.delete(path)
        except all_errors as e:
            raise FTPDeleteError(path, "delete the file", e)
        self._update_activity()

    def remove_directory(self, path: str) -> None:
        """
        Remove one remote directory. The directory must already be empty.

        Raises:
            FTPNotConnectedError: If not connected
            FTPDeleteError: If the server refuses the removal
        """
        logger.info(f"Delete remote folder: {path}")
        try:
            self.ftp.rmd(path)
        except all_errors as e:
            raise FTPDeleteError(path, "delete the folder", e)
        self._update_activity()

    def create_directory(self, path: str) -> None:
        """
        Create one remote directory. Its parent must exist.

        Raises:
            FTPNotConnectedError: If not connected
            FTPCreateError: If the server refuses the creation
        """
        logger.info(f"Create remote folder: {path}")
        try:
            self.ftp.mkd(path)
        except all_errors as e:
            raise FTPCreateError(path, e)
        self._update_activity()

    def upload_file(self, local_path: Path, remote_path: str) -> int:
        """
        Upload a single local file, overwriting the remote one.

        Args:
            local_path: Local file path
            remote_path: Remote FTP path

        Returns:
            Number of bytes transferred

        Raises:
            FTPNotConnectedError: If not connected
            FTPUploadError: If upload fails
        """
        ftp = self.ftp
        local_path = Path(local_path)
        bytes_sent = 0

        def callback(block: bytes) -> None:
            nonlocal bytes_sent
            bytes_sent += len(block)

        logger.info(f"Send file: {local_path} -> {remote_path}")
        try:
            with open(local_path, "rb") as f:
                ftp.storbinary(
                    f"STOR {remote_path}",
                    f,
                    blocksize=self.BLOCK_SIZE,
                    callback=callback
                )
        except Exception as e:
            raise FTPUploadError(str(local_path), remote_path, e)

        self._update_activity()
        return bytes_sent
