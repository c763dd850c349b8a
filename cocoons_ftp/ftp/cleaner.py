"""Remote tree cleaner for cocoons-ftp.

Empties a remote directory bottom-up: FTP servers refuse to remove a
directory that still has content, so every subdirectory is emptied
before its own RMD is sent.
"""

import logging
from dataclasses import dataclass

from cocoons_ftp.ftp.connection import FTPSession, RemoteEntry, join_remote_path
from cocoons_ftp.ftp.exceptions import FTPNotConnectedError, FTPUnsupportedEntryError

logger = logging.getLogger("cocoons_ftp.cleaner")


@dataclass
class CleanResult:
    """Counters for a clean operation."""
    files_deleted: int = 0
    directories_removed: int = 0

    def merge(self, other: "CleanResult") -> "CleanResult":
        """Add the counters of a subtree result to this one."""
        self.files_deleted += other.files_deleted
        self.directories_removed += other.directories_removed
        return self


class RemoteCleaner:
    """Recursively deletes the content of a remote directory."""

    def __init__(self, session: FTPSession):
        """
        Initialize the cleaner.

        Args:
            session: Connected FTP session
        """
        self._session = session

    def clean(self, path: str = ".") -> CleanResult:
        """
        Delete every file and subdirectory under a remote directory.

        The directory itself is kept.

        Args:
            path: Remote root to empty

        Returns:
            CleanResult with deletion counters

        Raises:
            FTPNotConnectedError: If the session is not connected
            FTPPathError: If a listing or deletion fails
            FTPUnsupportedEntryError: If an entry is neither file nor directory
        """
        if not self._session.is_connected:
            raise FTPNotConnectedError("Clean")

        logger.info(f"Deleting remote content of: {path}")
        result = self._empty_directory(path)
        logger.info(
            f"Clean complete: {result.files_deleted} files and "
            f"{result.directories_removed} folders deleted"
        )
        return result

    def _empty_directory(self, path: str) -> CleanResult:
        result = CleanResult()
        for entry in self._session.list_directory(path):
            result.merge(self._delete_entry(path, entry))
        return result

    def _delete_entry(self, parent: str, entry: RemoteEntry) -> CleanResult:
        path = join_remote_path(parent, entry.name)

        if entry.is_file:
            self._session.delete_file(path)
            return CleanResult(files_deleted=1)

        if entry.is_directory:
            result = self._empty_directory(path)
            self._session.remove_directory(path)
            result.directories_removed += 1
            return result

        raise FTPUnsupportedEntryError(path, entry.raw_type or entry.type.value)
