"""Site uploader for cocoons-ftp.

Mirrors a local directory tree onto the FTP server, creating each
remote directory before anything is uploaded into it.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Union

from cocoons_ftp.ftp.connection import FTPSession, join_remote_path
from cocoons_ftp.ftp.exceptions import FTPNotConnectedError, FTPUploadError

logger = logging.getLogger("cocoons_ftp.uploader")

# Hidden files and folders (.git, .htaccess, ...) are never mirrored
DEFAULT_IGNORE_PATTERNS = (r"^[.]",)


@dataclass
class UploadSummary:
    """Counters for an upload operation."""
    files_uploaded: int = 0
    directories_created: int = 0
    bytes_transferred: int = 0
    ignored: List[str] = field(default_factory=list)

    def merge(self, other: "UploadSummary") -> "UploadSummary":
        """Add the counters of a subtree summary to this one."""
        self.files_uploaded += other.files_uploaded
        self.directories_created += other.directories_created
        self.bytes_transferred += other.bytes_transferred
        self.ignored.extend(other.ignored)
        return self


def compile_patterns(patterns: Sequence[Union[str, re.Pattern]]) -> List[re.Pattern]:
    """Compile ignore patterns, accepting already compiled ones."""
    return [re.compile(p) if isinstance(p, str) else p for p in patterns]


class RemoteUploader:
    """Uploads a local directory tree to the FTP server."""

    def __init__(
        self,
        session: FTPSession,
        ignore_patterns: Sequence[Union[str, re.Pattern]] = DEFAULT_IGNORE_PATTERNS
    ):
        """
        Initialize the uploader.

        Args:
            session: Connected FTP session
            ignore_patterns: Regular expressions matched against entry names
        """
        self._session = session
        self._ignore_patterns = compile_patterns(ignore_patterns)

    def is_ignored(self, name: str) -> bool:
        """True if a local entry name matches one of the ignore patterns."""
        return any(p.search(name) for p in self._ignore_patterns)

    def upload_tree(self, local_dir: Path, remote_dir: str = ".") -> UploadSummary:
        """
        Upload the content of a local directory into a remote directory.

        Args:
            local_dir: Local directory whose content is uploaded
            remote_dir: Existing remote directory receiving the content

        Returns:
            UploadSummary with transfer counters

        Raises:
            FTPNotConnectedError: If the session is not connected
            FTPCreateError: If a remote directory cannot be created
            FTPUploadError: If a file upload fails
            OSError: If a local directory cannot be read
        """
        if not self._session.is_connected:
            raise FTPNotConnectedError("Upload")

        local_dir = Path(local_dir)
        logger.info(f"Uploading {local_dir} to {remote_dir}")
        summary = self._upload_directory(local_dir, remote_dir)
        logger.info(
            f"Upload complete: {summary.files_uploaded} files, "
            f"{summary.directories_created} folders, "
            f"{summary.bytes_transferred} bytes"
        )
        return summary

    def _upload_directory(self, local_dir: Path, remote_dir: str) -> UploadSummary:
        summary = UploadSummary()
        for entry in sorted(local_dir.iterdir(), key=lambda p: p.name):
            summary.merge(self._upload_entry(entry, remote_dir))
        return summary

    def _upload_entry(self, local_path: Path, remote_dir: str) -> UploadSummary:
        if self.is_ignored(local_path.name):
            logger.debug(f"Ignored: {local_path}")
            return UploadSummary(ignored=[str(local_path)])

        remote_path = join_remote_path(remote_dir, local_path.name)

        if local_path.is_file():
            bytes_sent = self._session.upload_file(local_path, remote_path)
            return UploadSummary(files_uploaded=1, bytes_transferred=bytes_sent)

        if local_path.is_dir():
            self._session.create_directory(remote_path)
            summary = self._upload_directory(local_path, remote_path)
            summary.directories_created += 1
            return summary

        logger.warning(f"Ignore: {local_path} is neither a file nor a directory")
        return UploadSummary(ignored=[str(local_path)])

    def upload_optional_file(self, local_path: Path, remote_path: str) -> bool:
        """
        Upload a file whose absence is not an error.

        Args:
            local_path: Local file path
            remote_path: Remote FTP path

        Returns:
            True if uploaded, False if the file is missing or the upload failed
        """
        local_path = Path(local_path)
        if not local_path.is_file():
            logger.info(f"Optional file not found, skipped: {local_path}")
            return False

        try:
            self._session.upload_file(local_path, remote_path)
        except FTPUploadError as e:
            logger.warning(f"Optional file not deployed: {e}")
            return False
        return True
