"""Secure credential storage for cocoons-ftp.

Uses the system keyring (Windows Credential Manager, macOS Keychain,
Linux Secret Service) so the FTP password can stay out of cocoons.json.
"""

from typing import Optional

import keyring
from keyring.errors import KeyringError


class CredentialManager:
    """Secure credential storage using system keyring."""

    SERVICE_NAME = "cocoons-ftp"

    def _make_key(self, host: str, username: str) -> str:
        """
        Create a unique key for the credential.

        Args:
            host: FTP host
            username: FTP username

        Returns:
            Unique key string
        """
        return f"{host}:{username}"

    def get_password(self, host: str, username: str) -> Optional[str]:
        """
        Retrieve saved password.

        Args:
            host: FTP host
            username: FTP username

        Returns:
            Password string or None if not found
        """
        try:
            key = self._make_key(host, username)
            return keyring.get_password(self.SERVICE_NAME, key)
        except KeyringError:
            return None

    def resolve_password(
        self,
        host: str,
        username: str,
        configured: Optional[str] = None
    ) -> str:
        """
        Pick the password for a connection.

        The password from cocoons.json wins; otherwise the keyring entry
        for host/username is used, and finally an empty password.

        Args:
            host: FTP host
            username: FTP username
            configured: Password found in the configuration, if any

        Returns:
            Password string (possibly empty)
        """
        if configured is not None:
            return configured
        return self.get_password(host, username) or ""
