"""Site configuration for cocoons-ftp.

Provides the FTPSettings / SiteConfig dataclasses and ConfigLoader,
which reads cocoons.json from the site folder.
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

from cocoons_ftp.config.paths import HTACCESS_FILE_NAME, get_config_path
from cocoons_ftp.ftp.connection import FTPConnectionConfig
from cocoons_ftp.ftp.uploader import DEFAULT_IGNORE_PATTERNS
from cocoons_ftp.utils.validators import validate_host, validate_port, validate_timeout


DEFAULT_TARGET = "target"


class ConfigError(Exception):
    """Missing or malformed site configuration."""


def _check(result: Tuple[bool, Optional[str]], key: str) -> None:
    is_valid, error = result
    if not is_valid:
        raise ConfigError(f"Invalid value for '{key}': {error}")


@dataclass(frozen=True)
class FTPSettings:
    """The "ftp" section of cocoons.json."""
    host: str
    port: int = 21
    user: str = "anonymous"
    password: Optional[str] = None
    folder: Optional[str] = None
    delete_existing_files: bool = False
    passive: bool = True
    timeout: int = 30
    debug: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "FTPSettings":
        """
        Build settings from the JSON "ftp" object, ignoring unknown keys.

        Raises:
            ConfigError: If a value is missing or invalid
        """
        if not isinstance(data, dict):
            raise ConfigError("The 'ftp' section must be an object")

        host = data.get("host")
        _check(validate_host(host), "ftp.host")

        port = data.get("port", cls.port)
        _check(validate_port(port), "ftp.port")

        timeout = data.get("timeout", cls.timeout)
        _check(validate_timeout(timeout), "ftp.timeout")

        password = data.get("password")
        folder = data.get("folder") or None

        return cls(
            host=host.strip(),
            port=int(port),
            user=data.get("user") or cls.user,
            password=None if password is None else str(password),
            folder=None if folder is None else str(folder),
            delete_existing_files=bool(data.get("deleteExistingFiles", False)),
            passive=bool(data.get("passive", True)),
            timeout=int(timeout),
            debug=bool(data.get("debugMode", False)),
        )

    def to_connection_config(self) -> FTPConnectionConfig:
        """Connection parameters for FTPSession.connect()."""
        return FTPConnectionConfig(
            host=self.host,
            port=self.port,
            username=self.user,
            folder=self.folder,
            passive_mode=self.passive,
            timeout=self.timeout,
            debug=self.debug,
        )


@dataclass(frozen=True)
class SiteConfig:
    """Deployment configuration loaded once per run."""
    ftp: Optional[FTPSettings] = None
    target: str = DEFAULT_TARGET
    htaccess_generate: bool = False
    ignore: Tuple[str, ...] = DEFAULT_IGNORE_PATTERNS

    @classmethod
    def from_dict(cls, data: Any) -> "SiteConfig":
        """
        Build the configuration from the parsed cocoons.json document.

        A missing "ftp" section is allowed here; the deployer refuses it.

        Raises:
            ConfigError: If the document or one of its values is invalid
        """
        if not isinstance(data, dict):
            raise ConfigError("The configuration must be a JSON object")

        ftp_data = data.get("ftp")
        ftp = FTPSettings.from_dict(ftp_data) if ftp_data is not None else None

        target = data.get("target") or DEFAULT_TARGET
        if not isinstance(target, str):
            raise ConfigError("Invalid value for 'target': must be a string")

        htaccess = data.get("htaccess") or {}
        if not isinstance(htaccess, dict):
            raise ConfigError("Invalid value for 'htaccess': must be an object")

        ignore = data.get("ignore", DEFAULT_IGNORE_PATTERNS)
        if not isinstance(ignore, (list, tuple)) or not all(isinstance(p, str) for p in ignore):
            raise ConfigError("Invalid value for 'ignore': must be a list of patterns")
        for pattern in ignore:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ConfigError(f"Invalid ignore pattern '{pattern}': {e}")

        return cls(
            ftp=ftp,
            target=target,
            htaccess_generate=bool(htaccess.get("generate", False)),
            ignore=tuple(ignore),
        )

    def target_path(self, site_folder: Path) -> Path:
        """Local folder holding the generated site."""
        return Path(site_folder) / self.target

    def htaccess_path(self, site_folder: Path) -> Path:
        """Local access-control file at the root of the target folder."""
        return self.target_path(site_folder) / HTACCESS_FILE_NAME


class ConfigLoader:
    """Loads cocoons.json from a site folder."""

    def __init__(self, site_folder: Path):
        """
        Initialize the loader.

        Args:
            site_folder: Folder containing cocoons.json
        """
        self._config_path = get_config_path(site_folder)

    @property
    def config_path(self) -> Path:
        """Path to the configuration file."""
        return self._config_path

    def load(self) -> SiteConfig:
        """
        Load the configuration from disk.

        Returns:
            SiteConfig instance

        Raises:
            ConfigError: If the file is missing, unreadable or invalid
        """
        if not self._config_path.exists():
            raise ConfigError(f"Configuration file not found: {self._config_path}")

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {self._config_path}: {e}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"Invalid UTF-8 in {self._config_path}: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read {self._config_path}: {e}")

        return SiteConfig.from_dict(data)
