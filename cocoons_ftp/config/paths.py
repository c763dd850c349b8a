"""Path constants and discovery for cocoons-ftp.

Defines the site configuration file name and application data directories.
"""

import os
import sys
from pathlib import Path


# Application name for config directories
APP_NAME = "cocoons-ftp"

# Site configuration file, read from the site folder
CONFIG_FILE_NAME = "cocoons.json"

# Access-control file deployed separately from the mirrored tree
HTACCESS_FILE_NAME = ".htaccess"


def get_app_data_dir() -> Path:
    """
    Get the application data directory.

    Returns:
        Path to app data directory (created if not exists)

    Platform-specific locations:
        - Windows: %APPDATA%/cocoons-ftp
        - Linux: ~/.config/cocoons-ftp
        - macOS: ~/Library/Application Support/cocoons-ftp
    """
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

    app_dir = base / APP_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_config_path(site_folder: Path) -> Path:
    """
    Get the path to the site configuration file.

    Args:
        site_folder: Folder containing the site sources

    Returns:
        Path to cocoons.json
    """
    return Path(site_folder) / CONFIG_FILE_NAME


def get_log_dir() -> Path:
    """
    Get the directory for log files.

    Returns:
        Path to logs directory (created if not exists)
    """
    log_dir = get_app_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_log_file_path() -> Path:
    """
    Get the path to the main log file.

    Returns:
        Path to application log file
    """
    return get_log_dir() / "app.log"
