"""Input validators for cocoons-ftp.

Provides validation functions for configuration values like host
names, ports, timeouts and the local target folder.
"""

import ipaddress
import re
from pathlib import Path
from typing import Optional, Tuple


# Hostname pattern (simplified)
HOSTNAME_PATTERN = re.compile(
    r'^(?=.{1,253}$)(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.[A-Za-z0-9-]{1,63})*$'
)


def _is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def validate_host(host: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a host (IPv4 or IPv6 address, or hostname).

    Args:
        host: Host string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(host, str) or not host.strip():
        return False, "Host is required"

    host = host.strip()

    if _is_ip_address(host) or HOSTNAME_PATTERN.match(host):
        return True, None

    return False, f"Invalid host: {host}. Must be a valid IP address or hostname."


def validate_port(port) -> Tuple[bool, Optional[str]]:
    """
    Validate a port number.

    Args:
        port: Port number to validate (int or numeric string)

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(port, bool):
        return False, "Port must be a number"
    if not isinstance(port, int):
        try:
            port = int(port)
        except (ValueError, TypeError):
            return False, "Port must be a number"

    if port < 1 or port > 65535:
        return False, f"Port must be between 1 and 65535, got {port}"

    return True, None


def validate_timeout(timeout) -> Tuple[bool, Optional[str]]:
    """
    Validate a timeout value in seconds.

    Args:
        timeout: Timeout in seconds

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(timeout, bool):
        return False, "Timeout must be a number"
    if not isinstance(timeout, int):
        try:
            timeout = int(timeout)
        except (ValueError, TypeError):
            return False, "Timeout must be a number"

    if timeout < 5 or timeout > 300:
        return False, f"Timeout must be between 5 and 300 seconds, got {timeout}"

    return True, None


def validate_target_dir(path: Path) -> Tuple[bool, Optional[str]]:
    """
    Validate the local folder holding the generated site.

    Args:
        path: Target folder

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not path:
        return False, "Target folder is required"

    path = Path(path)

    if not path.exists():
        return False, f"Target folder does not exist: {path}"
    if not path.is_dir():
        return False, f"Target is not a folder: {path}"

    return True, None
