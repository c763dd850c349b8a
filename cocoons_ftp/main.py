"""Command-line entry point for cocoons-ftp.

Deploys the site of the current directory; any argument only prints
the usage.
"""

import sys
from pathlib import Path
from typing import List, Optional

from .config.paths import get_log_file_path
from .deployer import deploy_site
from .utils.logging import setup_logging

USAGE = "Usage: cocoons-ftp\n"


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run a deployment from the current working directory.

    Args:
        argv: Command-line arguments without the program name

    Returns:
        Process exit code
    """
    if argv is None:
        argv = sys.argv[1:]

    if argv:
        print(USAGE)
        return 0

    logger = setup_logging(log_file=get_log_file_path())
    logger.info("Deployment starting")

    result = deploy_site(Path.cwd())
    print(result.message)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
