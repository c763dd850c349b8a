"""Site deployment for cocoons-ftp.

Runs the fixed deployment sequence: load configuration, connect,
empty the remote root, upload the target folder, upload the optional
.htaccess file, disconnect.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from cocoons_ftp.config.credentials import CredentialManager
from cocoons_ftp.config.paths import HTACCESS_FILE_NAME
from cocoons_ftp.config.settings import ConfigError, ConfigLoader, SiteConfig
from cocoons_ftp.ftp.cleaner import CleanResult, RemoteCleaner
from cocoons_ftp.ftp.connection import FTPSession, join_remote_path
from cocoons_ftp.ftp.exceptions import FTPError
from cocoons_ftp.ftp.uploader import RemoteUploader, UploadSummary
from cocoons_ftp.utils.logging import add_secret
from cocoons_ftp.utils.validators import validate_target_dir

logger = logging.getLogger("cocoons_ftp.deployer")

# Remote root, relative to the configured FTP folder
REMOTE_ROOT = "."

HTACCESS_DEPLOYED = "deployed"
HTACCESS_IGNORED = "ignored"
HTACCESS_SKIPPED = "skipped"


class DeploymentState(Enum):
    """Step reached by a deployment."""
    INIT = "init"
    CONNECTED = "connected"
    CLEANED = "cleaned"
    UPLOADED = "uploaded"
    DISCONNECTED = "disconnected"
    FAILED = "failed"


@dataclass
class DeploymentResult:
    """Outcome of one deployment run."""
    success: bool
    server: str = ""
    error_message: Optional[str] = None
    htaccess_status: str = HTACCESS_SKIPPED
    clean_result: Optional[CleanResult] = None
    upload_summary: Optional[UploadSummary] = None
    duration_seconds: float = 0.0

    @property
    def message(self) -> str:
        """One-line status for the user."""
        if self.success:
            return f"The site is correctly deployed with FTP in : {self.server}"
        return f"Error during the deployment with ftp : {self.error_message}"


SessionFactory = Callable[[], FTPSession]


class SiteDeployer:
    """Deploys the generated site of a cocoons site folder."""

    def __init__(
        self,
        site_folder: Path,
        session_factory: SessionFactory = FTPSession,
        credentials: Optional[CredentialManager] = None
    ):
        """
        Initialize the deployer.

        Args:
            site_folder: Folder containing cocoons.json and the target folder
            session_factory: Callable returning a new, unconnected session
            credentials: Password lookup used when cocoons.json has none
        """
        self._site_folder = Path(site_folder)
        self._session_factory = session_factory
        self._credentials = credentials or CredentialManager()
        self._state = DeploymentState.INIT

    @property
    def state(self) -> DeploymentState:
        """Current deployment state."""
        return self._state

    def deploy(self) -> DeploymentResult:
        """
        Run the whole deployment.

        Never raises for configuration, FTP or local file errors: they
        are reported in the returned DeploymentResult.

        Returns:
            DeploymentResult with success/failure status
        """
        self._state = DeploymentState.INIT
        start_time = time.time()
        result = DeploymentResult(success=False)

        try:
            config = ConfigLoader(self._site_folder).load()
            self._run(config, result)
            result.success = True
            self._state = DeploymentState.DISCONNECTED
            logger.info(f"Deployment finished: {result.server}")
        except (ConfigError, FTPError, OSError) as e:
            self._state = DeploymentState.FAILED
            result.error_message = str(e)
            logger.error(f"Deployment failed: {e}")

        result.duration_seconds = time.time() - start_time
        return result

    def _run(self, config: SiteConfig, result: DeploymentResult) -> None:
        if config.ftp is None:
            raise ConfigError("There is no ftp config into the cocoons.json file")

        target = config.target_path(self._site_folder)
        is_valid, error = validate_target_dir(target)
        if not is_valid:
            raise ConfigError(error)

        ftp_settings = config.ftp
        connection_config = ftp_settings.to_connection_config()
        password = self._credentials.resolve_password(
            ftp_settings.host, ftp_settings.user, ftp_settings.password
        )
        add_secret(password)

        with self._session_factory() as session:
            session.connect(connection_config, password)
            self._state = DeploymentState.CONNECTED
            result.server = connection_config.server

            if ftp_settings.delete_existing_files:
                result.clean_result = RemoteCleaner(session).clean(REMOTE_ROOT)
            else:
                logger.info("Existing remote files are kept")
            self._state = DeploymentState.CLEANED

            uploader = RemoteUploader(session, config.ignore)
            result.upload_summary = uploader.upload_tree(target, REMOTE_ROOT)
            self._state = DeploymentState.UPLOADED

            result.htaccess_status = self._deploy_htaccess(uploader, config)

    def _deploy_htaccess(self, uploader: RemoteUploader, config: SiteConfig) -> str:
        """Upload the access-control file; its absence is not an error."""
        if not config.htaccess_generate:
            return HTACCESS_SKIPPED

        uploaded = uploader.upload_optional_file(
            config.htaccess_path(self._site_folder),
            join_remote_path(REMOTE_ROOT, HTACCESS_FILE_NAME)
        )
        status = HTACCESS_DEPLOYED if uploaded else HTACCESS_IGNORED
        logger.info(f".htaccess {status}")
        return status


def deploy_site(
    site_folder: Optional[Path] = None,
    session_factory: SessionFactory = FTPSession
) -> DeploymentResult:
    """
    Deploy with FTP the cocoons site found in a folder.

    The target subfolder must already contain the generated site.

    Args:
        site_folder: Folder containing the site (default: current directory)
        session_factory: Callable returning a new, unconnected session

    Returns:
        DeploymentResult
    """
    if site_folder is None:
        site_folder = Path.cwd()
    return SiteDeployer(site_folder, session_factory).deploy()
