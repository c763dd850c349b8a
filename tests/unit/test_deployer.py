"""Unit tests for SiteDeployer.

Runs the whole deployment sequence against the in-memory session.
"""

import pytest
from unittest.mock import Mock

from cocoons_ftp.config.credentials import CredentialManager
from cocoons_ftp.deployer import (
    DeploymentResult,
    DeploymentState,
    SiteDeployer,
    deploy_site,
)
from cocoons_ftp.ftp.exceptions import FTPAuthenticationError, FTPUploadError
from tests.fakes import InMemoryFTPSession


@pytest.fixture
def server():
    """Remote tree left by a previous deployment."""
    return InMemoryFTPSession(
        files={"./old.html": b"old", "./sub/nested.txt": b"nested"},
        dirs={"./sub"},
    )


@pytest.fixture
def credentials():
    manager = Mock(spec=CredentialManager)
    manager.resolve_password.side_effect = lambda host, user, configured=None: configured or ""
    return manager


def make_deployer(site_folder, server, credentials):
    return SiteDeployer(site_folder, session_factory=lambda: server, credentials=credentials)


class TestDeploymentResult:
    """Tests for DeploymentResult messages."""

    def test_success_message(self):
        result = DeploymentResult(success=True, server="ftp.example.org:21/www")
        assert result.message == "The site is correctly deployed with FTP in : ftp.example.org:21/www"

    def test_failure_message(self):
        result = DeploymentResult(success=False, error_message="boom")
        assert result.message == "Error during the deployment with ftp : boom"


class TestSiteDeployer:
    """Tests for SiteDeployer class."""

    def test_full_deployment(self, write_config, ftp_section, site_tree, server, credentials):
        """Test the remote root is emptied then receives the site."""
        site_folder = write_config({"ftp": ftp_section})
        deployer = make_deployer(site_folder, server, credentials)

        result = deployer.deploy()

        assert result.success is True, result.error_message
        assert result.server == "127.0.0.1:2121"
        assert server.tree() == ["./assets/", "./assets/style.css", "./index.html"]
        assert result.clean_result.files_deleted == 2
        assert result.clean_result.directories_removed == 1
        assert result.upload_summary.files_uploaded == 2
        assert deployer.state == DeploymentState.DISCONNECTED
        assert server.disconnect_calls == 1
        assert server.last_password == "testpass"

    def test_clean_happens_before_upload(self, write_config, ftp_section, site_tree, server, credentials):
        site_folder = write_config({"ftp": ftp_section})

        make_deployer(site_folder, server, credentials).deploy()

        ops = server.operations
        last_delete = max(i for i, (op, _) in enumerate(ops) if op in ("delete", "rmdir"))
        first_upload = min(i for i, (op, _) in enumerate(ops) if op in ("mkdir", "upload"))
        assert last_delete < first_upload

    def test_existing_files_kept_by_default(self, write_config, ftp_section, site_tree, server, credentials):
        """Test nothing is deleted unless deleteExistingFiles is set."""
        ftp_section.pop("deleteExistingFiles")
        site_folder = write_config({"ftp": ftp_section})

        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.success is True
        assert result.clean_result is None
        assert "./old.html" in server.files
        assert "./index.html" in server.files
        assert not any(op in ("delete", "rmdir") for op, _ in server.operations)

    def test_deployment_is_idempotent(self, write_config, ftp_section, site_tree, server, credentials):
        site_folder = write_config({"ftp": ftp_section})

        make_deployer(site_folder, server, credentials).deploy()
        first = (server.tree(), dict(server.files))
        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.success is True
        assert (server.tree(), dict(server.files)) == first

    def test_missing_ftp_section_fails_before_connecting(self, write_config, site_tree, credentials):
        site_folder = write_config({"target": "target"})
        session_factory = Mock()

        deployer = SiteDeployer(site_folder, session_factory=session_factory, credentials=credentials)
        result = deployer.deploy()

        assert result.success is False
        assert "no ftp config" in result.error_message
        session_factory.assert_not_called()
        assert deployer.state == DeploymentState.FAILED

    def test_missing_config_file(self, tmp_path, server, credentials):
        result = make_deployer(tmp_path, server, credentials).deploy()

        assert result.success is False
        assert "cocoons.json" in result.error_message
        assert server.connect_calls == 0

    def test_invalid_config_encoding(self, write_config, site_tree, server, credentials):
        site_folder = write_config({})
        (site_folder / "cocoons.json").write_bytes(b'{"ftp": {"host": "h\xff"}}')

        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.success is False
        assert "Invalid UTF-8" in result.error_message
        assert server.connect_calls == 0

    def test_missing_target_folder(self, write_config, ftp_section, server, credentials):
        site_folder = write_config({"ftp": ftp_section, "target": "public"})

        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.success is False
        assert "Target folder does not exist" in result.error_message
        assert server.connect_calls == 0

    def test_connection_failure(self, write_config, ftp_section, site_tree, server, credentials):
        server.connect_error = FTPAuthenticationError("testuser")
        site_folder = write_config({"ftp": ftp_section})

        deployer = make_deployer(site_folder, server, credentials)
        result = deployer.deploy()

        assert result.success is False
        assert result.error_message == "Authentication failed for user 'testuser'"
        assert server.operations == []
        assert server.disconnect_calls == 1
        assert deployer.state == DeploymentState.FAILED

    def test_upload_failure_still_disconnects(self, write_config, ftp_section, site_tree, server, credentials):
        server.fail_on[("upload", "./index.html")] = FTPUploadError("index.html", "./index.html")
        site_folder = write_config({"ftp": ftp_section})

        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.success is False
        assert result.error_message == "Failed to upload 'index.html' to './index.html'"
        assert server.disconnect_calls == 1

    def test_folder_reported_in_server(self, write_config, ftp_section, site_tree, server, credentials):
        site_folder = write_config({"ftp": dict(ftp_section, folder="www")})

        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.server == "127.0.0.1:2121/www"
        assert server.last_config.folder == "www"

    def test_password_from_credentials(self, write_config, ftp_section, site_tree, server):
        ftp_section.pop("password")
        site_folder = write_config({"ftp": ftp_section})
        credentials = Mock(spec=CredentialManager)
        credentials.resolve_password.return_value = "from-keyring"

        make_deployer(site_folder, server, credentials).deploy()

        credentials.resolve_password.assert_called_once_with("127.0.0.1", "testuser", None)
        assert server.last_password == "from-keyring"

    def test_custom_ignore_patterns(self, write_config, ftp_section, site_tree, server, credentials):
        site_folder = write_config({"ftp": ftp_section, "ignore": [r"\.css$"]})

        make_deployer(site_folder, server, credentials).deploy()

        assert "./.git/config" in server.files
        assert "./assets/style.css" not in server.files


class TestHtaccess:
    """Tests for the optional .htaccess deployment."""

    def test_missing_htaccess_is_not_a_failure(self, write_config, ftp_section, site_tree, server, credentials):
        site_folder = write_config({"ftp": ftp_section, "htaccess": {"generate": True}})

        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.success is True
        assert result.htaccess_status == "ignored"

    def test_htaccess_deployed(self, write_config, ftp_section, site_tree, server, credentials):
        (site_tree / ".htaccess").write_text("Options -Indexes\n")
        site_folder = write_config({"ftp": ftp_section, "htaccess": {"generate": True}})

        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.htaccess_status == "deployed"
        assert server.files["./.htaccess"] == b"Options -Indexes\n"

    def test_htaccess_failure_is_swallowed(self, write_config, ftp_section, site_tree, server, credentials):
        (site_tree / ".htaccess").write_text("Options -Indexes\n")
        server.fail_on[("upload", "./.htaccess")] = FTPUploadError(".htaccess", "./.htaccess")
        site_folder = write_config({"ftp": ftp_section, "htaccess": {"generate": True}})

        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.success is True
        assert result.htaccess_status == "ignored"

    def test_htaccess_skipped_when_not_generated(self, write_config, ftp_section, site_tree, server, credentials):
        (site_tree / ".htaccess").write_text("Options -Indexes\n")
        site_folder = write_config({"ftp": ftp_section})

        result = make_deployer(site_folder, server, credentials).deploy()

        assert result.htaccess_status == "skipped"
        assert "./.htaccess" not in server.files


class TestDeploySite:
    """Tests for the deploy_site helper."""

    def test_deploy_site(self, write_config, ftp_section, site_tree, server):
        ftp_section["deleteExistingFiles"] = False
        site_folder = write_config({"ftp": ftp_section})

        result = deploy_site(site_folder, session_factory=lambda: server)

        assert result.success is True
        assert "./index.html" in server.files

    def test_deploy_site_defaults_to_cwd(self, write_config, ftp_section, site_tree, server, monkeypatch):
        site_folder = write_config({"ftp": ftp_section})
        monkeypatch.chdir(site_folder)

        result = deploy_site(session_factory=lambda: server)

        assert result.success is True
