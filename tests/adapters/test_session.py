"""Tests for session adapters."""

import subprocess
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from kship_lib.adapters.session import InClusterSession, TeleportSession, context_params, ensure_tsh
from kship_lib.any.exceptions import KShipCommandError, KShipConfigurationError
from kship_lib.config.schemas import Region

VALID_STATUS = """\
> Profile URL:        https://teleport.example.com:443
  Logged in as:       alice
  Cluster:            teleport.example.com
  Valid until:        2026-10-18 20:00:00 +0000 UTC [valid for 8h0m0s]
"""

EXPIRED_STATUS = """\
> Profile URL:        https://teleport.example.com:443
  Logged in as:       alice
  Valid until:        2026-10-17 20:00:00 +0000 UTC [EXPIRED]
"""


def tsh_status(stdout: str) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["tsh", "status"], returncode=0, stdout=stdout, stderr="")


@pytest.fixture
def session(global_config, tmp_path):
    return TeleportSession(global_config, home=tmp_path / "home")


class TestNeedsLogin:
    """Tests for parsing tsh status."""

    @patch("kship_lib.adapters.session.run_command")
    def test_valid(self, mock_run_command, session):
        """Test that a valid session needs no login."""
        mock_run_command.return_value = tsh_status(VALID_STATUS)
        assert session.needs_login("teleport.example.com") is False
        mock_run_command.assert_called_once_with(["tsh", "status"], check=False)

    @patch("kship_lib.adapters.session.run_command")
    def test_expired(self, mock_run_command, session):
        """Test that an expired certificate needs a login."""
        mock_run_command.return_value = tsh_status(EXPIRED_STATUS)
        assert session.needs_login("teleport.example.com") is True

    @patch("kship_lib.adapters.session.run_command")
    def test_other_proxy(self, mock_run_command, session):
        """Test that a session with another proxy needs a login."""
        mock_run_command.return_value = tsh_status(VALID_STATUS)
        assert session.needs_login("teleport.other.com") is True

    @patch("kship_lib.adapters.session.run_command")
    def test_not_logged_in(self, mock_run_command, session):
        """Test that empty tsh output needs a login."""
        mock_run_command.return_value = tsh_status("")
        assert session.needs_login("teleport.example.com") is True


@pytest.fixture
def tools():
    """Patch every external tool the teleport session touches."""
    with (
        patch("kship_lib.adapters.session.shutil.which", return_value="/usr/local/bin/tsh"),
        patch("kship_lib.adapters.session.run_command") as run_command,
        patch("kship_lib.adapters.session.run_tool", return_value="") as tsh,
        patch("kship_lib.adapters.kubectl.run_tool") as kubectl,
    ):
        yield SimpleNamespace(run_command=run_command, tsh=tsh, kubectl=kubectl)


class TestTeleportLogin:
    """Tests for TeleportSession.ensure_logged_in()."""

    def test_reuses_valid_session(self, tools, session, dev_uk):
        """Test that a valid session skips login but still selects the context."""
        tools.run_command.return_value = tsh_status(VALID_STATUS)

        session.ensure_logged_in(dev_uk)

        tools.tsh.assert_not_called()
        kubectl_calls = [c.args[0] for c in tools.kubectl.call_args_list]
        assert kubectl_calls == [
            [
                "kubectl",
                "config",
                "set-context",
                "dev-uk",
                "--namespace=dev",
                "--cluster=dev-uk-cluster",
                "--user=dev-uk-cluster",
            ],
            ["kubectl", "config", "use-context", "dev-uk"],
        ]

    def test_logs_in_when_expired(self, tools, session, dev_uk):
        """Test that an expired session triggers tsh login."""
        tools.run_command.return_value = tsh_status(EXPIRED_STATUS)

        session.ensure_logged_in(dev_uk)

        tools.tsh.assert_called_once_with(["tsh", "login", "--proxy=teleport.example.com:443", "--auth=github"])

    def test_force_removes_profile(self, tools, session, dev_uk):
        """Test that force deletes the cached profile and logs in again."""
        tools.run_command.return_value = tsh_status(VALID_STATUS)
        profile = session.home / ".tsh" / "teleport.example.com.yaml"
        profile.parent.mkdir(parents=True)
        profile.write_text("profile")

        session.ensure_logged_in(dev_uk, force=True)

        assert not profile.exists()
        tools.tsh.assert_called_once()

    def test_login_failure(self, tools, session, dev_uk):
        """Test that a failed login propagates before any context change."""
        tools.run_command.return_value = tsh_status("")
        tools.tsh.side_effect = KShipCommandError("tsh login failed: access denied")

        with pytest.raises(KShipCommandError):
            session.ensure_logged_in(dev_uk)
        tools.kubectl.assert_not_called()

    def test_non_teleport_cluster(self, tools, session, staging_uk):
        """Test that a cluster without teleport just selects the cluster's context."""
        session.ensure_logged_in(staging_uk)

        tools.run_command.assert_not_called()
        assert tools.kubectl.call_args.args[0] == ["kubectl", "config", "use-context", "legacy"]


class TestSessionErrors:
    """Tests for session preconditions."""

    def test_missing_tsh(self):
        """Test a helpful error when tsh is not installed."""
        with patch("kship_lib.adapters.session.shutil.which", return_value=None):
            with pytest.raises(KShipCommandError) as exc_info:
                ensure_tsh()
        assert "install teleport" in str(exc_info.value)

    def test_unknown_cluster(self, global_config, tmp_path):
        """Test that a region whose cluster is missing is a configuration error."""
        region = Region(name="nowhere", namespace="x", environment="dev", cluster="missing")
        with pytest.raises(KShipConfigurationError):
            TeleportSession(global_config, home=tmp_path).ensure_logged_in(region)

    def test_context_params_fall_back_to_proxy(self, global_config, dev_uk):
        """Test that the proxy name is used when the cluster has no clustername."""
        cluster = global_config.clusters["kind-shipcat"].model_copy(update={"clustername": None})
        assert context_params(dev_uk, cluster) == [
            "--namespace=dev",
            "--cluster=teleport.example.com",
            "--user=teleport.example.com",
        ]


class TestInClusterSession:
    """Tests for InClusterSession."""

    def test_does_nothing(self, dev_uk):
        """Test that the in-cluster session never runs commands."""
        with patch("kship_lib.adapters.kubectl.run_tool") as mock_run_tool:
            session = InClusterSession()
            session.ensure_logged_in(dev_uk)
            session.set_context("dev-uk", [])
            session.use_context("dev-uk")
        mock_run_tool.assert_not_called()
