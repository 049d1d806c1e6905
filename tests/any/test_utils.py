"""Tests for kship_lib.any.utils module."""

import subprocess
from unittest.mock import patch

import pytest

from kship_lib.any.exceptions import KShipCommandError, KShipConfigurationError
from kship_lib.any.utils import resolve_template_variables, run_command, run_tool


class TestRunCommand:
    """Test run_command function."""

    def test_simple_command_success(self):
        """Test running a simple successful command."""
        result = run_command(["echo", "hello"])

        assert result.returncode == 0
        assert "hello" in result.stdout
        assert result.stderr == ""

    def test_command_failure_with_check_true(self):
        """Test command failure raises CalledProcessError when check=True."""
        with pytest.raises(subprocess.CalledProcessError) as exc_info:
            run_command(["false"])

        assert exc_info.value.returncode != 0

    def test_command_failure_with_check_false(self):
        """Test command failure doesn't raise when check=False."""
        result = run_command(["false"], check=False)

        assert result.returncode != 0

    def test_stdin_input(self):
        """Test feeding text on stdin."""
        result = run_command(["cat"], input="from stdin")

        assert result.stdout == "from stdin"

    def test_env_merged(self):
        """Test that extra environment variables are merged with os.environ."""
        with patch("kship_lib.any.utils.subprocess.run") as mock_run:
            run_command(["kubectl", "version"], env={"KUBECONFIG": "/tmp/config"})

        env = mock_run.call_args.kwargs["env"]
        assert env["KUBECONFIG"] == "/tmp/config"
        assert "PATH" in env


class TestRunTool:
    """Test run_tool function."""

    def test_returns_stdout(self):
        """Test that stdout is returned."""
        assert run_tool(["echo", "hello"]) == "hello\n"

    def test_missing_executable(self):
        """Test that a missing tool asks for it to be installed."""
        with pytest.raises(KShipCommandError, match="definitely-not-installed not found"):
            run_tool(["definitely-not-installed", "--version"])

    def test_failure_keeps_stderr(self):
        """Test that a failing tool raises with its stderr."""
        error = subprocess.CalledProcessError(1, ["kubectl", "get"], output="", stderr="Unauthorized\n")
        with patch("kship_lib.any.utils.subprocess.run", side_effect=error):
            with pytest.raises(KShipCommandError) as exc_info:
                run_tool(["kubectl", "get", "pods"])

        assert exc_info.value.stderr == "Unauthorized"
        assert exc_info.value.command == ["kubectl", "get", "pods"]
        assert str(exc_info.value) == "kubectl get failed: Unauthorized"

    def test_timeout(self):
        """Test that a timeout is reported as a command error."""
        error = subprocess.TimeoutExpired(["tsh", "login"], 5)
        with patch("kship_lib.any.utils.subprocess.run", side_effect=error):
            with pytest.raises(KShipCommandError, match="timed out after 5s"):
                run_tool(["tsh", "login"], timeout=5)


class TestResolveTemplateVariables:
    """Tests for template variable resolution."""

    def test_resolve_simple_variable(self):
        """Test resolving a simple variable."""
        assert resolve_template_variables("{{host}}.dev.example.com", {"host": "fake-ask"}) == "fake-ask.dev.example.com"

    def test_resolve_nested_variable(self):
        """Test resolving a dotted path."""
        context = {"region": {"name": "dev-uk"}, "host": "api"}
        assert resolve_template_variables("{{host}}.{{ region.name }}", context) == "api.dev-uk"

    def test_no_variables(self):
        """Test that plain strings pass through."""
        assert resolve_template_variables("fake.example.com", {}) == "fake.example.com"

    def test_resolve_missing_variable_fails(self):
        """Test that missing variable raises error."""
        with pytest.raises(KShipConfigurationError) as exc_info:
            resolve_template_variables("{{cluster}}.example.com", {"host": "api"})
        assert "not found in context" in str(exc_info.value)
