"""Utility functions for kship-lib."""

import os
import re
import subprocess
from typing import Any

import structlog

from kship_lib.any.exceptions import KShipCommandError, KShipConfigurationError

LOGGER = structlog.get_logger("kship_lib.utils")

_TEMPLATE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def run_command(
    cmd: list[str],
    check: bool = True,
    capture: bool = True,
    env: dict[str, str] | None = None,
    timeout: int | None = None,
    input: str | None = None,
) -> subprocess.CompletedProcess:
    """
    Run a shell command with consistent handling.

    Args:
    ----
        cmd: Command and arguments as a list
        check: If True, raise CalledProcessError on non-zero exit
        capture: If True, capture stdout/stderr
        env: Optional environment variables (merged with os.environ)
        timeout: Optional timeout in seconds
        input: Optional text fed to the command's stdin

    Returns:
    -------
        CompletedProcess instance with returncode, stdout, stderr

    Raises:
    ------
        subprocess.CalledProcessError: If check=True and command fails
        subprocess.TimeoutExpired: If timeout is exceeded
        FileNotFoundError: If the executable does not exist

    Example:
    -------
        ```python
        from kship_lib.any.utils import run_command

        result = run_command(["kubectl", "get", "pods"])
        print(result.stdout)

        # Feed a document on stdin
        run_command(["kubectl", "apply", "-f", "-"], input=manifest_json)
        ```

    """
    command_env = os.environ.copy()
    if env:
        command_env.update(env)

    LOGGER.debug(f"Running command: {' '.join(cmd)}")

    return subprocess.run(
        cmd,
        capture_output=capture,
        text=True,
        check=check,
        env=command_env,
        timeout=timeout,
        input=input,
    )


def run_tool(cmd: list[str], input: str | None = None, timeout: int | None = None) -> str:
    """
    Run an external tool and return its stdout.

    Wraps run_command so callers only ever see KShipCommandError.

    Raises
    ------
        KShipCommandError: If the tool is missing, exits non-zero or times out

    """
    tool = cmd[0]
    try:
        result = run_command(cmd, input=input, timeout=timeout)
    except FileNotFoundError as e:
        raise KShipCommandError(f"{tool} not found. Please install {tool}", command=cmd) from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise KShipCommandError(f"{' '.join(cmd[:2])} failed: {stderr}", command=cmd, stderr=stderr) from e
    except subprocess.TimeoutExpired as e:
        raise KShipCommandError(f"{' '.join(cmd[:2])} timed out after {timeout}s", command=cmd) from e
    return result.stdout


def resolve_template_variables(value: str, context: dict[str, Any]) -> str:
    """
    Resolve template variables in a string.

    Template syntax: {{variable.path}}

    Examples:
    --------
        {{host}}.dev.example.com → fake-ask.dev.example.com
        {{region.name}} → dev-uk

    Args:
    ----
        value: String potentially containing template variables
        context: Dictionary of available variables

    Returns:
    -------
        String with variables resolved

    Raises:
    ------
        KShipConfigurationError: If a variable is referenced but not in context

    """
    matches = _TEMPLATE_PATTERN.findall(value)
    if not matches:
        return value

    result = value
    for var_path in matches:
        current: Any = context
        try:
            for part in var_path.strip().split("."):
                current = current[part]
        except (KeyError, TypeError):
            raise KShipConfigurationError(
                f"Template variable '{var_path.strip()}' not found in context. " f"Available: {list(context.keys())}"
            )
        result = result.replace(f"{{{{{var_path}}}}}", str(current))

    return result
