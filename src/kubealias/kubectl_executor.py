"""Standardized kubectl subprocess execution.

Provides run_kubectl_command() - a thin wrapper around subprocess.run that
inserts the configured kubeconfig and normalizes failures into a single
exception type. Every call is attempted exactly once.

Usage:
    from kubealias.kubectl_executor import run_kubectl_command

    result = run_kubectl_command(["--help"])
    result = run_kubectl_command(["api-resources"], kubeconfig="~/.kube/dev")
"""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class KubectlExecutionError(Exception):
    """Raised when a kubectl invocation fails."""

    pass


def build_kubectl_command(
    args: list[str], *, binary: str = "kubectl", kubeconfig: str | None = None
) -> list[str]:
    """Build the argv for a kubectl invocation.

    Args:
        args: Arguments after the binary, e.g. ["api-resources"]
        binary: kubectl executable name or path
        kubeconfig: Optional kubeconfig path passed as --kubeconfig

    Returns:
        Full command list
    """
    cmd = [binary]
    if kubeconfig:
        cmd.append(f"--kubeconfig={Path(kubeconfig).expanduser()}")
    cmd.extend(args)
    return cmd


def run_kubectl_command(
    args: list[str],
    *,
    binary: str = "kubectl",
    kubeconfig: str | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute a kubectl command once.

    Args:
        args: Arguments after the binary
        binary: kubectl executable name or path (default: kubectl)
        kubeconfig: Optional kubeconfig path
        timeout: Subprocess timeout in seconds (default: no timeout)

    Returns:
        subprocess.CompletedProcess with stdout/stderr

    Raises:
        KubectlExecutionError: If the binary is missing or cannot be executed,
            times out, or exits non-zero
    """
    cmd = build_kubectl_command(args, binary=binary, kubeconfig=kubeconfig)
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=timeout)
    except FileNotFoundError as e:
        raise KubectlExecutionError(f"{binary} not found on PATH") from e
    except OSError as e:
        raise KubectlExecutionError(f"Failed to execute {binary}: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise KubectlExecutionError(f"{' '.join(cmd)} timed out after {timeout}s") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise KubectlExecutionError(
            f"{' '.join(cmd)} exited with status {e.returncode}: {stderr}"
        ) from e


__all__ = ["KubectlExecutionError", "build_kubectl_command", "run_kubectl_command"]
