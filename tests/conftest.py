"""
Shared test fixtures and configuration for kubealias tests.

This module provides common fixtures used across all test types:
- Isolation from real KUBEALIAS_* environment and config files
- Sample kubectl help and api-resources output
- Fake kubectl runner for discovery without a cluster
"""

import subprocess
from pathlib import Path

import pytest

from kubealias.kubectl_executor import KubectlExecutionError

# ============================================================================
# ENVIRONMENT FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def clean_kubealias_env(monkeypatch):
    """Remove KUBEALIAS_* overrides so tests see default configuration."""
    import os

    for name in list(os.environ):
        if name.startswith("KUBEALIAS_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    """Run the test inside an empty temporary working directory.

    The default config file, alias file and README are all resolved
    relative to the working directory.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ============================================================================
# SAMPLE KUBECTL OUTPUT
# ============================================================================


KUBECTL_HELP = """kubectl controls the Kubernetes cluster manager.

 Find more information at: https://kubernetes.io/docs/reference/kubectl/

Basic Commands (Beginner):
  create          Create a resource from a file or from stdin
  expose          Take a replication controller, service, deployment or pod and expose it
  run             Run a particular image on the cluster
  set             Set specific features on objects

Basic Commands (Intermediate):
  explain         Get documentation for a resource
  get             Display one or many resources
  edit            Edit a resource on the server
  delete          Delete resources by file names, stdin, resources and names, or by resources

Troubleshooting and Debugging Commands:
  describe        Show details of a specific resource or group of resources
  logs            Print the logs for a container in a pod
  exec            Execute a command in a container
  debug           Create debugging sessions for troubleshooting workloads and nodes
  events          List events

Advanced Commands:
  apply           Apply a configuration to a resource by file name or stdin

Cluster Management Commands:
  top             Display resource (CPU/memory) usage

Settings Commands:
  api-resources   Print the supported API resources on the server
  auth            Inspect authorization

Usage:
  kubectl [flags] [options]

Use "kubectl <command> --help" for more information about a given command.
"""


def format_api_resources(rows: list[tuple[str, str, str, str, str]]) -> str:
    """Render rows the way kubectl aligns the api-resources table."""
    header = ("NAME", "SHORTNAMES", "APIVERSION", "NAMESPACED", "KIND")
    lines = []
    for name, short, version, namespaced, kind in [header, *rows]:
        lines.append(f"{name:<34}{short:<13}{version:<34}{namespaced:<13}{kind}".rstrip())
    return "\n".join(lines) + "\n"


API_RESOURCES = format_api_resources(
    [
        ("bindings", "", "v1", "true", "Binding"),
        ("configmaps", "cm", "v1", "true", "ConfigMap"),
        ("pods", "po", "v1", "true", "Pod"),
        ("services", "svc", "v1", "true", "Service"),
        ("deployments", "deploy", "apps/v1", "true", "Deployment"),
        ("tokenreviews", "", "authentication.k8s.io/v1", "false", "TokenReview"),
    ]
)


@pytest.fixture
def kubectl_help() -> str:
    return KUBECTL_HELP


@pytest.fixture
def api_resources() -> str:
    return API_RESOURCES


@pytest.fixture
def resource_table():
    """Factory rendering api-resources rows with kubectl column alignment."""
    return format_api_resources


# ============================================================================
# KUBECTL MOCKING FIXTURES
# ============================================================================


def make_fake_kubectl(help_text: str | None = KUBECTL_HELP, resources: str | None = API_RESOURCES):
    """Build a run_kubectl_command replacement.

    Passing None for an output makes that invocation fail the way a missing
    binary or unreachable cluster would.
    """

    def fake_run(args, **kwargs):
        if args == ["--help"]:
            output = help_text
        elif args == ["api-resources"]:
            output = resources
        else:
            raise AssertionError(f"Unexpected kubectl call: {args}")
        if output is None:
            raise KubectlExecutionError(f"kubectl {' '.join(args)} failed")
        return subprocess.CompletedProcess(["kubectl", *args], 0, stdout=output, stderr="")

    return fake_run


@pytest.fixture
def fake_kubectl(monkeypatch):
    """Serve sample help and api-resources output to the discovery adapters."""
    monkeypatch.setattr("kubealias.discovery.run_kubectl_command", make_fake_kubectl())


@pytest.fixture
def offline_kubectl(monkeypatch):
    """Make every discovery call fail, as on a machine without kubectl."""
    monkeypatch.setattr(
        "kubealias.discovery.run_kubectl_command", make_fake_kubectl(help_text=None, resources=None)
    )
