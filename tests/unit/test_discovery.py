"""Unit tests for discovery module.

Parsers are tested against captured kubectl output; the adapters are tested
with run_kubectl_command patched so no kubectl binary or cluster is needed.
"""

import subprocess
from unittest.mock import MagicMock, patch

from kubealias.discovery import (
    KubectlCommandSource,
    KubectlResourceSource,
    StaticCommandSource,
    StaticResourceSource,
    parse_api_resources,
    parse_help_commands,
)
from kubealias.kubectl_executor import KubectlExecutionError


class TestParseHelpCommands:
    """Test subcommand extraction from kubectl --help."""

    def test_extracts_indented_commands(self, kubectl_help):
        commands = parse_help_commands(kubectl_help)

        assert commands == sorted(commands)
        for expected in ("apply", "api-resources", "auth", "events", "exec", "get", "top"):
            assert expected in commands

    def test_ignores_usage_and_prose(self, kubectl_help):
        commands = parse_help_commands(kubectl_help)

        assert "kubectl" not in commands
        assert "Find" not in commands

    def test_deduplicates(self):
        text = "  get             Display\n  get             Display again\n"

        assert parse_help_commands(text) == ["get"]

    def test_requires_two_space_padding(self):
        assert parse_help_commands("  get Display one\n") == []

    def test_empty_output(self):
        assert parse_help_commands("") == []


class TestParseApiResources:
    """Test short name extraction from kubectl api-resources."""

    def test_maps_first_short_name(self, api_resources):
        resources = parse_api_resources(api_resources)

        assert resources == {
            "cm": "configmaps",
            "po": "pods",
            "svc": "services",
            "deploy": "deployments",
        }

    def test_multiple_short_names_uses_first(self, resource_table):
        table = resource_table(
            [("customresourcedefinitions", "crd,crds", "apiextensions.k8s.io/v1", "false", "CRD")]
        )

        assert parse_api_resources(table) == {"crd": "customresourcedefinitions"}

    def test_first_listed_resource_wins_shared_short_name(self, resource_table):
        table = resource_table(
            [
                ("events", "ev", "v1", "true", "Event"),
                ("eventsources", "ev", "example.io/v1", "true", "EventSource"),
            ]
        )

        assert parse_api_resources(table) == {"ev": "events"}

    def test_older_apigroup_header(self):
        table = (
            "NAME          SHORTNAMES   APIGROUP   NAMESPACED   KIND\n"
            "bindings                                true         Binding\n"
            "pods          po                        true         Pod\n"
            "deployments   deploy       apps         true         Deployment\n"
        )

        assert parse_api_resources(table) == {"po": "pods", "deploy": "deployments"}

    def test_unrecognized_header_returns_empty(self):
        assert parse_api_resources("something went wrong\n") == {}

    def test_empty_output(self):
        assert parse_api_resources("") == {}


class TestKubectlCommandSource:
    """Test the kubectl --help adapter."""

    @patch("kubealias.discovery.run_kubectl_command")
    def test_returns_parsed_commands(self, mock_run: MagicMock, kubectl_help) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["kubectl", "--help"], returncode=0, stdout=kubectl_help, stderr=""
        )

        commands = KubectlCommandSource().list_commands()

        assert "get" in commands
        mock_run.assert_called_once_with(
            ["--help"], binary="kubectl", kubeconfig=None, timeout=None
        )

    @patch("kubealias.discovery.run_kubectl_command")
    def test_failure_returns_empty_list(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = KubectlExecutionError("kubectl not found on PATH")

        assert KubectlCommandSource().list_commands() == []

    @patch("kubealias.kubectl_executor.subprocess.run")
    def test_unexecutable_binary_returns_empty_list(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = PermissionError(13, "Permission denied")

        assert KubectlCommandSource(binary="/opt/kubectl").list_commands() == []

    @patch("kubealias.discovery.run_kubectl_command")
    def test_passes_kubeconfig(self, mock_run: MagicMock, kubectl_help) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["kubectl", "--help"], returncode=0, stdout=kubectl_help, stderr=""
        )

        KubectlCommandSource(kubeconfig="/tmp/kc").list_commands()

        assert mock_run.call_args.kwargs["kubeconfig"] == "/tmp/kc"


class TestKubectlResourceSource:
    """Test the kubectl api-resources adapter."""

    @patch("kubealias.discovery.run_kubectl_command")
    def test_returns_parsed_resources(self, mock_run: MagicMock, api_resources) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["kubectl", "api-resources"], returncode=0, stdout=api_resources, stderr=""
        )

        resources = KubectlResourceSource(kubeconfig="/tmp/kc", timeout=5).list_resources()

        assert resources["po"] == "pods"
        mock_run.assert_called_once_with(
            ["api-resources"], binary="kubectl", kubeconfig="/tmp/kc", timeout=5
        )

    @patch("kubealias.discovery.run_kubectl_command")
    def test_failure_returns_empty_mapping(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = KubectlExecutionError("connection refused")

        assert KubectlResourceSource().list_resources() == {}

    @patch("kubealias.kubectl_executor.subprocess.run")
    def test_binary_is_directory_returns_empty_mapping(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = PermissionError(13, "Permission denied")

        assert KubectlResourceSource(binary="/usr/local/bin").list_resources() == {}


class TestStaticSources:
    """Test fixed-data sources."""

    def test_static_commands_sorted_and_deduplicated(self):
        source = StaticCommandSource(["get", "apply", "get"])

        assert source.list_commands() == ["apply", "get"]

    def test_static_resources_returns_copy(self):
        source = StaticResourceSource({"po": "pods"})

        result = source.list_resources()
        result["svc"] = "services"

        assert source.list_resources() == {"po": "pods"}
