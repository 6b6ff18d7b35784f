"""Discovery adapters for kubectl subcommands and resource short names.

Two collaborators feed the allocator and emitter:

- KubectlCommandSource: parses `kubectl --help` for available subcommands
- KubectlResourceSource: parses `kubectl api-resources` (the server's
  preferred resources) for short name -> resource name pairs

Both are attempted once and degrade to empty results on any failure, so a
machine without a cluster still gets the priority aliases. Static sources
with fixed data implement the same protocols for tests and offline use.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Protocol

from kubealias.kubectl_executor import KubectlExecutionError, run_kubectl_command

logger = logging.getLogger(__name__)

# Two-space indented command name followed by at least two spaces of padding
HELP_COMMAND_PATTERN = re.compile(r"^\s{2}([a-z0-9-]+)\s{2,}")

# Start of a header column name
HEADER_COLUMN_PATTERN = re.compile(r"(?<=\s)[A-Z]")


class CommandSource(Protocol):
    """Provides the subcommands supported by the installed CLI."""

    def list_commands(self) -> list[str]: ...


class ResourceSource(Protocol):
    """Provides resource short name -> full resource name."""

    def list_resources(self) -> dict[str, str]: ...


def parse_help_commands(help_text: str) -> list[str]:
    """Extract subcommand names from CLI help output.

    Args:
        help_text: Output of `kubectl --help`

    Returns:
        Deduplicated, sorted subcommand names
    """
    commands = set()
    for line in help_text.splitlines():
        match = HELP_COMMAND_PATTERN.match(line)
        if match:
            commands.add(match.group(1))
    return sorted(commands)


def parse_api_resources(table: str) -> dict[str, str]:
    """Extract short names from `kubectl api-resources` table output.

    The SHORTNAMES column is blank for resources without short names, so
    columns are sliced by the header offsets instead of split on whitespace.
    The first short name of each resource is used; when two resources share
    a short name the first in listing order wins.

    Args:
        table: Output of `kubectl api-resources` including the header line

    Returns:
        Mapping of short name -> resource name
    """
    lines = table.splitlines()
    if not lines:
        return {}

    header = lines[0]
    short_start = header.find("SHORTNAMES")
    if short_start < 0:
        logger.warning("Unrecognized api-resources header, ignoring resource listing")
        return {}

    # SHORTNAMES ends where the next column begins (APIVERSION, or APIGROUP on
    # older kubectl); a trailing SHORTNAMES column runs to end of line
    next_column = HEADER_COLUMN_PATTERN.search(header, short_start + len("SHORTNAMES"))
    short_end = next_column.start() if next_column else None

    resources: dict[str, str] = {}
    for line in lines[1:]:
        if not line.strip():
            continue
        name = line[:short_start].strip()
        short_names = [s for s in line[short_start:short_end].strip().split(",") if s]
        if not name or not short_names:
            continue
        short = short_names[0]
        if short in resources:
            logger.debug(f"Short name '{short}' already taken by {resources[short]}: {name}")
            continue
        resources[short] = name
    return resources


class KubectlCommandSource:
    """Discover subcommands from `kubectl --help`."""

    def __init__(
        self,
        binary: str = "kubectl",
        kubeconfig: str | None = None,
        timeout: float | None = None,
    ):
        self.binary = binary
        self.kubeconfig = kubeconfig
        self.timeout = timeout

    def list_commands(self) -> list[str]:
        try:
            result = run_kubectl_command(
                ["--help"],
                binary=self.binary,
                kubeconfig=self.kubeconfig,
                timeout=self.timeout,
            )
        except KubectlExecutionError as e:
            logger.warning(f"Error executing {self.binary} --help: {e}")
            return []
        commands = parse_help_commands(result.stdout)
        logger.debug(f"Discovered {len(commands)} subcommands")
        return commands


class KubectlResourceSource:
    """Discover resource short names from the cluster's preferred resources."""

    def __init__(
        self,
        binary: str = "kubectl",
        kubeconfig: str | None = None,
        timeout: float | None = None,
    ):
        self.binary = binary
        self.kubeconfig = kubeconfig
        self.timeout = timeout

    def list_resources(self) -> dict[str, str]:
        try:
            result = run_kubectl_command(
                ["api-resources"],
                binary=self.binary,
                kubeconfig=self.kubeconfig,
                timeout=self.timeout,
            )
        except KubectlExecutionError as e:
            logger.warning(f"Resource discovery failed, continuing without resources: {e}")
            return {}
        resources = parse_api_resources(result.stdout)
        logger.debug(f"Discovered {len(resources)} resource short names")
        return resources


class StaticCommandSource:
    """Fixed command list."""

    def __init__(self, commands: Iterable[str] = ()):
        self.commands = list(commands)

    def list_commands(self) -> list[str]:
        return sorted(set(self.commands))


class StaticResourceSource:
    """Fixed resource mapping."""

    def __init__(self, resources: Mapping[str, str] | None = None):
        self.resources = dict(resources or {})

    def list_resources(self) -> dict[str, str]:
        return dict(self.resources)


__all__ = [
    "CommandSource",
    "KubectlCommandSource",
    "KubectlResourceSource",
    "ResourceSource",
    "StaticCommandSource",
    "StaticResourceSource",
    "parse_api_resources",
    "parse_help_commands",
]
