"""Render alias assignments into shell alias and function definitions.

Line shapes:
    alias kg='kubectl get' # get
    alias kgpo='kubectl get po' # get pods
    function kgpoj() { kubectl get po "$1" -o json; } # get pods + output
    function kgn() { kubectl get --all-namespaces "$1"; } # get + scope modifier

Lines are sorted before writing so the file is stable regardless of mapping
iteration order. The file is always fully replaced.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from kubealias.catalog import (
    OUTPUT_MODIFIERS,
    RESOURCE_SCOPED_COMMANDS,
    RETRIEVE_COMMAND,
    CommandCatalog,
)

logger = logging.getLogger(__name__)

HEADER_LINE = "# Auto-generated kubectl function alias file"


class AliasEmitterError(Exception):
    """Raised when the alias file cannot be written."""

    pass


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def render_alias_lines(
    aliases: Mapping[str, str],
    catalog: CommandCatalog,
    resources: Mapping[str, str],
    prefix: str = "k",
    binary: str = "kubectl",
) -> list[str]:
    """Expand an alias assignment into sorted shell definition lines.

    Args:
        aliases: Subcommand -> alias token
        catalog: Catalog providing each command's modifier groups
        resources: Resource short name -> full resource name
        prefix: Prefix for every generated name
        binary: CLI invoked by the generated definitions

    Returns:
        Lexicographically sorted lines, including the header comment
    """
    lines = [HEADER_LINE]

    for command in sorted(aliases):
        token = aliases[command]
        name = f"{prefix}{token}"
        lines.append(f"alias {name}='{binary} {command}' # {command}")

        if command in RESOURCE_SCOPED_COMMANDS:
            for short in sorted(resources):
                full = resources[short]
                lines.append(
                    f"alias {name}{short}='{binary} {command} {short}' # {command} {full}"
                )
                if command == RETRIEVE_COMMAND:
                    for suffix, flag in OUTPUT_MODIFIERS.items():
                        body = _join(binary, command, short, '"$1"', flag)
                        lines.append(
                            f"function {name}{short}{suffix}() {{ {body}; }}"
                            f" # {command} {full} + output"
                        )

        spec = catalog.get(command)
        if spec is None:
            continue
        for group, modifiers in spec.modifiers.items():
            for suffix, flag in modifiers.items():
                body = _join(binary, command, flag, '"$1"')
                lines.append(
                    f"function {name}{suffix}() {{ {body}; }} # {command} + {group} modifier"
                )

    lines.sort()
    return lines


def write_alias_file(lines: list[str], path: Path) -> None:
    """Replace the alias file with the given lines.

    Raises:
        AliasEmitterError: If the file cannot be written
    """
    try:
        path.write_text("\n".join(lines) + "\n")
    except OSError as e:
        raise AliasEmitterError(f"Failed to write alias file {path}: {e}") from e
    logger.debug(f"Wrote {len(lines)} lines to {path}")


__all__ = ["HEADER_LINE", "AliasEmitterError", "render_alias_lines", "write_alias_file"]
