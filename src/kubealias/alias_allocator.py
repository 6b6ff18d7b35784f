"""Alias allocation for kubectl subcommands.

Assigns every eligible subcommand a short, unique token in two passes:

1. Priority pass: catalog commands flagged priority, sorted, each claims the
   first character of its sanitized name if that character is still free.
2. Dynamic pass: discovered commands, sorted, that are in the catalog and
   were not aliased yet, claim the shortest free prefix of length >= 2,
   falling back to the full sanitized name.

Both passes sort their input, so the result depends only on the catalog and
the set of discovered names. The allocator never raises.
"""

import logging
from collections.abc import Iterable

from kubealias.catalog import CommandCatalog

logger = logging.getLogger(__name__)

SEPARATORS = ("-",)


def sanitize_command(command: str) -> str:
    """Strip separator characters from a subcommand name.

    Example:
        >>> sanitize_command("api-resources")
        'apiresources'
    """
    for separator in SEPARATORS:
        command = command.replace(separator, "")
    return command


def _prefix_token(sanitized: str, used: dict[str, str]) -> str:
    """Return the first unused prefix of length >= 2, or the full name."""
    for length in range(2, len(sanitized) + 1):
        prefix = sanitized[:length]
        if prefix not in used:
            return prefix
    return sanitized


def allocate_aliases(
    catalog: CommandCatalog,
    dynamic_commands: Iterable[str],
    priority_fallback: bool = False,
) -> dict[str, str]:
    """Assign alias tokens to catalog commands.

    Args:
        catalog: Known commands with priority flags
        dynamic_commands: Subcommands reported by the installed CLI
        priority_fallback: Let priority commands that lost their one-character
            token fall through to the prefix scan even when not discovered

    Returns:
        Mapping of subcommand -> alias token
    """
    used: dict[str, str] = {}  # token -> command
    aliases: dict[str, str] = {}

    for command in catalog.priority_commands():
        sanitized = sanitize_command(command)
        if not sanitized:
            continue
        short = sanitized[0]
        if short in used:
            logger.debug(f"Priority alias '{short}' for {command} already taken by {used[short]}")
            continue
        aliases[command] = short
        used[short] = command

    candidates = set(dynamic_commands)
    if priority_fallback:
        candidates.update(catalog.priority_commands())

    for command in sorted(candidates):
        if command in aliases:
            continue
        if command not in catalog:
            logger.debug(f"Skipping {command}: not in command catalog")
            continue
        sanitized = sanitize_command(command)
        if not sanitized:
            continue
        token = _prefix_token(sanitized, used)
        aliases[command] = token
        used[token] = command

    return aliases


__all__ = ["allocate_aliases", "sanitize_command"]
