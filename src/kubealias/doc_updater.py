"""Keep the README alias reference in sync with the generated alias file.

Everything from the marker heading to the end of the document is replaced
with a freshly rendered section. Documents without the marker get the
section appended. The section starts with the marker, so updating a document
that was already updated replaces the previous section in full.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

MARKER = "## All Available Aliases"
REFERENCE_HEADING = "## Full Alias Reference"


class DocUpdaterError(Exception):
    """Raised when the documentation file cannot be updated."""

    pass


def render_doc_section(aliases: Mapping[str, str], alias_content: str, prefix: str = "k") -> str:
    """Render the alias listing and the full reference block.

    Args:
        aliases: Subcommand -> alias token
        alias_content: Contents of the generated alias file
        prefix: Alias name prefix

    Returns:
        Section text beginning with the marker heading
    """
    listing = [MARKER, "", "```"]
    listing.extend(f"{command} => {prefix}{aliases[command]}" for command in sorted(aliases))
    listing.append("```")

    reference = alias_content.removesuffix("\n")
    return "\n".join(listing) + f"\n\n{REFERENCE_HEADING}\n\n```bash\n{reference}\n```\n"


def splice_doc(document: str, section: str) -> str:
    """Replace the document from the marker onward, or append if absent."""
    head, found, _ = document.partition(MARKER)
    if found:
        return head + section
    logger.debug("Marker heading not found, appending alias section")
    return document + "\n" + section


def update_doc_file(
    doc_path: Path,
    aliases: Mapping[str, str],
    alias_path: Path,
    prefix: str = "k",
) -> None:
    """Rewrite the documentation file's alias section.

    Args:
        doc_path: Documentation file to update (must exist)
        aliases: Subcommand -> alias token
        alias_path: Generated alias file embedded verbatim
        prefix: Alias name prefix

    Raises:
        DocUpdaterError: If either file cannot be read or the doc cannot be written
    """
    try:
        document = doc_path.read_text()
    except OSError as e:
        raise DocUpdaterError(f"Failed to read documentation file {doc_path}: {e}") from e

    try:
        alias_content = alias_path.read_text()
    except OSError as e:
        raise DocUpdaterError(f"Failed to read alias file {alias_path}: {e}") from e

    updated = splice_doc(document, render_doc_section(aliases, alias_content, prefix))

    try:
        doc_path.write_text(updated)
    except OSError as e:
        raise DocUpdaterError(f"Failed to write documentation file {doc_path}: {e}") from e
    logger.debug(f"Updated alias section in {doc_path}")


__all__ = [
    "MARKER",
    "REFERENCE_HEADING",
    "DocUpdaterError",
    "render_doc_section",
    "splice_doc",
    "update_doc_file",
]
