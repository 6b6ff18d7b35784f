"""Alias generation pipeline.

Runs the generation steps in order:

    discover resources -> discover commands -> allocate -> emit -> update docs

Discovery failures degrade to empty data inside the sources. File write
failures propagate as AliasEmitterError / DocUpdaterError.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from kubealias.alias_allocator import allocate_aliases
from kubealias.alias_emitter import render_alias_lines, write_alias_file
from kubealias.catalog import CommandCatalog
from kubealias.config_manager import GeneratorConfig
from kubealias.discovery import (
    CommandSource,
    KubectlCommandSource,
    KubectlResourceSource,
    ResourceSource,
)
from kubealias.doc_updater import update_doc_file

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of one generation run."""

    aliases: dict[str, str]
    resources: dict[str, str]
    discovered_commands: list[str]
    lines: list[str] = field(default_factory=list)
    alias_path: Path | None = None
    doc_path: Path | None = None

    @property
    def definition_count(self) -> int:
        """Number of alias/function definitions, excluding comment lines."""
        return sum(1 for line in self.lines if not line.startswith("#"))

    def format_summary(self) -> str:
        """Format summary of the run."""
        return (
            f"Aliases: {len(self.aliases)}, Resources: {len(self.resources)}, "
            f"Definitions: {self.definition_count}"
        )


class AliasGenerator:
    """Generate kubectl aliases from a catalog and discovery sources."""

    def __init__(
        self,
        config: GeneratorConfig,
        catalog: CommandCatalog | None = None,
        command_source: CommandSource | None = None,
        resource_source: ResourceSource | None = None,
    ):
        self.config = config
        self.catalog = catalog if catalog is not None else config.build_catalog()
        self.command_source = command_source or KubectlCommandSource(
            binary=config.cli_binary,
            kubeconfig=config.kubeconfig,
            timeout=config.discovery_timeout,
        )
        self.resource_source = resource_source or KubectlResourceSource(
            binary=config.cli_binary,
            kubeconfig=config.kubeconfig,
            timeout=config.discovery_timeout,
        )

    def plan(self) -> GenerationResult:
        """Discover and allocate without touching the filesystem."""
        resources = self.resource_source.list_resources()
        discovered = self.command_source.list_commands()
        if not discovered:
            logger.warning("No subcommands discovered, generating priority aliases only")

        aliases = allocate_aliases(
            self.catalog, discovered, priority_fallback=self.config.priority_fallback
        )
        lines = render_alias_lines(
            aliases,
            self.catalog,
            resources,
            prefix=self.config.alias_prefix,
            binary=self.config.cli_binary,
        )
        return GenerationResult(
            aliases=aliases,
            resources=resources,
            discovered_commands=discovered,
            lines=lines,
        )

    def generate(self, update_docs: bool = True) -> GenerationResult:
        """Run the full pipeline and write the output files.

        Args:
            update_docs: Also rewrite the documentation file's alias section

        Returns:
            GenerationResult with the written paths set

        Raises:
            AliasEmitterError: If the alias file cannot be written
            DocUpdaterError: If the documentation file cannot be updated
        """
        result = self.plan()

        alias_path = Path(self.config.alias_file)
        write_alias_file(result.lines, alias_path)
        result.alias_path = alias_path
        logger.info(f"Wrote {result.definition_count} definitions to {alias_path}")

        if update_docs:
            doc_path = Path(self.config.doc_file)
            update_doc_file(doc_path, result.aliases, alias_path, prefix=self.config.alias_prefix)
            result.doc_path = doc_path
            logger.info(f"Updated alias reference in {doc_path}")

        return result


__all__ = ["AliasGenerator", "GenerationResult"]
