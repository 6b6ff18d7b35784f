"""CLI entry point for kubealias.

Commands:
    kubealias generate     # Write kubectl_aliases and update README.md
    kubealias show         # Show the alias assignment without writing files
    kubealias catalog      # Show the effective command catalog
    kubealias validate     # Run generated aliases against a live cluster
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from kubealias import __version__
from kubealias.alias_emitter import AliasEmitterError
from kubealias.alias_validator import AliasValidator, AliasValidatorError, load_checks
from kubealias.catalog import CommandCatalog
from kubealias.click_group import KubealiasGroup
from kubealias.config_manager import ConfigError, ConfigManager, GeneratorConfig
from kubealias.doc_updater import DocUpdaterError
from kubealias.generator import AliasGenerator

logger = logging.getLogger(__name__)


def _get_config(ctx: click.Context) -> GeneratorConfig:
    return ctx.obj["config"]


def _get_catalog(ctx: click.Context) -> CommandCatalog:
    return ctx.obj["catalog"]


@click.group(
    cls=KubealiasGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)
@click.option("--config", "config_path", type=click.Path(), help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed execution information")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """kubealias - generate short shell aliases for kubectl.

    \b
    COMMANDS:
        generate      Write the alias file and update the README reference
        show          Show which alias each subcommand gets
        catalog       Show the known commands and their modifiers
        validate      Run generated aliases against a live cluster

    \b
    EXAMPLES:
        $ kubealias generate
        $ kubealias generate --alias-file ~/.kubectl_aliases --skip-docs
        $ kubealias validate --manifest kubectl_test_objects.yaml

    \b
    CONFIGURATION:
        Config file: ./kubealias.toml (or --config PATH)
        Environment: KUBEALIAS_ALIAS_PREFIX, KUBEALIAS_KUBECONFIG, ...
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    try:
        config = ConfigManager.load_config(config_path)
        catalog = config.build_catalog()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    ctx.obj = {"config": config, "catalog": catalog}


@main.command(name="generate")
@click.option("--alias-file", type=click.Path(dir_okay=False), help="Alias definitions output file")
@click.option("--doc-file", type=click.Path(dir_okay=False), help="Documentation file to update")
@click.option("--skip-docs", is_flag=True, help="Do not update the documentation file")
@click.option("--prefix", type=str, help="Prefix for generated names (default: k)")
@click.option(
    "--priority-fallback",
    is_flag=True,
    help="Give priority commands that lose their one-letter alias a longer one",
)
@click.pass_context
def generate_command(
    ctx: click.Context,
    alias_file: str | None,
    doc_file: str | None,
    skip_docs: bool,
    prefix: str | None,
    priority_fallback: bool,
) -> None:
    """Generate kubectl aliases and update the documentation.

    Discovers available subcommands and resource short names, assigns
    aliases, writes the alias file and rewrites the README alias section.
    """
    config = _get_config(ctx)
    if alias_file:
        config.alias_file = alias_file
    if doc_file:
        config.doc_file = doc_file
    if prefix is not None:
        config.alias_prefix = prefix
    if priority_fallback:
        config.priority_fallback = True

    try:
        generator = AliasGenerator(config, catalog=_get_catalog(ctx))
        result = generator.generate(update_docs=not skip_docs)
    except (AliasEmitterError, DocUpdaterError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(result.format_summary())
    click.echo(f"Alias file: {result.alias_path}")
    if result.doc_path:
        click.echo(f"Documentation: {result.doc_path}")


@main.command(name="show")
@click.pass_context
def show_command(ctx: click.Context) -> None:
    """Show the alias assigned to each subcommand."""
    config = _get_config(ctx)
    catalog = _get_catalog(ctx)
    result = AliasGenerator(config, catalog=catalog).plan()

    console = Console()
    table = Table(title="kubectl Aliases", show_header=True, header_style="bold")
    table.add_column("Command", style="cyan")
    table.add_column("Alias", style="green")
    table.add_column("Priority", style="dim")

    for command in sorted(result.aliases):
        table.add_row(
            command,
            f"{config.alias_prefix}{result.aliases[command]}",
            "yes" if catalog[command].priority else "",
        )

    console.print(table)
    console.print()
    console.print(f"[dim]{result.format_summary()}[/dim]")


@main.command(name="catalog")
@click.pass_context
def catalog_command(ctx: click.Context) -> None:
    """Show the known commands and their modifier groups."""
    catalog = _get_catalog(ctx)

    console = Console()
    table = Table(title="Command Catalog", show_header=True, header_style="bold")
    table.add_column("Command", style="cyan")
    table.add_column("Priority")
    table.add_column("Modifiers", style="dim")

    for name in sorted(catalog):
        spec = catalog[name]
        modifiers = ", ".join(
            f"{group}({','.join(repr(s) for s in mods)})"
            for group, mods in sorted(spec.modifiers.items())
        )
        table.add_row(name, "yes" if spec.priority else "", modifiers)

    console.print(table)


@main.command(name="validate")
@click.option("--alias-file", type=click.Path(dir_okay=False), help="Alias definitions file")
@click.option(
    "--manifest",
    type=click.Path(exists=True, dir_okay=False),
    help="Apply test objects from this manifest first",
)
@click.option("--workers", type=click.IntRange(min=1), help="Parallel checks (default: 20)")
@click.pass_context
def validate_command(
    ctx: click.Context, alias_file: str | None, manifest: str | None, workers: int | None
) -> None:
    """Run generated get/describe aliases against a live cluster.

    \b
    Exits non-zero when any alias has invalid shell syntax or a lookup of a
    missing object unexpectedly succeeds.
    """
    config = _get_config(ctx)
    alias_path = Path(alias_file or config.alias_file)
    validator = AliasValidator(
        max_workers=workers or config.validation_workers,
        binary=config.cli_binary,
        kubeconfig=config.kubeconfig,
    )

    try:
        if manifest:
            validator.apply_manifest(Path(manifest))
        checks = load_checks(alias_path)
    except AliasValidatorError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Running {len(checks)} checks from {alias_path}...")
    report = validator.validate(checks, progress_callback=logger.debug)

    if report.failed:
        console = Console()
        table = Table(title="Failed Checks", show_header=True, header_style="bold")
        table.add_column("Check", style="cyan")
        table.add_column("Reason", style="red")
        for failure in report.get_failures():
            table.add_row(failure.check.label, failure.message)
        console.print(table)

    click.echo(report.format_summary())
    if not report.all_passed:
        sys.exit(1)


if __name__ == "__main__":
    main()


__all__ = ["main"]
