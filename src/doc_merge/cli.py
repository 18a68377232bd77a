"""
CLI for doc-merge.

Usage:
    docmerge merge docs/en doxygen/xml
    docmerge merge docs/en doxygen/xml --trace-type CCNode --dry-run
    docmerge catalog docs/en
"""

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from doc_merge import __version__
from doc_merge.catalog import load_catalog
from doc_merge.config import MergeConfig
from doc_merge.errors import DocMergeError
from doc_merge.logging import configure_logging
from doc_merge.orchestrator import MergeOrchestrator

console = Console()


def _fail(error: DocMergeError) -> None:
    console.print(f"[bold red]❌ {error.message}[/bold red]")
    for key, value in error.context.items():
        console.print(f"   {key}: {value}")
    if error.cause is not None:
        console.print(f"   cause: {error.cause}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Diagnostic verbosity (default: WARNING, or INFO with --trace-type).",
)
@click.option("--json-logs", is_flag=True, help="Emit diagnostics as JSON lines.")
@click.pass_context
def cli(ctx, log_level: str | None, json_logs: bool):
    """Merge Doxygen XML documentation into ECMA XML documentation."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    ctx.obj["json_format"] = json_logs or None
    configure_logging(level=log_level or "WARNING", json_format=ctx.obj["json_format"])


@cli.command()
@click.argument("ecma_dir", type=click.Path(exists=True, file_okay=False))
@click.argument("doxy_dir", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file.",
)
@click.option(
    "--trace-type", "-t",
    multiple=True,
    help="Log markup before/after rewriting for this type (repeatable).",
)
@click.option("--dry-run", is_flag=True, help="Merge without writing the ECMA tree.")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_context
def merge(
    ctx,
    ecma_dir: str,
    doxy_dir: str,
    config_path: str | None,
    trace_type: tuple,
    dry_run: bool,
    as_json: bool,
):
    """Merge DOXY_DIR documentation into the ECMA tree at ECMA_DIR.

    Examples:
        docmerge merge docs/en doxygen/xml
        docmerge merge docs/en doxygen/xml -t CCNode -t CCSprite --dry-run
    """
    try:
        config = MergeConfig.from_yaml(Path(config_path)) if config_path else MergeConfig()
        config = config.merged_with(
            target_root=Path(ecma_dir),
            source_root=Path(doxy_dir),
            trace_types=config.trace_types | set(trace_type),
            dry_run=dry_run or None,
        )
        if config.trace_types and ctx.obj["log_level"] is None:
            # Trace events are info-level; an explicit --log-level still wins.
            configure_logging(level="INFO", json_format=ctx.obj["json_format"])
        report = MergeOrchestrator.from_config(config).run()
    except DocMergeError as e:
        _fail(e)
        return

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    console.print("\n[bold blue]📚 Merge Summary[/bold blue]\n")
    table = Table()
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Types merged", str(report.types_merged))
    table.add_row("Types without Doxygen docs", str(len(report.types_without_source)))
    table.add_row("Members matched", str(report.members_matched))
    table.add_row("Members unmatched", str(len(report.unmatched_members)))
    table.add_row("Parameters bound", str(report.parameters_bound))
    table.add_row("Files written", str(report.files_written))
    console.print(table)

    if report.unhandled_kinds:
        console.print("\n[bold yellow]Unhandled markup:[/bold yellow]")
        for kind, count in report.unhandled_kinds.most_common():
            console.print(f"  {kind}: {count}")

    if report.unmatched_members:
        console.print(f"\n[bold yellow]⚠️  Unmatched members ({len(report.unmatched_members)}):[/bold yellow]")
        for type_name, export in report.unmatched_members[:20]:
            console.print(f"  {type_name}: {export}")
        if len(report.unmatched_members) > 20:
            console.print(f"  ... and {len(report.unmatched_members) - 20} more")

    if config.dry_run:
        console.print("\n[dim]Dry run: nothing written.[/dim]")


@cli.command()
@click.argument("ecma_dir", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--kind", "-k",
    multiple=True,
    help="Type kinds to include (default: Class, Structure).",
)
def catalog(ecma_dir: str, kind: tuple):
    """List the ECMA types that take part in a merge."""
    try:
        entries = load_catalog(Path(ecma_dir), kind or ("Class", "Structure"))
    except DocMergeError as e:
        _fail(e)
        return

    table = Table(title=f"Catalog ({len(entries)} types)")
    table.add_column("Type", style="cyan")
    table.add_column("Full name")
    for entry in entries:
        table.add_row(entry.short_name, entry.full_name)
    console.print(table)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
