"""effect-debug command: count and log effect callback runs."""

from pathlib import Path

import typer

from ...analysis.reporters.console import ConsoleReporter
from ...core.runner import CodemodRunner
from ...tools.effect_logger import EffectLogger
from ..context import announce, prepare
from ..output import print_json, print_success


def main(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="React project directory or single file"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report what would change without writing files"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output the run report as JSON"),
) -> None:
    """🐛 Add a call counter and log lines to every useEffect callback.

    [green]Example:[/green]
        $ react-codemods effect-debug ./src
    """
    config = prepare(ctx, path)
    announce("Starting useEffect debug run on", path, json_output)

    report = CodemodRunner(EffectLogger(config), path, dry_run=dry_run).run()

    if json_output:
        print_json({**report.to_dict(), "sites_found": report.sites_found})
        return
    ConsoleReporter().print_modifications(report)
    print_success(f"Total useEffects found and modified: {report.sites_modified}")
