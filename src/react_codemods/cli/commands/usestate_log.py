"""usestate-log command: log every state setter call."""

from pathlib import Path

import typer

from ...analysis.reporters.console import ConsoleReporter
from ...core.runner import CodemodRunner
from ...tools.setter_logger import SetterLogger
from ..context import announce, prepare
from ..output import print_json


def main(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="React project directory or single file"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report what would change without writing files"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output the run report as JSON"),
) -> None:
    """📝 Insert a log statement before every useState setter call.

    [green]Example:[/green]
        $ react-codemods usestate-log ./src --dry-run
    """
    config = prepare(ctx, path)
    announce("Processing React project at", path, json_output)

    report = CodemodRunner(SetterLogger(config), path, dry_run=dry_run).run()

    if json_output:
        print_json(report.to_dict())
    else:
        ConsoleReporter().print_modifications(report)
