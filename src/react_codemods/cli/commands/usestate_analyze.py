"""usestate-analyze command: report complex state initializers."""

from pathlib import Path

import typer

from ...analysis.reporters.console import ConsoleReporter
from ...core.runner import CodemodRunner
from ...tools.usestate_analyzer import UseStateAnalyzer
from ..context import announce, prepare
from ..output import print_json


def main(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="React project directory or single file"),
    json_output: bool = typer.Option(
        False, "--json", help="Output findings in JSON format"
    ),
) -> None:
    """🔎 Report useState calls initialized with complex expressions.

    [green]Example:[/green]
        $ react-codemods usestate-analyze ./src
    """
    config = prepare(ctx, path)
    announce("Analyzing React project at", path, json_output)

    report = CodemodRunner(UseStateAnalyzer(config), path).run()

    if json_output:
        print_json(report.to_dict())
        return
    reporter = ConsoleReporter()
    reporter.print_findings(report)
    reporter.print_errors(report)
