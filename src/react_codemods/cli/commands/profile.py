"""profile command: component hierarchy and <Profiler> wrapping."""

from pathlib import Path

import typer
from rich.markup import escape

from ...analysis.reporters.console import ConsoleReporter
from ...core.runner import CodemodRunner
from ...tools.profiler import SELECT_ALL, ComponentProfiler
from ..context import announce, prepare
from ..output import print_info, print_json, print_warning
from ..selection import choose_components


def main(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="React project directory or single file"),
    select: list[str] | None = typer.Option(
        None,
        "--select",
        "-s",
        help="Component name or group (*page*, *layout*, *component*, *provider*); repeatable",
    ),
    select_all: bool = typer.Option(False, "--all", help="Profile every component"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report what would change without writing files"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output the run report as JSON"),
) -> None:
    """⏱️ Wrap selected React components in <Profiler>.

    Scans every .jsx/.tsx file into a component hierarchy first, then wraps
    the JSX returned by the selected components.

    [green]Profile every page:[/green]
        $ react-codemods profile ./src --select '*page*'

    [green]Pick interactively:[/green]
        $ react-codemods profile ./src
    """
    config = prepare(ctx, path)
    announce("Analyzing React component hierarchy in", path, json_output)

    tool = ComponentProfiler(config)
    runner = CodemodRunner(tool, path, dry_run=dry_run)
    files = runner.discover()
    scan = runner.scan(files)

    reporter = ConsoleReporter()
    if not json_output:
        reporter.print_hierarchy(tool.graph)
        reporter.print_errors(scan)

    if select_all:
        tokens = [SELECT_ALL]
    elif select:
        tokens = list(select)
    elif json_output:
        tokens = []
    else:
        tokens = choose_components(tool.graph)

    selected = tool.select(tokens)
    if not selected:
        if json_output:
            print_json({"hierarchy": tool.graph.as_tree(), "selected": []})
        else:
            print_warning("No components selected. Exiting...")
        return

    if not json_output:
        print_info(f"Adding Profiler to: {escape(', '.join(sorted(selected)))}")
    report = runner.run(files)

    if json_output:
        print_json(
            {
                "hierarchy": tool.graph.as_tree(),
                "selected": sorted(selected),
                **report.to_dict(),
            }
        )
    else:
        reporter.print_modifications(report)
