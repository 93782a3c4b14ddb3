"""log-functions command: function catalog and call logging."""

from pathlib import Path

import typer
from rich.markup import escape

from ...analysis.reporters.console import ConsoleReporter
from ...core.runner import CodemodRunner
from ...tools.function_logger import CATEGORIES, FunctionLogger
from ..context import announce, prepare
from ..output import print_info, print_json, print_success, print_warning
from ..selection import choose_categories


def main(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Project directory or single file"),
    category: list[str] | None = typer.Option(
        None,
        "--category",
        help="Function category to log: handler, hook or utility; repeatable",
    ),
    select: list[str] | None = typer.Option(
        None, "--select", "-s", help="Function name to log; repeatable"
    ),
    select_all: bool = typer.Option(False, "--all", help="Log every cataloged function"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report what would change without writing files"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output the run report as JSON"),
) -> None:
    """📣 Log calls of selected functions.

    Catalogs every named function first (handlers, hooks, utilities), then
    inserts a log line at the start of each selected one.

    [green]Log every event handler:[/green]
        $ react-codemods log-functions ./src --category handler
    """
    unknown = [name for name in category or [] if name not in CATEGORIES]
    if unknown:
        raise typer.BadParameter(
            f"Unknown categories {unknown}; choose from {list(CATEGORIES)}",
            param_hint="--category",
        )

    config = prepare(ctx, path)
    announce("Scanning project", path, json_output)

    tool = FunctionLogger(config)
    runner = CodemodRunner(tool, path, dry_run=dry_run)
    files = runner.discover()
    scan = runner.scan(files)

    reporter = ConsoleReporter()
    if not json_output:
        reporter.print_catalog(tool.catalog)
        reporter.print_errors(scan)

    if select_all:
        categories: list[str] = list(CATEGORIES)
    elif category or select:
        categories = list(category or [])
    elif json_output:
        categories = []
    else:
        categories = choose_categories(tool.catalog)

    selected = tool.select(categories, select or [])
    if not selected:
        if json_output:
            print_json({"catalog": tool.catalog.counts(), "selected": []})
        else:
            print_warning("No functions selected for logging!")
        return

    if not json_output:
        print_info(f"Adding logs to {len(selected)} functions...")
    report = runner.run(files)

    if json_output:
        print_json({"catalog": tool.catalog.counts(), "selected": sorted(selected), **report.to_dict()})
        return
    reporter.print_modifications(report)
    if report.files_modified:
        print_success(
            f"Modified {report.files_modified} files, added logs to {report.sites_modified} functions"
        )
    else:
        print_warning(escape("No files were modified. Please check your selection."))
