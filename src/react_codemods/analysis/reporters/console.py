"""Console reporter for codemod runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from ...core.models import RunReport
    from ...tools.function_logger import FunctionCatalog
    from ...tools.profiler import ComponentGraph

console = Console()

TYPE_ICONS = {
    "page": "📱",
    "layout": "🔲",
    "component": "🧩",
    "provider": "🔌",
}


class ConsoleReporter:
    """Console reporter for displaying codemod results in terminal."""

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    def print_findings(self, report: RunReport) -> None:
        """Print numbered findings followed by totals per class.

        Args:
            report: Analysis run report
        """
        findings = report.findings
        if not findings:
            self.console.print("[green]No complex useState initializations found.[/green]")
            self.console.print()
            return

        self.console.print(
            f"[bold]Found {len(findings)} complex useState initializations:[/bold]\n"
        )
        for index, finding in enumerate(findings, 1):
            self.console.print(
                f"[bold]{index}.[/bold] [cyan]{escape(finding.component_name)}[/cyan] "
                f"({escape(finding.variable_name)})"
            )
            self.console.print(f"   File: {escape(finding.location)}")
            self.console.print(f"   Type: [yellow]{escape(finding.complexity_class)}[/yellow]")
            self.console.print(f"   Init: [dim]{escape(finding.source_snippet)}[/dim]")
            self.console.print()

        self.print_class_totals(report)

    def print_class_totals(self, report: RunReport) -> None:
        """Print finding counts per class, largest first."""
        table = Table(
            title="Summary by initialization type",
            show_header=True,
            header_style="bold cyan",
            box=None,
        )
        table.add_column("Type", style="bold")
        table.add_column("Count", justify="right")
        for label, count in report.counts_by_class():
            table.add_row(escape(label), str(count))
        self.console.print(table)
        self.console.print()

    def print_modifications(self, report: RunReport) -> None:
        """Print one line per modified file and the run totals.

        Args:
            report: Mutation run report
        """
        verb = "Would modify" if report.dry_run else "Modified"
        for outcome in report.modified:
            detail = f"{outcome.sites} site{'s' if outcome.sites != 1 else ''}"
            if outcome.touched:
                detail += f": {', '.join(sorted(set(outcome.touched)))}"
            self.console.print(
                f"[green]✓[/green] {verb} {escape(outcome.file_path)} ({escape(detail)})"
            )

        self.console.print()
        self.console.print("[bold]Summary[/bold]")
        self.console.print(f"  Files scanned: {report.files_scanned}")
        self.console.print(f"  Files modified: {report.files_modified}")
        self.console.print(f"  Sites modified: {report.sites_modified}")
        if report.sites_found != report.sites_modified:
            self.console.print(f"  Sites found: {report.sites_found}")
        if report.dry_run:
            self.console.print("  [yellow]Dry run: no files were written[/yellow]")
        self.print_errors(report)

    def print_errors(self, report: RunReport) -> None:
        """Print files that failed, if any."""
        failed = report.errors
        if not failed:
            return
        self.console.print(f"  [red]Files failed: {len(failed)}[/red]")
        for outcome in failed:
            self.console.print(
                f"    [red]✗[/red] {escape(outcome.file_path)}: {escape(outcome.error or '')}"
            )

    def print_hierarchy(self, graph: ComponentGraph) -> None:
        """Print the component hierarchy as a tree."""
        if not len(graph):
            self.console.print("[yellow]No components found.[/yellow]")
            return

        root = Tree("[bold blue]📊 Component Hierarchy[/bold blue]")
        branches: list[Tree] = [root]
        for depth, node in graph.walk():
            del branches[depth + 1 :]
            icon = TYPE_ICONS.get(node.type, TYPE_ICONS["component"])
            branch = branches[depth].add(
                f"{icon} {escape(node.name)} [dim]({node.type} - {escape(node.file_path)})[/dim]"
            )
            branches.append(branch)
        self.console.print(root)
        self.console.print()

    def print_catalog(self, catalog: FunctionCatalog) -> None:
        """Print function counts per category."""
        table = Table(
            title="Function Statistics",
            show_header=True,
            header_style="bold cyan",
            box=None,
        )
        table.add_column("Category", style="bold")
        table.add_column("Functions", justify="right")
        for category, count in catalog.counts().items():
            table.add_row(category, str(count))
        self.console.print(table)
        self.console.print()
