"""Prompt-based selection for the two-phase commands.

Both prompts print a numbered checklist and read space-separated numbers.
They return plain selection tokens; the tools resolve them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.prompt import Prompt

from ..tools.profiler import SELECT_ALL, group_token
from .output import console, print_warning

if TYPE_CHECKING:
    from ..tools.function_logger import FunctionCatalog
    from ..tools.profiler import ComponentGraph


def _ask(choices: list[tuple[str, str]], question: str) -> list[str]:
    """Show numbered choices and return the values picked by number."""
    for number, (_, title) in enumerate(choices, 1):
        console.print(f"  [bold]{number:>3}.[/bold] {title}")

    answer = Prompt.ask(f"\n{question} (space-separated numbers)", default="", console=console)
    picked: list[str] = []
    for part in answer.replace(",", " ").split():
        if part.isdigit() and 1 <= int(part) <= len(choices):
            value = choices[int(part) - 1][0]
            if value not in picked:
                picked.append(value)
        else:
            print_warning(f"Ignoring invalid choice '{escape(part)}'")
    return picked


def choose_components(graph: ComponentGraph) -> list[str]:
    """Pick components and component groups to profile."""
    choices: list[tuple[str, str]] = [
        (SELECT_ALL, f"📋 Select all components ({len(graph)})")
    ]
    for component_type, count in graph.group_counts().items():
        choices.append((group_token(component_type), f"Select all {component_type}s ({count})"))
    for depth, node in graph.walk():
        choices.append((node.name, f"{'  ' * depth}{escape(node.name)} [dim]({node.type})[/dim]"))

    return _ask(choices, "Select components to add Profiler to")


def choose_categories(catalog: FunctionCatalog) -> list[str]:
    """Pick function categories to log."""
    counts = catalog.counts()
    choices = [(category, f"{category} ({count})") for category, count in counts.items()]
    return _ask(choices, "Select categories to add logging")
