"""Result records produced by the tools and the runner."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Finding:
    """One complex state initializer reported in analysis mode.

    Attributes:
        component_name: Owning function, ``"Unknown Component"`` when none
        variable_name: First element of the destructured state pair
        file_path: Path relative to the analyzed root
        line_number: 1-based line of the initializer
        complexity_class: Report label of the initializer shape
        source_snippet: Trimmed source text of the initializer
    """

    component_name: str
    variable_name: str
    file_path: str
    line_number: int
    complexity_class: str
    source_snippet: str

    @property
    def location(self) -> str:
        return f"{self.file_path}:{self.line_number}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component_name,
            "variable": self.variable_name,
            "file": self.file_path,
            "line": self.line_number,
            "type": self.complexity_class,
            "init": self.source_snippet,
        }


@dataclass
class FileOutcome:
    """What happened to a single file during one pass."""

    file_path: str
    sites: int = 0
    skipped: int = 0
    modified: bool = False
    findings: list[Finding] = field(default_factory=list)
    touched: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def sites_found(self) -> int:
        """Sites changed now plus sites that were already instrumented."""
        return self.sites + self.skipped

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class RunReport:
    """Aggregate of every file outcome in a run."""

    tool: str
    dry_run: bool = False
    outcomes: list[FileOutcome] = field(default_factory=list)

    def add(self, outcome: FileOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def files_scanned(self) -> int:
        return len(self.outcomes)

    @property
    def modified(self) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.modified]

    @property
    def files_modified(self) -> int:
        return len(self.modified)

    @property
    def sites_modified(self) -> int:
        return sum(outcome.sites for outcome in self.outcomes)

    @property
    def sites_found(self) -> int:
        return sum(outcome.sites_found for outcome in self.outcomes)

    @property
    def findings(self) -> list[Finding]:
        return [finding for outcome in self.outcomes for finding in outcome.findings]

    @property
    def errors(self) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    def counts_by_class(self) -> list[tuple[str, int]]:
        """Finding totals per complexity class, largest first."""
        counts = Counter(finding.complexity_class for finding in self.findings)
        return sorted(counts.items(), key=lambda item: (-item[1], item[0]))

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "dry_run": self.dry_run,
            "files_scanned": self.files_scanned,
            "files_modified": self.files_modified,
            "sites_modified": self.sites_modified,
            "findings": [finding.to_dict() for finding in self.findings],
            "counts": dict(self.counts_by_class()),
            "modified_files": [
                {"file": outcome.file_path, "sites": outcome.sites, "touched": outcome.touched}
                for outcome in self.modified
            ],
            "errors": [
                {"file": outcome.file_path, "error": outcome.error} for outcome in self.errors
            ],
        }
