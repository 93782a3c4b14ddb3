"""Per-file driver shared by every tool.

Each file is read, parsed, handed to the tool and, for mutating tools,
serialized and written back only when its content changed. Failures are
confined to the file that raised them: they are logged, recorded on the
file's outcome and the run moves on.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from .exceptions import SourceError, SourceWriteError
from .models import FileOutcome, RunReport
from .mutation import serialize
from .syntax import SourceDocument, read_source

if TYPE_CHECKING:
    from ..tools.base import Codemod
    from .file_discovery import FileDiscovery


class CodemodRunner:
    """Runs one tool over a file set."""

    def __init__(self, tool: Codemod, project_root: Path, dry_run: bool = False) -> None:
        """Initialize the runner.

        Args:
            tool: Tool instance (analysis, mutation or two-phase)
            project_root: Directory or single file given on the command line
            dry_run: Plan and serialize mutations without writing them
        """
        self.tool = tool
        self.project_root = project_root
        self.dry_run = dry_run
        self.discovery: FileDiscovery = tool.discovery(project_root)

    def discover(self) -> list[Path]:
        return self.discovery.find_files()

    # ── passes ──────────────────────────────────────────────────────────

    def run(self, files: Iterable[Path] | None = None) -> RunReport:
        """Analyze or transform every file.

        Args:
            files: Files to process; discovered from the root when omitted

        Returns:
            Report with one outcome per file
        """
        return self._pass(self.process_file, files)

    def scan(self, files: Iterable[Path] | None = None) -> RunReport:
        """Phase one of a two-phase tool: feed every file to ``tool.collect``.

        The tool's ``finish_scan`` hook runs once all files are in.
        """
        report = self._pass(self.scan_file, files)
        self.tool.finish_scan()
        return report

    def _pass(
        self, handler: Callable[[Path], FileOutcome], files: Iterable[Path] | None
    ) -> RunReport:
        paths = list(files) if files is not None else self.discover()
        report = RunReport(tool=self.tool.name, dry_run=self.dry_run)
        for path in paths:
            report.add(handler(path))

        logger.debug(
            f"{self.tool.name}: {report.files_scanned} files, "
            f"{report.files_modified} modified, {len(report.errors)} failed"
        )
        return report

    # ── single file ─────────────────────────────────────────────────────

    def _load(self, path: Path, outcome: FileOutcome) -> SourceDocument | None:
        """Read and parse a file; ``None`` when the tool has nothing to look at."""
        text = read_source(path)
        token = self.tool.required_token
        if token and token not in text:
            logger.debug(f"Skipping {outcome.file_path}: no '{token}'")
            return None
        return SourceDocument.from_source(text, path, display_path=outcome.file_path)

    def scan_file(self, path: Path) -> FileOutcome:
        outcome = FileOutcome(file_path=self.discovery.display_path(path))
        try:
            document = self._load(path, outcome)
            if document is not None:
                self.tool.collect(document)
        except SourceError as e:
            self._record_error(outcome, e)
        except Exception as e:
            self._record_error(outcome, e, unexpected=True)
        return outcome

    def process_file(self, path: Path) -> FileOutcome:
        """Run the tool on one file and write back any change."""
        outcome = FileOutcome(file_path=self.discovery.display_path(path))
        try:
            document = self._load(path, outcome)
            if document is None:
                return outcome

            outcome.findings.extend(self.tool.analyze(document))

            plan = self.tool.plan(document)
            if plan is None:
                return outcome
            outcome.skipped = plan.skipped

            output = serialize(plan)
            if output is None or output == document.text:
                return outcome

            if not self.dry_run:
                self._write(path, output)
            outcome.modified = True
            outcome.sites = plan.sites
            outcome.touched = list(plan.touched)
            logger.debug(f"Modified {outcome.file_path} ({plan.sites} sites)")
        except SourceError as e:
            self._record_error(outcome, e)
        except Exception as e:
            self._record_error(outcome, e, unexpected=True)
        return outcome

    @staticmethod
    def _write(path: Path, output: str) -> None:
        try:
            path.write_bytes(output.encode("utf-8"))
        except OSError as e:
            raise SourceWriteError(f"Cannot write {path}: {e}", file_path=str(path)) from e

    @staticmethod
    def _record_error(outcome: FileOutcome, error: Exception, unexpected: bool = False) -> None:
        message = f"{type(error).__name__}: {error}" if unexpected else str(error)
        logger.error(f"{outcome.file_path}: {message}")
        outcome.error = message
