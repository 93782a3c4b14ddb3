"""Common surface of the codemod tools."""

from __future__ import annotations

from pathlib import Path

from ..config.settings import CodemodConfig
from ..core.file_discovery import FileDiscovery
from ..core.matcher import ImportIndex, PatternMatcher
from ..core.models import Finding
from ..core.mutation import CodeStyle, EditPlan
from ..core.syntax import SourceDocument


class Codemod:
    """Base class for tools driven by :class:`~react_codemods.core.runner.CodemodRunner`.

    Analysis tools override :meth:`analyze`, mutating tools :meth:`plan`,
    two-phase tools additionally :meth:`collect` and :meth:`finish_scan`.
    """

    name = ""
    description = ""
    # Files whose text lacks this token are skipped without parsing
    required_token: str | None = None
    extra_ignore_dirs: tuple[str, ...] = ()
    extra_ignore_files: tuple[str, ...] = ()
    skip_hidden_dirs = False

    def __init__(self, config: CodemodConfig | None = None) -> None:
        self.config = config or CodemodConfig()
        self.style = CodeStyle(
            quote_style=self.config.output.quote_style,
            log_function=self.config.output.log_function,
        )

    @property
    def extensions(self) -> list[str]:
        return list(self.config.discovery.extensions)

    def discovery(self, project_root: Path) -> FileDiscovery:
        settings = self.config.discovery
        return FileDiscovery(
            project_root,
            file_extensions=self.extensions,
            ignore_dirs=[*settings.ignore_dirs, *self.extra_ignore_dirs],
            ignore_files=[*settings.ignore_files, *self.extra_ignore_files],
            skip_hidden_dirs=self.skip_hidden_dirs,
        )

    def matcher_for(self, document: SourceDocument) -> PatternMatcher:
        return PatternMatcher(ImportIndex.from_program(document.root), self.config.hooks.module)

    def new_plan(self, document: SourceDocument) -> EditPlan:
        return EditPlan(document, self.style)

    def analyze(self, document: SourceDocument) -> list[Finding]:
        return []

    def plan(self, document: SourceDocument) -> EditPlan | None:
        return None

    def collect(self, document: SourceDocument) -> None:
        raise NotImplementedError(f"{self.name} has no scan phase")

    def finish_scan(self) -> None:
        pass
