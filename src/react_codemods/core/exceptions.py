"""Typed exception hierarchy for react-codemods.

Hierarchy
---------
CodemodError (base)
├── ConfigError            – configuration file / validation errors
├── ToolchainError         – required parsing modules are not importable
├── ProjectNotFoundError   – target path does not exist
├── SourceError            – per-file failures, never abort a run
│   ├── SourceReadError
│   ├── SourceWriteError
│   ├── ParsingError       – source text does not parse cleanly
│   └── TransformError     – planning or serializing a mutation failed

Startup errors (config, toolchain, missing project) stop the CLI before any
file is touched. ``SourceError`` subclasses are caught by the runner, logged
with the offending path and recorded in the run report.
"""

from typing import Any


class CodemodError(Exception):
    """Base exception for react-codemods."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


# ── Startup ─────────────────────────────────────────────────────────────


class ConfigError(CodemodError):
    """Configuration / validation errors."""

    pass


class ToolchainError(CodemodError):
    """Required third-party parsing modules are missing."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            f"Required modules are missing: {', '.join(missing)}",
            context={"missing": missing},
        )
        self.missing = missing


class ProjectNotFoundError(CodemodError):
    """Target file or directory not found."""

    pass


# ── Per-file ────────────────────────────────────────────────────────────


class SourceError(CodemodError):
    """Failure tied to a single source file."""

    def __init__(self, message: str, file_path: str | None = None, **context: Any) -> None:
        super().__init__(message, context={"file_path": file_path, **context})
        self.file_path = file_path


class SourceReadError(SourceError):
    """Source file could not be read or decoded."""

    pass


class SourceWriteError(SourceError):
    """Modified source could not be written back."""

    pass


class ParsingError(SourceError):
    """Source text contains syntax errors."""

    def __init__(self, message: str, file_path: str | None = None, line: int | None = None) -> None:
        super().__init__(message, file_path=file_path, line=line)
        self.line = line


class TransformError(SourceError):
    """A mutation could not be planned or serialized."""

    pass
