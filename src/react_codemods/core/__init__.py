"""Core syntax-tree engine for react-codemods."""

from .exceptions import (
    CodemodError,
    ConfigError,
    ParsingError,
    ProjectNotFoundError,
    SourceError,
    SourceReadError,
    SourceWriteError,
    ToolchainError,
    TransformError,
)

__all__ = [
    "CodemodError",
    "ConfigError",
    "ParsingError",
    "ProjectNotFoundError",
    "SourceError",
    "SourceReadError",
    "SourceWriteError",
    "ToolchainError",
    "TransformError",
]
