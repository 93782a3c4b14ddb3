"""React codemods - syntax-tree analysis and instrumentation for React codebases."""

__version__ = "0.3.0"

from .core.exceptions import CodemodError

__all__ = ["CodemodError", "__version__"]
