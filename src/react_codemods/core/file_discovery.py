"""File discovery and filtering for codemod runs."""

import fnmatch
import os
import re
from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from ..config.defaults import (
    DEFAULT_FILE_EXTENSIONS,
    DEFAULT_IGNORE_DIRS,
    DEFAULT_IGNORE_FILE_PATTERNS,
)


class FileDiscovery:
    """Turns a root path into the ordered list of files a tool processes.

    Directories are walked depth-first with entries sorted by name, so the
    order is stable across platforms. Ignored directories are pruned before
    they are entered; nothing below them is ever read.
    """

    def __init__(
        self,
        project_root: Path,
        file_extensions: Iterable[str] | None = None,
        ignore_dirs: Iterable[str] | None = None,
        ignore_files: Iterable[str] | None = None,
        skip_hidden_dirs: bool = False,
    ) -> None:
        """Initialize file discovery.

        Args:
            project_root: Directory to walk, or a single file
            file_extensions: Extensions to keep (e.g. ``{'.js', '.tsx'}``)
            ignore_dirs: Directory names never descended into
            ignore_files: fnmatch patterns of file names to skip
            skip_hidden_dirs: Also prune directories starting with a dot
        """
        self.project_root = project_root
        self.file_extensions = {
            ext.lower() for ext in (file_extensions or DEFAULT_FILE_EXTENSIONS)
        }
        self.ignore_dirs = set(ignore_dirs or DEFAULT_IGNORE_DIRS)
        self.skip_hidden_dirs = skip_hidden_dirs
        self._file_patterns = self._compile_patterns(
            ignore_files if ignore_files is not None else DEFAULT_IGNORE_FILE_PATTERNS
        )

    @staticmethod
    def _compile_patterns(patterns: Iterable[str]) -> list[re.Pattern[str]]:
        """Compile fnmatch patterns once instead of per file."""
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(fnmatch.translate(pattern)))
            except re.error as e:
                logger.warning(f"Failed to compile pattern '{pattern}': {e}")
        return compiled

    def should_ignore_dir(self, name: str) -> bool:
        if name in self.ignore_dirs:
            return True
        return self.skip_hidden_dirs and name.startswith(".")

    def should_process_file(self, file_path: Path) -> bool:
        """Check extension and file-name patterns; no filesystem access."""
        if file_path.suffix.lower() not in self.file_extensions:
            return False
        name = file_path.name
        return not any(pattern.match(name) for pattern in self._file_patterns)

    def find_files(self) -> list[Path]:
        """Find every file the tool should process.

        Returns:
            File paths in depth-first, name-sorted order
        """
        root = self.project_root
        if root.is_file():
            return [root] if self.should_process_file(root) else []

        found: list[Path] = []
        dir_count = 0
        for current, dirs, files in os.walk(root):
            dir_count += 1
            current_path = Path(current)
            # Prune in place so os.walk never enters ignored directories
            dirs[:] = sorted(d for d in dirs if not self.should_ignore_dir(d))
            for filename in sorted(files):
                file_path = current_path / filename
                if self.should_process_file(file_path):
                    found.append(file_path)

        logger.debug(f"File scan complete: {dir_count} directories, {len(found)} candidate files")
        return found

    def display_path(self, file_path: Path) -> str:
        """Path shown in reports: relative to the root directory."""
        root = self.project_root
        base = root if root.is_dir() else root.parent
        try:
            return file_path.relative_to(base).as_posix()
        except ValueError:
            return file_path.as_posix()
