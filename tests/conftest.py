"""Shared fixtures for react-codemods tests."""

from pathlib import Path
from textwrap import dedent

import pytest

from react_codemods.core.syntax import SourceDocument


@pytest.fixture
def parse():
    """Parse dedented source text into a document."""

    def _parse(text: str, name: str = "Component.jsx") -> SourceDocument:
        return SourceDocument.from_source(dedent(text), Path(name))

    return _parse


@pytest.fixture
def make_project(tmp_path: Path):
    """Write ``{relative path: source}`` files under a temporary project root."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for relative, text in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(dedent(text), encoding="utf-8")
        return root

    return _make
