"""Codemod configuration loaded from ``.react-codemods.yaml``."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from ..core.exceptions import ConfigError
from .defaults import (
    DEFAULT_EFFECT_HOOK,
    DEFAULT_FILE_EXTENSIONS,
    DEFAULT_HOOK_MODULE,
    DEFAULT_IGNORE_DIRS,
    DEFAULT_IGNORE_FILE_PATTERNS,
    DEFAULT_LOG_FUNCTION,
    DEFAULT_PROFILER_CALLBACK,
    DEFAULT_PROFILER_TAG,
    DEFAULT_QUOTE_STYLE,
    DEFAULT_STATE_HOOK,
)

UNLISTED_POLICIES = ("ignore", "report")
QUOTE_STYLES = ("single", "double")


@dataclass
class HookSettings:
    """Which hooks are tracked and where they must be imported from."""

    module: str = DEFAULT_HOOK_MODULE
    state_hook: str = DEFAULT_STATE_HOOK
    effect_hook: str = DEFAULT_EFFECT_HOOK


@dataclass
class DiscoverySettings:
    """File discovery filters."""

    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS))
    ignore_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_DIRS))
    ignore_files: list[str] = field(
        default_factory=lambda: list(DEFAULT_IGNORE_FILE_PATTERNS)
    )


@dataclass
class OutputSettings:
    """Shape of generated code."""

    log_function: str = DEFAULT_LOG_FUNCTION
    quote_style: str = DEFAULT_QUOTE_STYLE


@dataclass
class AnalysisSettings:
    """Analysis-mode options."""

    # What to do with initializer shapes outside the known classes:
    # "ignore" drops them, "report" files them under "other expression"
    unlisted_initializers: str = "ignore"


@dataclass
class ProfilerSettings:
    """Profiler wrapping options."""

    tag: str = DEFAULT_PROFILER_TAG
    callback: str = DEFAULT_PROFILER_CALLBACK


_SECTIONS: dict[str, type] = {
    "hooks": HookSettings,
    "discovery": DiscoverySettings,
    "output": OutputSettings,
    "analysis": AnalysisSettings,
    "profiler": ProfilerSettings,
}


@dataclass
class CodemodConfig:
    """Complete codemod configuration."""

    hooks: HookSettings = field(default_factory=HookSettings)
    discovery: DiscoverySettings = field(default_factory=DiscoverySettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)
    profiler: ProfilerSettings = field(default_factory=ProfilerSettings)

    @classmethod
    def load(cls, path: Path) -> CodemodConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            CodemodConfig instance (defaults when the file does not exist)

        Raises:
            ConfigError: If the file is not valid YAML or has unknown keys
        """
        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e

        logger.debug(f"Loaded configuration from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CodemodConfig:
        """Create config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            CodemodConfig instance
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping")

        unknown = set(data) - set(_SECTIONS)
        if unknown:
            raise ConfigError(f"Unknown configuration sections: {sorted(unknown)}")

        sections: dict[str, Any] = {}
        for name, section_cls in _SECTIONS.items():
            section_data = data.get(name) or {}
            if not isinstance(section_data, dict):
                raise ConfigError(f"Section '{name}' must be a mapping")
            allowed = {f.name for f in fields(section_cls)}
            bad = set(section_data) - allowed
            if bad:
                raise ConfigError(f"Unknown keys in '{name}': {sorted(bad)}")
            sections[name] = section_cls(**section_data)

        config = cls(**sections)
        config.validate()
        return config

    def validate(self) -> None:
        """Check enumerated values."""
        if self.analysis.unlisted_initializers not in UNLISTED_POLICIES:
            raise ConfigError(
                f"analysis.unlisted_initializers must be one of {UNLISTED_POLICIES}"
            )
        if self.output.quote_style not in QUOTE_STYLES:
            raise ConfigError(f"output.quote_style must be one of {QUOTE_STYLES}")
        self.discovery.extensions = [
            ext if ext.startswith(".") else f".{ext}"
            for ext in self.discovery.extensions
        ]
