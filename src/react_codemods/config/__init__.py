"""Configuration for react-codemods."""

from .settings import (
    AnalysisSettings,
    CodemodConfig,
    DiscoverySettings,
    HookSettings,
    OutputSettings,
    ProfilerSettings,
)

__all__ = [
    "AnalysisSettings",
    "CodemodConfig",
    "DiscoverySettings",
    "HookSettings",
    "OutputSettings",
    "ProfilerSettings",
]
