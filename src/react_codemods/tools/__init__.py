"""Codemod tools built on the core engine."""

from .base import Codemod
from .effect_logger import EffectLogger
from .function_logger import FunctionCatalog, FunctionLogger
from .profiler import ComponentGraph, ComponentProfiler
from .setter_logger import SetterLogger
from .usestate_analyzer import UseStateAnalyzer

TOOLS: dict[str, type[Codemod]] = {
    tool.name: tool
    for tool in (UseStateAnalyzer, SetterLogger, EffectLogger, ComponentProfiler, FunctionLogger)
}

__all__ = [
    "TOOLS",
    "Codemod",
    "ComponentGraph",
    "ComponentProfiler",
    "EffectLogger",
    "FunctionCatalog",
    "FunctionLogger",
    "SetterLogger",
    "UseStateAnalyzer",
]
