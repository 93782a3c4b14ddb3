"""Reporters for codemod results."""

from .console import ConsoleReporter

__all__ = ["ConsoleReporter"]
