"""Reporting of analysis and mutation runs."""

from .reporters import ConsoleReporter

__all__ = ["ConsoleReporter"]
