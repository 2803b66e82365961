"""Structured logging adapters."""

from midcurve_api.infrastructure.logging.console_adapter import ConsoleAdapter

__all__ = ["ConsoleAdapter"]
