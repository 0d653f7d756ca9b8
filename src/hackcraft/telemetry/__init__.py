"""Logging setup for command-line entrypoints."""

from .logging import KeyValueFormatter, configure_logging

__all__ = ["KeyValueFormatter", "configure_logging"]
