"""Output formatters for scan reports."""

from .formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "ConsoleFormatter",
    "JSONFormatter",
]
