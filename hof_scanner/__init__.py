"""hof-vulnerabilities-scanner - finds known-compromised npm package versions in manifests and lockfiles."""

__version__ = "1.0.0"
__author__ = "HOF Platform Team"

from .compromised import CompromisedRegistry, CompromisedListClient, load_compromised_file
from .core.scanner import Scanner, ScannerConfig, scan_directory
from .core.report import ExitCode, ScanReport
from .output.formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "CompromisedRegistry",
    "CompromisedListClient",
    "load_compromised_file",
    "Scanner",
    "ScannerConfig",
    "scan_directory",
    "ExitCode",
    "ScanReport",
    "ConsoleFormatter",
    "JSONFormatter",
]
