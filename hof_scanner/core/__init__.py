"""Detection engine: parsers, matching, report assembly and scan orchestration."""

from .matcher import FindingMatcher, deduplicate_findings
from .parsers import ParserRegistry, RawFinding
from .report import ExitCode, ScanReport, assemble_report
from .scanner import Scanner, ScannerConfig, scan_directory
from .versions import normalize_spec_to_candidates

__all__ = [
    "FindingMatcher",
    "deduplicate_findings",
    "ParserRegistry",
    "RawFinding",
    "ExitCode",
    "ScanReport",
    "assemble_report",
    "Scanner",
    "ScannerConfig",
    "scan_directory",
    "normalize_spec_to_candidates",
]
