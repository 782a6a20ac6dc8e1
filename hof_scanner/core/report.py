"""Scan report model and pass/fail policy."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from .. import __version__
from ..compromised.registry import CompromisedRegistry
from ..utils.path_utils import CandidateFile
from .parsers.base import RawFinding, relative_path

SCANNER_NAME = "hof-vulnerabilities-scanner"
INCONCLUSIVE_REASON = "No package or lock files found; scan inconclusive."


class ExitCode(IntEnum):
    """Process exit codes for CI integration."""

    CLEAN = 0
    FINDINGS = 1
    INTERNAL_ERROR = 2
    INCONCLUSIVE = 3


def utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def classify_exit_code(findings_count: int, scanned_files_count: int) -> ExitCode:
    """Map scan outcome counts to an exit code.

    Having nothing to scan is inconclusive no matter what else happened;
    otherwise any finding fails the scan.
    """
    if scanned_files_count == 0:
        return ExitCode.INCONCLUSIVE
    if findings_count:
        return ExitCode.FINDINGS
    return ExitCode.CLEAN


@dataclass(frozen=True)
class ScanReport:
    """Result of one scan run.

    Attributes:
        root: Absolute path that was scanned
        findings: Deduplicated findings in discovery order
        scanned_files: Candidate files that were actually read
        compromised_package_count: Package names in the registry
        compromised_version_count: (name, version) pairs in the registry
        generated_at: ISO 8601 UTC timestamp
    """

    root: Path
    findings: Tuple[RawFinding, ...] = ()
    scanned_files: Tuple[CandidateFile, ...] = ()
    compromised_package_count: int = 0
    compromised_version_count: int = 0
    generated_at: str = field(default_factory=utc_timestamp)
    scanner: str = SCANNER_NAME
    version: str = __version__

    @property
    def scanned_files_count(self) -> int:
        return len(self.scanned_files)

    @property
    def findings_count(self) -> int:
        return len(self.findings)

    @property
    def exit_code(self) -> ExitCode:
        return classify_exit_code(self.findings_count, self.scanned_files_count)

    @property
    def inconclusive(self) -> bool:
        return self.scanned_files_count == 0

    @property
    def passed_scan(self) -> bool:
        return not self.findings and not self.inconclusive

    @property
    def reason(self) -> Optional[str]:
        return INCONCLUSIVE_REASON if self.inconclusive else None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON report layout.

        Returns:
            A dict with ``meta``, ``vulnerabilities`` and ``scannedFiles``
        """
        meta: Dict[str, Any] = {
            "generatedAt": self.generated_at,
            "root": str(self.root),
            "scanner": self.scanner,
            "version": self.version,
            "scannedFilesCount": self.scanned_files_count,
            "findingsCount": self.findings_count,
            "compromisedPackageCount": self.compromised_package_count,
            "compromisedVersionCount": self.compromised_version_count,
            "exitCode": int(self.exit_code),
            "passedScan": self.passed_scan,
        }
        if self.reason:
            meta["reason"] = self.reason

        return {
            "meta": meta,
            "vulnerabilities": [f.to_dict(self.root) for f in self.findings],
            "scannedFiles": [
                {
                    "path": str(candidate.path),
                    "relative": relative_path(candidate.path, self.root),
                    "type": candidate.type,
                }
                for candidate in self.scanned_files
            ],
        }


def assemble_report(
    findings: Iterable[RawFinding],
    scanned_files: Iterable[CandidateFile],
    registry: CompromisedRegistry,
    root: Path,
    generated_at: Optional[str] = None,
) -> ScanReport:
    """Fold deduplicated findings and scan metadata into a ScanReport."""
    return ScanReport(
        root=root,
        findings=tuple(findings),
        scanned_files=tuple(scanned_files),
        compromised_package_count=registry.package_count,
        compromised_version_count=registry.version_count,
        generated_at=generated_at or utc_timestamp(),
    )
