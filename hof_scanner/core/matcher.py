"""Cross-file deduplication of findings."""

from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Any

from ..compromised.registry import CompromisedRegistry
from ..utils.logging import get_logger
from .parsers import RawFinding


def deduplicate_findings(findings: Iterable[RawFinding]) -> List[RawFinding]:
    """Collapse findings sharing a (file, name, version) key.
    
    The first occurrence wins and first-seen order is kept, so running this
    twice gives the same result as running it once.
    """
    unique: Dict[Tuple[Path, str, str], RawFinding] = {}
    for finding in findings:
        unique.setdefault(finding.key, finding)
    return list(unique.values())


class FindingMatcher:
    """Checks versions against a registry and merges per-file findings."""
    
    def __init__(self, registry: CompromisedRegistry) -> None:
        """Initialize the matcher.
        
        Args:
            registry: Compromised versions shared by every parser in a run
        """
        self.logger = get_logger("FindingMatcher")
        self.registry = registry
        self._merged = 0
        self._dropped = 0
    
    def is_compromised(self, name: str, version: str) -> bool:
        return self.registry.is_compromised(name, version)
    
    def merge(self, per_file_findings: Iterable[Iterable[RawFinding]]) -> List[RawFinding]:
        """Flatten per-file results in the given order and deduplicate.
        
        Args:
            per_file_findings: One finding sequence per scanned file, in
                directory-enumeration order
                
        Returns:
            Deduplicated findings
        """
        flat = [finding for findings in per_file_findings for finding in findings]
        unique = deduplicate_findings(flat)
        self._merged += len(flat)
        self._dropped += len(flat) - len(unique)
        if len(unique) != len(flat):
            self.logger.debug(f"Dropped {len(flat) - len(unique)} duplicate findings")
        return unique
    
    def get_statistics(self) -> Dict[str, Any]:
        """Get matcher statistics.
        
        Returns:
            Dictionary with statistics
        """
        return {
            "compromised_packages": self.registry.package_count,
            "compromised_versions": self.registry.version_count,
            "findings_merged": self._merged,
            "duplicates_dropped": self._dropped,
        }
