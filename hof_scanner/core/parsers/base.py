"""Base parser class and finding model."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ...compromised.registry import CompromisedRegistry

PACKAGE_JSON = "package.json"
YARN_LOCK = "yarn.lock"

DEPENDENCY_SECTIONS: Tuple[str, ...] = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)


@dataclass(frozen=True)
class RawFinding:
    """A compromised package version found in one file."""
    
    file: Path
    name: str
    version: str
    source: str
    section: Optional[str] = None
    
    def __post_init__(self) -> None:
        """Validate the finding."""
        if not self.name:
            raise ValueError("Finding name cannot be empty")
        if not self.version:
            raise ValueError("Finding version cannot be empty")
    
    @property
    def key(self) -> Tuple[Path, str, str]:
        """Identity used for deduplication."""
        return (self.file, self.name, self.version)
    
    @property
    def spec(self) -> str:
        return f"{self.name}@{self.version}"
    
    def to_dict(self, root: Optional[Path] = None) -> Dict[str, Any]:
        """Serialize for the JSON report.
        
        Args:
            root: Scan root used to compute the relative path
            
        Returns:
            JSON-serializable dictionary
        """
        data: Dict[str, Any] = {
            "package": self.name,
            "version": self.version,
            "file": str(self.file),
            "fileRelative": relative_path(self.file, root),
            "source": self.source,
            "spec": self.spec,
        }
        if self.section is not None:
            data["section"] = self.section
        return data


def relative_path(path: Path, root: Optional[Path]) -> str:
    """Path relative to root, or the path itself when root is unknown."""
    if root is None:
        return str(path)
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


class BaseParser(ABC):
    """Abstract base class for manifest and lockfile parsers."""
    
    def __init__(self) -> None:
        """Initialize the parser."""
        self.file_name: str = ""
        self.ecosystem: str = ""
        self.parser_type: str = ""
    
    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file.
        
        Args:
            file_path: Path to the file to check
            
        Returns:
            True if the basename matches the parser's file name
        """
        return file_path.name == self.file_name
    
    @abstractmethod
    def parse(
        self,
        content: str,
        file_path: Path,
        registry: CompromisedRegistry
    ) -> List[RawFinding]:
        """Extract compromised versions from file content.
        
        Args:
            content: Decoded file content
            file_path: Path the content was read from
            registry: Compromised versions to match against
            
        Returns:
            Findings in the order they appear in the file
        """
    
    def _finding(
        self,
        file_path: Path,
        name: str,
        version: str,
        section: Optional[str] = None
    ) -> RawFinding:
        return RawFinding(
            file=file_path,
            name=name,
            version=version,
            source=self.file_name,
            section=section,
        )
