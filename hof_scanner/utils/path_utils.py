"""Path utilities for discovering manifests and lockfiles."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterator, List, Optional

from .logging import get_logger

logger = get_logger("PathUtils")

MANIFEST = "manifest"
LOCKFILE = "lockfile"

# Version control, dependency caches, build output, editor metadata
IGNORED_DIRS: FrozenSet[str] = frozenset({
    "node_modules",
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    "dist",
    "build",
    "coverage",
    ".cache",
})


@dataclass(frozen=True)
class CandidateFile:
    """A discovered file whose basename marks it as a manifest or lockfile."""
    
    path: Path
    kind: str
    
    @property
    def type(self) -> str:
        """Basename of the file, used as its type in reports."""
        return self.path.name


class CandidateFileFinder:
    """Walks a directory tree and picks out candidate files."""
    
    CANDIDATE_PATTERNS: Dict[str, str] = {
        "package.json": MANIFEST,
        "yarn.lock": LOCKFILE,
    }
    
    def __init__(self, ignored_dirs: FrozenSet[str] = IGNORED_DIRS) -> None:
        """Initialize the finder.
        
        Args:
            ignored_dirs: Directory names pruned from the walk
        """
        self.ignored_dirs = ignored_dirs
    
    def find_candidate_files(self, root_path: Path) -> List[CandidateFile]:
        """Find all candidate files in a directory tree.
        
        Args:
            root_path: Root directory to search
            
        Returns:
            Candidate files in directory-enumeration order
        """
        return list(self.iter_candidate_files(root_path))
    
    def iter_candidate_files(self, root_path: Path) -> Iterator[CandidateFile]:
        """Lazily yield candidate files under root_path."""
        for file_path in self.walk_files(root_path):
            candidate = self.classify(file_path)
            if candidate is not None:
                yield candidate
    
    def walk_files(self, root_path: Path) -> Iterator[Path]:
        """Depth-first walk yielding every regular file.
        
        Entries are visited in the order the filesystem enumerates them, and a
        subdirectory is fully walked before the next entry of its parent.
        Unreadable directories are skipped rather than aborting the walk.
        The walk keeps its own stack, so tree depth is not bounded by the
        interpreter's recursion limit.
        
        Args:
            root_path: Root directory to walk
            
        Yields:
            Absolute file paths
        """
        stack = [iter(self._list_dir(root_path))]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue
            
            full = Path(entry.path)
            try:
                if entry.is_dir(follow_symlinks=False):
                    if entry.name not in self.ignored_dirs:
                        stack.append(iter(self._list_dir(full)))
                elif entry.is_file(follow_symlinks=False):
                    yield full
            except OSError as e:
                logger.debug(f"Skipping unreadable entry {full}: {e}")
    
    def _list_dir(self, directory: Path) -> List[os.DirEntry]:
        try:
            with os.scandir(directory) as it:
                return list(it)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {directory}: {e}")
            return []
    
    def classify(self, file_path: Path) -> Optional[CandidateFile]:
        """Return a CandidateFile when the basename is recognized."""
        kind = self.CANDIDATE_PATTERNS.get(file_path.name)
        if kind is None:
            return None
        return CandidateFile(path=file_path, kind=kind)


def find_candidate_files(root_path: Path) -> List[CandidateFile]:
    """Convenience function to find candidate files.
    
    Args:
        root_path: Root directory to search
        
    Returns:
        List of found candidate files
    """
    return CandidateFileFinder().find_candidate_files(root_path)


def is_candidate_file(path: Path) -> bool:
    """Check whether a file's basename is a recognized manifest or lockfile."""
    return path.name in CandidateFileFinder.CANDIDATE_PATTERNS


def is_ignored_dir(name: str) -> bool:
    """Check whether a directory name is pruned from the walk."""
    return name in IGNORED_DIRS
