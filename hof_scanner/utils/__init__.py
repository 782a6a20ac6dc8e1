"""Utility functions and helpers for the scanner."""

from .logging import setup_logging, get_logger
from .performance import PerformanceMonitor, benchmark
from .path_utils import CandidateFile, find_candidate_files, is_candidate_file, is_ignored_dir

__all__ = [
    "setup_logging",
    "get_logger",
    "PerformanceMonitor",
    "benchmark",
    "CandidateFile",
    "find_candidate_files",
    "is_candidate_file",
    "is_ignored_dir",
]
