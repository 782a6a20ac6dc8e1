"""Manifest and lockfile parsers."""

from .base import BaseParser, RawFinding, DEPENDENCY_SECTIONS
from .nodejs import NodeJSPackageParser, NodeJSYarnParser
from .registry import ParserRegistry

# Register built-in parsers
registry = ParserRegistry()
registry.register("nodejs", "package", NodeJSPackageParser())
registry.register("nodejs", "yarn", NodeJSYarnParser())

__all__ = [
    "BaseParser",
    "RawFinding",
    "DEPENDENCY_SECTIONS",
    "NodeJSPackageParser",
    "NodeJSYarnParser",
    "ParserRegistry",
    "registry",
]
