"""Node.js manifest and lockfile parsers."""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from ...compromised.registry import CompromisedRegistry
from ..versions import normalize_spec_to_candidates
from .base import BaseParser, RawFinding, DEPENDENCY_SECTIONS, PACKAGE_JSON, YARN_LOCK

_LINE_SPLIT = re.compile(r'\r?\n')
_HEADER = re.compile(r'^[^#].*:\s*$')
_HEADER_SUFFIX = re.compile(r':\s*$')
_SPECIFIER_SPLIT = re.compile(r',\s*')
_BARE_ENTRY = re.compile(r'''^[^#"'][@A-Za-z0-9_.\-]+:[^\s]+$''')
_VERSION = re.compile(r'^\s*version\s+"([^"]+)"')


class NodeJSPackageParser(BaseParser):
    """Parser for Node.js package.json files."""

    def __init__(self) -> None:
        """Initialize the package.json parser."""
        super().__init__()
        self.file_name = PACKAGE_JSON
        self.ecosystem = "nodejs"
        self.parser_type = "package"

    def parse(
        self,
        content: str,
        file_path: Path,
        registry: CompromisedRegistry
    ) -> List[RawFinding]:
        """Match declared dependencies against the registry.

        Malformed or too deeply nested JSON is not an error here: it simply
        yields no findings.

        Args:
            content: package.json text
            file_path: Path of the manifest
            registry: Compromised versions

        Returns:
            One finding per compromised candidate version, tagged with its section
        """
        try:
            data = json.loads(content)
        except (ValueError, RecursionError):
            return []

        if not isinstance(data, dict):
            return []

        findings = []
        for section in DEPENDENCY_SECTIONS:
            deps = data.get(section)
            if not isinstance(deps, dict):
                continue
            for name, spec in deps.items():
                for version in normalize_spec_to_candidates(spec):
                    if registry.is_compromised(name, version):
                        findings.append(self._finding(file_path, name, version, section))

        return findings


@dataclass
class YarnLockState:
    """Names carried forward from the most recent entry header."""

    current_entries: List[str] = field(default_factory=list)


# (rule name, match(line, state) -> value or None, action(state, value) -> findings)
Transition = Tuple[str, Callable[[str, YarnLockState], Any], Callable[[YarnLockState, Any], List[RawFinding]]]


def specifier_name(specifier: str) -> str:
    """Package name of a yarn.lock specifier such as ``"@scope/pkg@^1.0.0"``.

    The name is everything before the last ``@`` unless that ``@`` is the
    first character (a scope marker), in which case the whole specifier is
    the name.
    """
    for quote in ('"', "'"):
        if specifier.startswith(quote):
            specifier = specifier[1:]
        if specifier.endswith(quote):
            specifier = specifier[:-1]
    at = specifier.rfind("@")
    if at > 0:
        return specifier[:at]
    return specifier


class NodeJSYarnParser(BaseParser):
    """Parser for yarn classic (v1) yarn.lock files.

    The format has no usable grammar, so lines are fed through an ordered
    transition table; the first rule whose predicate matches a line wins.
    Only resolved ``version`` lines produce findings, since declared ranges
    in a lockfile say nothing about what was installed.
    """

    def __init__(self) -> None:
        """Initialize the yarn.lock parser."""
        super().__init__()
        self.file_name = YARN_LOCK
        self.ecosystem = "nodejs"
        self.parser_type = "yarn"

    def parse(
        self,
        content: str,
        file_path: Path,
        registry: CompromisedRegistry
    ) -> List[RawFinding]:
        """Run the state machine over the lockfile text.

        Args:
            content: yarn.lock text
            file_path: Path of the lockfile
            registry: Compromised versions

        Returns:
            One finding per compromised (name, resolved version) pair
        """
        state = YarnLockState()
        findings: List[RawFinding] = []
        transitions = self._transitions(file_path, registry)

        for line in _LINE_SPLIT.split(content):
            for _rule, match, action in transitions:
                value = match(line, state)
                if value is not None:
                    findings.extend(action(state, value))
                    break

        return findings

    def _transitions(self, file_path: Path, registry: CompromisedRegistry) -> Tuple[Transition, ...]:
        def enter_entries(state: YarnLockState, names: List[str]) -> List[RawFinding]:
            state.current_entries = names
            return []

        def resolve_version(state: YarnLockState, version: str) -> List[RawFinding]:
            return [
                self._finding(file_path, name, version)
                for name in state.current_entries
                if registry.is_compromised(name, version)
            ]

        def reset(state: YarnLockState, _value: Any) -> List[RawFinding]:
            state.current_entries = []
            return []

        return (
            ("header", self._match_header, enter_entries),
            ("bare_entry", self._match_bare_entry, enter_entries),
            ("version", self._match_version, resolve_version),
            ("blank", self._match_blank, reset),
        )

    @staticmethod
    def _match_header(line: str, state: YarnLockState) -> Optional[List[str]]:
        # lodash@^4.17.0, "lodash@>=4 <5":
        if not _HEADER.match(line):
            return None
        header = _HEADER_SUFFIX.sub("", line, count=1)
        return [specifier_name(spec) for spec in _SPECIFIER_SPLIT.split(header)]

    @staticmethod
    def _match_bare_entry(line: str, state: YarnLockState) -> Optional[List[str]]:
        # lodash:^4.17.0
        if line.endswith(":") or not _BARE_ENTRY.match(line.strip()):
            return None
        first_colon = line.find(":")
        if first_colon <= 0:
            return None
        return [line[:first_colon].strip()]

    @staticmethod
    def _match_version(line: str, state: YarnLockState) -> Optional[str]:
        if not state.current_entries:
            return None
        match = _VERSION.match(line)
        return match.group(1) if match else None

    @staticmethod
    def _match_blank(line: str, state: YarnLockState) -> Optional[bool]:
        return True if not line.strip() else None
