"""In-memory index of known-compromised package versions."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterator, Mapping, Set, Tuple

from ..utils.performance import benchmark


def exact_key(name: str, version: str) -> str:
    """Composite lookup key for a (name, version) pair.
    
    The key is ambiguous: a name containing a colon can collide with a
    shorter name whose version contains one, so ``("foo:bar", "1.0.0")`` and
    ``("foo", "bar:1.0.0")`` share the key ``"foo:bar:1.0.0"``. The two views
    are both consulted, so such a collision reports as compromised.
    """
    return f"{name}:{version}"


@dataclass(frozen=True)
class CompromisedRegistry:
    """Two views over the same list of compromised versions.
    
    ``by_name`` maps a package name to every compromised version of it;
    ``exact_set`` holds ``"name:version"`` keys for direct lookups. Every
    key in ``exact_set`` is reachable through ``by_name``.
    """
    
    by_name: Mapping[str, FrozenSet[str]] = field(default_factory=lambda: MappingProxyType({}))
    exact_set: FrozenSet[str] = frozenset()
    
    @classmethod
    def from_pairs(cls, pairs: Iterator[Tuple[str, str]]) -> "CompromisedRegistry":
        """Build a registry from (name, version) pairs."""
        by_name: Dict[str, Set[str]] = {}
        exact: Set[str] = set()
        for name, version in pairs:
            by_name.setdefault(name, set()).add(version)
            exact.add(exact_key(name, version))
        return cls(
            by_name=MappingProxyType({name: frozenset(v) for name, v in by_name.items()}),
            exact_set=frozenset(exact),
        )
    
    @classmethod
    def empty(cls) -> "CompromisedRegistry":
        """A registry with no entries."""
        return cls()
    
    def is_compromised(self, name: str, version: str) -> bool:
        """Exact match of a package version against either view."""
        return (
            exact_key(name, version) in self.exact_set
            or version in self.by_name.get(name, frozenset())
        )
    
    @property
    def package_count(self) -> int:
        return len(self.by_name)
    
    @property
    def version_count(self) -> int:
        return sum(len(versions) for versions in self.by_name.values())
    
    def __bool__(self) -> bool:
        return bool(self.by_name)


def iter_records(raw: str) -> Iterator[Tuple[str, str]]:
    """Yield (name, version) records from compromised-list text.
    
    One ``name: version`` record per line. The rightmost colon is the
    separator so names containing colons survive. Comments, blank lines and
    records missing a name or version are skipped.
    """
    for line in raw.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        idx = trimmed.rfind(":")
        if idx <= 0:
            continue
        name = trimmed[:idx].strip()
        version = trimmed[idx + 1:].strip()
        if not name or not version:
            continue
        yield name, version


@benchmark
def parse_compromised_list(raw: str) -> CompromisedRegistry:
    """Parse compromised-list text into a registry.
    
    Args:
        raw: Source text; an empty string yields an empty registry
        
    Returns:
        The parsed registry
    """
    return CompromisedRegistry.from_pairs(iter_records(raw or ""))
