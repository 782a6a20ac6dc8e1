"""Sources of known-compromised package versions."""

from .registry import CompromisedRegistry, parse_compromised_list
from .offline import DEFAULT_COMPROMISED_FILE, load_compromised_file, load_compromised_file_async
from .online import CompromisedListClient

__all__ = [
    "CompromisedRegistry",
    "parse_compromised_list",
    "DEFAULT_COMPROMISED_FILE",
    "load_compromised_file",
    "load_compromised_file_async",
    "CompromisedListClient",
]
