"""Load the compromised package list from a local file."""

import asyncio
from pathlib import Path
from typing import Optional, Union

from ..errors import RegistryLoadError
from ..utils.logging import get_logger
from .registry import CompromisedRegistry, parse_compromised_list

logger = get_logger("CompromisedListFile")

DEFAULT_COMPROMISED_FILE = Path(__file__).resolve().parent.parent / "data" / "compromised-packages.txt"


def read_compromised_text(path: Union[str, Path]) -> str:
    """Read the raw list text.
    
    Raises:
        RegistryLoadError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RegistryLoadError(str(path), str(e)) from e


def load_compromised_file(path: Optional[Union[str, Path]] = None) -> CompromisedRegistry:
    """Load and parse a compromised list file.
    
    Args:
        path: List file; the packaged default list when None
        
    Returns:
        The parsed registry
        
    Raises:
        RegistryLoadError: If the file cannot be read
    """
    path = Path(path) if path is not None else DEFAULT_COMPROMISED_FILE
    registry = parse_compromised_list(read_compromised_text(path))
    logger.debug(
        f"Loaded {registry.version_count} compromised versions of "
        f"{registry.package_count} packages from {path}"
    )
    return registry


async def load_compromised_file_async(path: Optional[Union[str, Path]] = None) -> CompromisedRegistry:
    """Async variant of load_compromised_file; the read runs in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_compromised_file, path)
