"""Reduce declared dependency specs to literal version candidates."""

import re
from typing import Any, List

_NPM_ALIAS = re.compile(r'npm:([^@]+)@(\S+)')
_RANGE_PREFIX = re.compile(r'^[~^><=\s]*')
_V_PREFIX = re.compile(r'^v')


def normalize_spec_to_candidates(spec: Any) -> List[str]:
    """Turn a package.json dependency spec into exact version candidates.
    
    ``npm:<pkg>@<version>`` aliases yield only the aliased version. Anything
    else is split on ``||`` and each part has its leading range operators
    and an optional ``v`` stripped. Compound ranges such as
    ``>=1.2.0 <2.0.0`` are not resolved and will not match an exact version.
    
    Args:
        spec: Raw spec value from the manifest
        
    Returns:
        Zero or more literal version strings
    """
    if not spec or not isinstance(spec, str):
        return []
    
    alias = _NPM_ALIAS.search(spec)
    if alias:
        return [alias.group(2)]
    
    parts = [part.strip() for part in spec.split("||")]
    candidates = []
    for part in parts:
        if not part:
            continue
        cleaned = _V_PREFIX.sub("", _RANGE_PREFIX.sub("", part), count=1).strip()
        if cleaned:
            candidates.append(cleaned)
    return candidates
