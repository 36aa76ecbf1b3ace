"""Lookup of original names by their normalized join key."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..catalog.schema import normalize_name

logger = logging.getLogger(__name__)


class NameIndex:
    """Lookup from normalized key back to the original name.

    When several originals normalize to the same key the first one seen
    wins; later ones are kept in ``collisions`` for reporting.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._originals: Dict[str, str] = {}
        self.collisions: List[Tuple[str, str]] = []
        for name in names:
            self.add(name)

    def add(self, name: str) -> str:
        """Register a name and return the original that now owns its key."""
        key = normalize_name(name)
        existing = self._originals.get(key)
        if existing is None:
            self._originals[key] = name
            return name
        if existing != name:
            logger.debug(f"'{name}' normalizes to '{key}', already taken by '{existing}'")
            self.collisions.append((existing, name))
        return existing

    def lookup(self, name: str) -> Optional[str]:
        """Find the original name whose normalized form matches ``name``."""
        return self._originals.get(normalize_name(name))

    def keys(self) -> List[str]:
        return list(self._originals.keys())

    def __contains__(self, name: str) -> bool:
        return normalize_name(name) in self._originals

    def __len__(self) -> int:
        return len(self._originals)
