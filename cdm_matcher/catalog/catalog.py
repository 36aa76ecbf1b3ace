"""Immutable collection of loaded common data model definitions."""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ..errors import DuplicateVersionError
from .schema import CatalogEntry, DataModel


class ModelCatalog:
    """Every known CDM definition, keyed by (family, version).

    The catalog is built once and handed to the matcher explicitly; it is
    never mutated after construction.
    """

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        """Initialize catalog.

        Args:
            entries: Catalog entries; identities must be unique

        Raises:
            DuplicateVersionError: If two entries share an identity
        """
        index: Dict[Tuple[str, str], CatalogEntry] = {}
        for entry in entries:
            existing = index.get(entry.identity)
            if existing is not None:
                raise DuplicateVersionError(
                    entry.family.value, entry.version, entry.source, existing.source
                )
            index[entry.identity] = entry
        self._entries = index

    @property
    def entries(self) -> Tuple[CatalogEntry, ...]:
        return tuple(self._entries.values())

    def families(self) -> List[DataModel]:
        """List the families present, in enum declaration order."""
        present = {entry.family for entry in self._entries.values()}
        return [family for family in DataModel if family in present]

    def for_family(self, family: Union[DataModel, str]) -> List[CatalogEntry]:
        """Get every entry belonging to a family."""
        model = DataModel.parse(family)
        matches = []
        for entry in self._entries.values():
            if entry.family is model:
                matches.append(entry)
        return matches

    def versions(self, family: Union[DataModel, str]) -> List[str]:
        """List versions known for a family, sorted ascending."""
        return sorted(entry.version for entry in self.for_family(family))

    def get(self, family: Union[DataModel, str], version: str) -> Optional[CatalogEntry]:
        """Get an entry by identity.

        Args:
            family: Data model family (enum or alias)
            version: Version string

        Returns:
            Catalog entry if found, None otherwise
        """
        model = DataModel.parse(family)
        return self._entries.get((model.value, version))

    def __contains__(self, identity) -> bool:
        return tuple(identity) in self._entries

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ModelCatalog(entries={len(self._entries)}, families={len(self.families())})"
