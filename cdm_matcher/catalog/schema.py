"""Reference schema classes for common data model definitions."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from ..errors import NoSuchFamilyError


class DataModel(Enum):
    """Common data model families the catalog understands."""

    OMOP = "omop"
    MIMIC3 = "mimic3"

    @classmethod
    def parse(cls, text) -> "DataModel":
        """Resolve a user supplied family name, accepting common aliases."""
        if isinstance(text, cls):
            return text
        key = str(text).strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        raise NoSuchFamilyError(str(text))


_ALIASES = {
    "omop": DataModel.OMOP,
    "omop_cdm": DataModel.OMOP,
    "mimic": DataModel.MIMIC3,
    "mimic3": DataModel.MIMIC3,
    "mimiciii": DataModel.MIMIC3,
    "mimic-iii": DataModel.MIMIC3,
    "mimic_iii": DataModel.MIMIC3,
}


SEPARATOR_CHARACTERS = ".!?-"
_SEPARATOR_TABLE = str.maketrans({char: "_" for char in SEPARATOR_CHARACTERS})


def normalize_name(name: str) -> str:
    """Lowercase a name and replace each of ``. ! ? -`` with ``_``.

    The result depends only on the input string, never on locale, and
    normalizing twice gives the same value as normalizing once.
    """
    return name.lower().translate(_SEPARATOR_TABLE)


def _unique(names: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    ordered = []
    for name in names:
        key = normalize_name(name)
        if key in seen:
            continue
        seen.add(key)
        ordered.append(name)
    return tuple(ordered)


@dataclass(frozen=True)
class CanonicalTable:
    """One table of a reference CDM schema."""

    name: str
    columns: Tuple[str, ...] = ()

    def __post_init__(self):
        # Columns are unique by normalized name; the first spelling keeps its slot.
        object.__setattr__(self, "columns", _unique(self.columns))

    def has_column(self, name: str) -> bool:
        key = normalize_name(name)
        return any(normalize_name(column) == key for column in self.columns)

    def __repr__(self) -> str:
        return f"CanonicalTable({self.name}, cols={len(self.columns)})"


@dataclass(frozen=True)
class CatalogEntry:
    """A single (family, version) reference definition."""

    family: DataModel
    version: str
    tables: Tuple[CanonicalTable, ...] = ()
    source: Optional[Path] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "tables", tuple(self.tables))

    @property
    def identity(self) -> Tuple[str, str]:
        """Return the (family, version) pair identifying this entry."""
        return (self.family.value, self.version)

    @property
    def column_count(self) -> int:
        """Total number of (table, column) pairs in the definition."""
        total = 0
        for table in self.tables:
            total += len(table.columns)
        return total

    def get_table(self, name: str) -> Optional[CanonicalTable]:
        """Get a canonical table by normalized name."""
        wanted = normalize_name(name)
        for table in self.tables:
            if normalize_name(table.name) == wanted:
                return table
        return None

    def table_names(self) -> Tuple[str, ...]:
        return tuple(table.name for table in self.tables)

    def pairs(self) -> Iterator[Tuple[str, str]]:
        """Yield every (table, column) pair in catalog order."""
        for table in self.tables:
            for column in table.columns:
                yield table.name, column

    def __repr__(self) -> str:
        return (
            f"CatalogEntry({self.family.value}/{self.version}, "
            f"tables={len(self.tables)}, cols={self.column_count})"
        )
