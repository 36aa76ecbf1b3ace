"""Snapshot of a live database's tables and columns."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .normalize import NameIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObservedTable:
    """A table as reported by the database driver."""

    name: str
    columns: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))

    def __repr__(self) -> str:
        return f"ObservedTable({self.name}, cols={len(self.columns)})"


@dataclass(frozen=True)
class ObservedSchema:
    """All tables visible on a connection at matching time."""

    tables: Tuple[ObservedTable, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tables", tuple(self.tables))

    @classmethod
    def from_mapping(cls, tables: Mapping[str, Iterable[str]]) -> "ObservedSchema":
        """Build a schema from ``{table_name: [column, ...]}``."""
        observed = []
        for name, columns in tables.items():
            observed.append(ObservedTable(name=name, columns=tuple(columns)))
        return cls(tables=tuple(observed))

    def table_names(self) -> List[str]:
        return [table.name for table in self.tables]

    def __len__(self) -> int:
        return len(self.tables)

    def __repr__(self) -> str:
        return f"ObservedSchema(tables={len(self.tables)})"


class ObservedIndex:
    """Normalized view of an observed schema.

    Tables and columns are keyed by their normalized names. The first
    observed table to claim a key owns it; columns of later tables that
    normalize to the same key are not visible through the index.
    """

    def __init__(self, schema: ObservedSchema):
        self.tables = NameIndex()
        self._columns: Dict[str, NameIndex] = {}
        self.table_collisions: List[Tuple[str, str]] = []

        for table in schema.tables:
            owner = self.tables.add(table.name)
            if owner != table.name:
                logger.warning(
                    f"Observed table '{table.name}' normalizes to the same name as "
                    f"'{owner}'; using '{owner}'"
                )
                self.table_collisions.append((owner, table.name))
                continue
            if owner in self._columns:
                continue
            self._columns[owner] = NameIndex(table.columns)

    def resolve_table(self, name: str) -> Optional[str]:
        """Return the observed table name matching a canonical table name."""
        return self.tables.lookup(name)

    def columns_for(self, observed_table: str) -> Optional[NameIndex]:
        return self._columns.get(observed_table)
