"""Map canonical CDM tables and columns onto a database's physical names."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..catalog import CatalogEntry
from .schema import ObservedIndex, ObservedSchema

logger = logging.getLogger(__name__)


@dataclass
class TableMapping:
    """Physical counterpart of one canonical table."""

    canonical_name: str
    observed_name: Optional[str] = None
    columns: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def matched(self) -> bool:
        return self.observed_name is not None

    @property
    def matched_columns(self) -> List[str]:
        return [name for name, observed in self.columns.items() if observed is not None]

    @property
    def missing_columns(self) -> List[str]:
        return [name for name, observed in self.columns.items() if observed is None]

    def physical_column(self, column: str) -> Optional[str]:
        return self.columns.get(column)

    def __repr__(self) -> str:
        return (
            f"TableMapping({self.canonical_name} -> {self.observed_name}, "
            f"cols={len(self.matched_columns)}/{len(self.columns)})"
        )


class TableMap:
    """Canonical table name -> TableMapping, in catalog order.

    This is what the rendering layer consults to find out which physical
    table and column to query for a CDM concept such as ``person``.
    """

    def __init__(self, family: str, version: str, tables: List[TableMapping]):
        self.family = family
        self.version = version
        self._tables: Dict[str, TableMapping] = {}
        for mapping in tables:
            self._tables[mapping.canonical_name] = mapping

    def table(self, name: str) -> Optional[TableMapping]:
        """Get the mapping for a canonical table."""
        return self._tables.get(name)

    def physical_table(self, name: str) -> Optional[str]:
        """Get the physical table name for a canonical table."""
        mapping = self._tables.get(name)
        if mapping is None:
            return None
        return mapping.observed_name

    def physical_column(self, table: str, column: str) -> Optional[str]:
        """Get the physical column name for a canonical table/column pair."""
        mapping = self._tables.get(table)
        if mapping is None:
            return None
        return mapping.physical_column(column)

    @property
    def matched_tables(self) -> List[str]:
        return [name for name, mapping in self._tables.items() if mapping.matched]

    @property
    def missing_tables(self) -> List[str]:
        return [name for name, mapping in self._tables.items() if not mapping.matched]

    def column_coverage(self) -> Tuple[int, int]:
        """Return (matched columns, canonical columns) over every table."""
        matched = 0
        total = 0
        for mapping in self._tables.values():
            matched += len(mapping.matched_columns)
            total += len(mapping.columns)
        return matched, total

    @property
    def is_complete(self) -> bool:
        """True when every canonical table and column has a physical match."""
        matched, total = self.column_coverage()
        return not self.missing_tables and matched == total

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation."""
        tables = {}
        for name, mapping in self._tables.items():
            tables[name] = {
                "table": mapping.observed_name,
                "columns": dict(mapping.columns),
            }
        return {"family": self.family, "version": self.version, "tables": tables}

    def __getitem__(self, name: str) -> TableMapping:
        return self._tables[name]

    def __contains__(self, name: str) -> bool:
        return name in self._tables

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def items(self):
        return self._tables.items()

    def __repr__(self) -> str:
        return (
            f"TableMap({self.family}/{self.version}, "
            f"tables={len(self.matched_tables)}/{len(self._tables)})"
        )


def build_table_map(entry: CatalogEntry, observed: ObservedSchema) -> TableMap:
    """Match every canonical table and column of ``entry`` against ``observed``.

    Args:
        entry: Catalog entry, usually the one picked by detect_version
        observed: Tables and columns of the connected database

    Returns:
        TableMap in the entry's table order. Unmatched tables have no
        observed name and all of their columns map to None.
    """
    index = ObservedIndex(observed)
    mappings = []
    for table in entry.tables:
        observed_table = index.resolve_table(table.name)
        columns: Dict[str, Optional[str]] = {}
        if observed_table is None:
            for column in table.columns:
                columns[column] = None
        else:
            observed_columns = index.columns_for(observed_table)
            for column in table.columns:
                columns[column] = observed_columns.lookup(column)
        mappings.append(
            TableMapping(
                canonical_name=table.name,
                observed_name=observed_table,
                columns=columns,
            )
        )

    table_map = TableMap(entry.family.value, entry.version, mappings)
    matched, total = table_map.column_coverage()
    logger.info(
        f"Table map for {entry.family.value}/{entry.version}: "
        f"{len(table_map.matched_tables)}/{len(table_map)} tables, "
        f"{matched}/{total} columns"
    )
    return table_map
