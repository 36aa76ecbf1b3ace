"""Build queries against physical tables from canonical CDM names."""

import logging
from typing import Any, Dict, List, Optional

from sqlglot import exp

from ..errors import UnmappedTableError
from .table_map import TableMap, TableMapping

logger = logging.getLogger(__name__)


def build_select(
    table_map: TableMap,
    table: str,
    columns: Optional[List[str]] = None,
    schema: Optional[str] = None,
    filters: Optional[Dict[str, Any]] = None,
    dialect: str = "postgres",
) -> str:
    """Render a SELECT for a canonical table using its physical names.

    Physical columns are aliased back to their canonical names so callers
    can read results without knowing the database's spelling.

    Args:
        table_map: Map produced by build_table_map
        table: Canonical table name
        columns: Canonical columns to select (default: every matched column)
        schema: Optional schema/dataset qualifier
        filters: Canonical column -> value equality predicates; None tests IS NULL
        dialect: sqlglot dialect to render

    Returns:
        SQL text

    Raises:
        UnmappedTableError: If the table, a filter column, or every requested
            column lacks a physical match
    """
    mapping = table_map.table(table)
    if mapping is None or not mapping.matched:
        raise UnmappedTableError(f"Table '{table}' is not mapped to a physical table")

    projections = _build_projections(mapping, columns)
    if not projections:
        raise UnmappedTableError(f"No mapped columns to select from '{table}'")

    select = exp.Select().select(*projections).from_(_table_expression(mapping, schema))
    condition = _build_condition(mapping, filters)
    if condition is not None:
        select = select.where(condition)
    return select.sql(dialect=dialect)


def _build_projections(
    mapping: TableMapping, columns: Optional[List[str]]
) -> List[exp.Expression]:
    if columns is None:
        columns = mapping.matched_columns

    projections: List[exp.Expression] = []
    for canonical in columns:
        physical = mapping.physical_column(canonical)
        if physical is None:
            logger.debug(f"Skipping unmapped column {mapping.canonical_name}.{canonical}")
            continue
        column_expr = _column(physical)
        if physical != canonical:
            column_expr = exp.Alias(
                this=column_expr, alias=exp.Identifier(this=canonical, quoted=True)
            )
        projections.append(column_expr)
    return projections


def _build_condition(
    mapping: TableMapping, filters: Optional[Dict[str, Any]]
) -> Optional[exp.Expression]:
    if not filters:
        return None
    predicates = []
    for canonical, value in filters.items():
        physical = mapping.physical_column(canonical)
        if physical is None:
            raise UnmappedTableError(
                f"Filter column '{mapping.canonical_name}.{canonical}' is not mapped"
            )
        if value is None:
            predicates.append(exp.Is(this=_column(physical), expression=exp.Null()))
        else:
            predicates.append(exp.EQ(this=_column(physical), expression=exp.convert(value)))
    return exp.and_(*predicates)


def _column(name: str) -> exp.Column:
    return exp.Column(this=exp.Identifier(this=name, quoted=True))


def _table_expression(mapping: TableMapping, schema: Optional[str]) -> exp.Table:
    db = None
    if schema:
        db = exp.Identifier(this=schema, quoted=True)
    return exp.Table(this=exp.Identifier(this=mapping.observed_name, quoted=True), db=db)
