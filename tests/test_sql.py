"""Tests for building queries from a table map."""

import pytest
import sqlglot

from cdm_matcher.errors import UnmappedTableError
from cdm_matcher.matcher import ObservedSchema, build_select, build_table_map


@pytest.fixture
def table_map(omop_v60):
    """Map against a site database with its own spelling."""
    observed = ObservedSchema.from_mapping(
        {"PERSON": ["Person_ID", "year_of_birth", "Gender-Concept-ID"]}
    )
    return build_table_map(omop_v60, observed)


def test_select_uses_physical_names(table_map):
    """Physical columns are aliased back to canonical names."""
    sql = build_select(table_map, "person", schema="cdm")

    assert '"Person_ID" AS "person_id"' in sql
    assert '"Gender-Concept-ID" AS "gender_concept_id"' in sql
    assert '"year_of_birth"' in sql
    assert '"year_of_birth" AS' not in sql
    assert 'FROM "cdm"."PERSON"' in sql


def test_select_round_trips_through_parser(table_map):
    """Generated SQL parses, with one projection per matched column."""
    sql = build_select(table_map, "person")

    parsed = sqlglot.parse_one(sql, dialect="postgres")
    assert len(parsed.expressions) == 3
    assert [alias.alias_or_name for alias in parsed.expressions] == [
        "person_id",
        "gender_concept_id",
        "year_of_birth",
    ]


def test_select_requested_columns_skips_unmatched(table_map):
    """Requested columns without a physical match are left out."""
    sql = build_select(table_map, "person", columns=["person_id", "death_datetime"])

    assert '"Person_ID" AS "person_id"' in sql
    assert "death_datetime" not in sql


def test_select_with_filter(table_map):
    """Filters are expressed against physical columns."""
    sql = build_select(table_map, "person", columns=["year_of_birth"], filters={"person_id": 42})

    assert '"Person_ID" = 42' in sql


def test_select_with_null_filter(table_map):
    """A None filter value becomes IS NULL."""
    sql = build_select(table_map, "person", columns=["person_id"], filters={"year_of_birth": None})

    assert '"year_of_birth" IS NULL' in sql
    assert "= NULL" not in sql


def test_select_with_mixed_filters(table_map):
    """Several filters are joined with AND."""
    sql = build_select(
        table_map, "person", filters={"person_id": 7, "gender_concept_id": None}
    )

    assert 'WHERE "Person_ID" = 7 AND "Gender-Concept-ID" IS NULL' in sql


def test_unmapped_table(table_map):
    """Tables without a physical match cannot be queried."""
    with pytest.raises(UnmappedTableError, match="visit_occurrence"):
        build_select(table_map, "visit_occurrence")


def test_no_mapped_columns(table_map):
    """Selecting only unmatched columns is an error."""
    with pytest.raises(UnmappedTableError, match="No mapped columns"):
        build_select(table_map, "person", columns=["death_datetime"])


def test_unmapped_filter_column(table_map):
    """Filtering on an unmatched column is an error."""
    with pytest.raises(UnmappedTableError, match="death_datetime"):
        build_select(table_map, "person", filters={"death_datetime": "2020-01-01"})
