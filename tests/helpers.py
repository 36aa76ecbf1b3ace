"""Catalog and schema builders shared by the test modules."""

from pathlib import Path
from typing import Dict, List

from cdm_matcher.catalog import CanonicalTable, CatalogEntry, DataModel
from cdm_matcher.matcher import ObservedSchema

REPO_MODELS_DIR = Path(__file__).parent.parent / "models"

OMOP_V5_3_1 = {
    "person": ["person_id", "gender_concept_id", "year_of_birth", "race_concept_id"],
    "visit_occurrence": [
        "visit_occurrence_id",
        "person_id",
        "visit_start_date",
        "admitting_source_concept_id",
    ],
    "death": ["person_id", "death_date", "death_type_concept_id"],
    "note": ["note_id", "note_text", "note_date"],
}

OMOP_V6_0 = {
    "person": [
        "person_id",
        "gender_concept_id",
        "year_of_birth",
        "race_concept_id",
        "death_datetime",
    ],
    "visit_occurrence": [
        "visit_occurrence_id",
        "person_id",
        "visit_start_date",
        "admitted_from_concept_id",
    ],
}

MIMIC_V1_4 = {
    "patients": ["subject_id", "gender", "dob"],
    "admissions": ["subject_id", "hadm_id", "admittime"],
}


def make_entry(family: DataModel, version: str, tables: Dict[str, List[str]]) -> CatalogEntry:
    """Build a catalog entry from ``{table: [columns]}``."""
    canonical = []
    for name, columns in tables.items():
        canonical.append(CanonicalTable(name=name, columns=tuple(columns)))
    return CatalogEntry(family=family, version=version, tables=tuple(canonical))


def mirror_schema(entry: CatalogEntry) -> ObservedSchema:
    """Observed schema containing exactly the entry's tables and columns."""
    return ObservedSchema.from_mapping(
        {table.name: list(table.columns) for table in entry.tables}
    )


def write_catalog_file(path: Path, rows: Dict[str, List[str]], header: str = "table,field") -> Path:
    """Write a catalog CSV, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [header]
    for table, columns in rows.items():
        for column in columns:
            lines.append(f"{table},{column}")
    path.write_text("\n".join(lines) + "\n")
    return path
