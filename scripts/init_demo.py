#!/usr/bin/env python3
"""Initialize a DuckDB database that mimics a site's copy of a CDM version."""

from pathlib import Path

import duckdb

from cdm_matcher.catalog import load_catalog


def _messy(name: str, index: int) -> str:
    """Spell a canonical name the way real site databases tend to."""
    if index % 3 == 0:
        return name.upper()
    if index % 3 == 1:
        return name.title().replace("_", "-")
    return name


def init_demo(
    db_path: str = "data/demo.duckdb",
    models_dir: str = "models",
    family: str = "omop",
    version: str = "v5_3_1",
):
    """Create one table per canonical table of a catalog entry.

    Args:
        db_path: Path to DuckDB database file
        models_dir: Directory of CDM definition CSV files
        family: Data model family to mirror
        version: Catalog version to mirror
    """
    catalog = load_catalog(models_dir).catalog
    entry = catalog.get(family, version)
    if entry is None:
        raise SystemExit(f"No catalog entry for {family}/{version} in {models_dir}")

    db_file = Path(db_path)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = duckdb.connect(str(db_file))

    print(f"Initializing DuckDB at {db_path} from {family}/{version}...")

    for table_index, table in enumerate(entry.tables):
        table_name = _messy(table.name, table_index)
        columns = []
        for column_index, column in enumerate(table.columns):
            columns.append(f'"{_messy(column, column_index)}" VARCHAR')
        conn.execute(f'DROP TABLE IF EXISTS "{table_name}"')
        conn.execute(f'CREATE TABLE "{table_name}" ({", ".join(columns)})')
        print(f"✓ Created {table_name} ({len(columns)} columns)")

    conn.close()
    print(f"\nDuckDB initialized successfully at {db_path}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Initialize a demo CDM database")
    parser.add_argument("--path", default="data/demo.duckdb", help="DuckDB file to create")
    parser.add_argument("--models", default="models", help="Models directory")
    parser.add_argument("--family", default="omop", help="Data model family")
    parser.add_argument("--version", default="v5_3_1", help="Catalog version to mirror")
    args = parser.parse_args()

    init_demo(args.path, args.models, args.family, args.version)
