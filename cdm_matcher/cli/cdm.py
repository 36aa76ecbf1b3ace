"""Command line interface for catalog inspection and CDM detection."""

from __future__ import annotations

import json
from typing import List, Optional

import click

from ..catalog import CatalogLoadResult, ModelCatalog, load_catalog
from ..config import Config, DataSourceConfig, load_config
from ..datasources import DataSource, create_datasource
from ..errors import CDMMatcherError, IncompatibleDataModelError
from ..matcher import MatchResult, TableMap, match_schema
from ..utils.logging import get_contextual_logger, setup_logging


class TextTable:
    """Formats rows into a bordered plain-text table."""

    def __init__(self, headers: List[str]):
        self.headers = headers
        self.rows: List[List[str]] = []

    def add_row(self, values: List[object]) -> None:
        self.rows.append([self._stringify_cell(value) for value in values])

    def render(self) -> List[str]:
        widths = self._compute_widths()
        border = self._build_border(widths)
        lines: List[str] = [border, self._format_row(self.headers, widths), border]
        for row in self.rows:
            lines.append(self._format_row(row, widths))
        lines.append(border)
        return lines

    def _compute_widths(self) -> List[int]:
        widths = [len(header) for header in self.headers]
        for row in self.rows:
            index = 0
            while index < len(row):
                if len(row[index]) > widths[index]:
                    widths[index] = len(row[index])
                index += 1
        return widths

    def _build_border(self, widths: List[int]) -> str:
        parts: List[str] = ["+"]
        for width in widths:
            parts.append("-" * (width + 2))
            parts.append("+")
        return "".join(parts)

    def _format_row(self, values: List[str], widths: List[int]) -> str:
        parts: List[str] = ["|"]
        index = 0
        while index < len(values):
            parts.append(f" {values[index].ljust(widths[index])} ")
            parts.append("|")
            index += 1
        return "".join(parts)

    def _stringify_cell(self, value: object) -> str:
        if value is None:
            return "-"
        return str(value)


class CatalogPrinter:
    """Prints loaded catalog entries and load failures."""

    def __init__(self, emit):
        self.emit = emit

    def display_catalog(self, result: CatalogLoadResult) -> None:
        catalog = result.catalog
        if len(catalog) == 0:
            self.emit("Catalog is empty.")
        else:
            table = TextTable(["family", "version", "tables", "columns", "source"])
            for entry in sorted(catalog, key=lambda e: e.identity):
                table.add_row(
                    [
                        entry.family.value,
                        entry.version,
                        len(entry.tables),
                        entry.column_count,
                        entry.source,
                    ]
                )
            for line in table.render():
                self.emit(line)
        self._print_problems(result)

    def _print_problems(self, result: CatalogLoadResult) -> None:
        for failure in result.failures:
            self.emit(f"failed: {failure}")
        for duplicate in result.duplicates:
            self.emit(f"duplicate: {duplicate}")


class TableMapPrinter:
    """Prints a detection result and its table map."""

    def __init__(self, emit):
        self.emit = emit

    def display(self, result: MatchResult, show_columns: bool = False) -> None:
        detection = result.detection
        self.emit(
            f"Detected {result.family} {result.version} "
            f"({detection.match_count}/{detection.total_pairs} columns matched)"
        )
        self._print_scores(result)
        self._print_tables(result.table_map, show_columns)

    def _print_scores(self, result: MatchResult) -> None:
        scores = result.detection.scores
        if len(scores) < 2:
            return
        ranked = ", ".join(f"{version}={count}" for version, count in scores.items())
        self.emit(f"Candidate scores: {ranked}")

    def _print_tables(self, table_map: TableMap, show_columns: bool) -> None:
        table = TextTable(["canonical", "physical", "columns"])
        for name, mapping in table_map.items():
            coverage = f"{len(mapping.matched_columns)}/{len(mapping.columns)}"
            table.add_row([name, mapping.observed_name, coverage])
            if show_columns and mapping.matched:
                for column, physical in mapping.columns.items():
                    table.add_row([f"  {column}", physical, ""])
        for line in table.render():
            self.emit(line)


def _load_config_bundle(config_path: Optional[str]) -> Config:
    if config_path:
        return load_config(config_path)
    return Config()


def _resolve_datasource_config(
    config: Config, duckdb_path: Optional[str], schema: Optional[str]
) -> DataSourceConfig:
    ds_config = config.datasource
    if duckdb_path:
        ds_config = DataSourceConfig(
            name="duckdb", type="duckdb", config={"path": duckdb_path, "read_only": True}
        )
    if ds_config is None:
        raise click.UsageError("No datasource configured; pass --config or --duckdb.")
    if schema:
        ds_config.config["schema"] = schema
    return ds_config


def _load_model_catalog(models_dir: str, strict: bool) -> ModelCatalog:
    result = load_catalog(models_dir)
    if strict:
        result.raise_for_errors()
    for failure in result.failures:
        click.echo(f"warning: skipped catalog file {failure}", err=True)
    return result.catalog


def _introspect(datasource: DataSource):
    with datasource:
        return datasource.introspect()


@click.group()
def cli() -> None:
    """Detect which common data model version a clinical database implements."""


@cli.command("catalog")
@click.option(
    "--models-dir",
    type=click.Path(exists=True, file_okay=False),
    default="models",
    show_default=True,
    help="Directory of CDM definition CSV files.",
)
def catalog_command(models_dir: str) -> None:
    """List the CDM versions found in the models directory."""
    result = load_catalog(models_dir)
    CatalogPrinter(click.echo).display_catalog(result)


@cli.command("detect")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="Path to YAML config file.",
)
@click.option("--models-dir", help="Directory of CDM definition CSV files.")
@click.option("--data-model", help="Data model family (omop, mimic3).")
@click.option(
    "--duckdb",
    "duckdb_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Inspect this DuckDB file instead of the configured datasource.",
)
@click.option("--schema", help="Database schema holding the CDM tables.")
@click.option("--json", "as_json", is_flag=True, help="Print the table map as JSON.")
@click.option("--columns", "show_columns", is_flag=True, help="Show column matches.")
@click.option(
    "--allow-zero-match",
    is_flag=True,
    help="Print a mapping even when no column matched.",
)
@click.option("--log-level", help="Override the configured log level.")
@click.pass_context
def detect_command(
    ctx: click.Context,
    config_path: Optional[str],
    models_dir: Optional[str],
    data_model: Optional[str],
    duckdb_path: Optional[str],
    schema: Optional[str],
    as_json: bool,
    show_columns: bool,
    allow_zero_match: bool,
    log_level: Optional[str],
) -> None:
    """Detect the CDM version of a database and print its table map."""
    config = _load_config_bundle(config_path)
    setup_logging(
        level=log_level or config.logging.level,
        structured=config.logging.structured,
        log_file=config.logging.log_file,
    )

    matcher_config = config.matcher
    family = data_model or matcher_config.data_model
    require_match = matcher_config.require_match and not allow_zero_match
    ds_config = _resolve_datasource_config(config, duckdb_path, schema)
    logger = get_contextual_logger(
        __name__, {"data_model": family, "datasource": ds_config.name}
    )

    try:
        catalog = _load_model_catalog(
            models_dir or matcher_config.models_dir, matcher_config.strict_catalog
        )
        datasource = create_datasource(ds_config)
        observed = _introspect(datasource)
        result = match_schema(catalog, observed, family, require_match=require_match)
    except IncompatibleDataModelError as exc:
        logger.warning(f"Best candidate {exc.family}/{exc.version} matched nothing")
        click.echo(f"error: {exc}", err=True)
        ctx.exit(1)
    except (CDMMatcherError, ConnectionError, FileNotFoundError, ValueError) as exc:
        click.echo(f"error: {exc}", err=True)
        ctx.exit(1)

    if not result.is_confident:
        click.echo(
            "warning: could not determine a compatible data model version; "
            "mapping below is a best guess",
            err=True,
        )

    if as_json:
        document = result.table_map.to_dict()
        document["match_count"] = result.match_count
        click.echo(json.dumps(document, indent=2))
        return
    TableMapPrinter(click.echo).display(result, show_columns=show_columns)


if __name__ == "__main__":
    cli()
