"""Load common data model definitions from a directory of CSV files.

Each file under the models directory describes one (family, version) pair.
The family comes from the file path (``omop`` or ``mimic3`` anywhere in it)
and the version from the file name with the family prefix and extension
removed, e.g. ``omop/OMOP_CDM_v5_3_1.csv`` -> (``omop``, ``v5_3_1``).

A file must be comma-separated text with at least a ``table`` and a
``field`` column; each row contributes one column to one table.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple, Union

import pyarrow as pa
import pyarrow.csv as pa_csv

from ..errors import (
    CatalogFileError,
    CatalogLoadError,
    DuplicateVersionError,
    MalformedCatalogFileError,
    UnrecognizedFamilyError,
)
from .catalog import ModelCatalog
from .schema import CanonicalTable, CatalogEntry, DataModel, normalize_name

logger = logging.getLogger(__name__)

FAMILY_PATTERN = re.compile(r"(mimic3)|(omop)", re.IGNORECASE)
VERSION_PREFIX_PATTERN = re.compile(r"(omop_cdm|omop|mimic3)[_\-]?", re.IGNORECASE)

TABLE_COLUMN = "table"
FIELD_COLUMN = "field"


def parse_family(path: Union[str, Path]) -> DataModel:
    """Extract the data model family from a catalog file path.

    Args:
        path: File path, ideally relative to the models directory

    Returns:
        The first family token found in the path

    Raises:
        UnrecognizedFamilyError: If no family token appears in the path
    """
    match = FAMILY_PATTERN.search(str(path))
    if match is None:
        raise UnrecognizedFamilyError(path, "no data model family in path")
    return DataModel(match.group(0).lower())


def parse_version(path: Union[str, Path]) -> str:
    """Extract the version string from a catalog file name.

    Raises:
        MalformedCatalogFileError: If nothing is left once prefix and extension are gone
    """
    stem = Path(path).stem
    version = VERSION_PREFIX_PATTERN.sub("", stem, count=1).lower()
    if not version:
        raise MalformedCatalogFileError(path, "file name carries no version")
    return version


def read_catalog_file(path: Path) -> List[CanonicalTable]:
    """Read one catalog CSV into canonical tables, preserving file order.

    Raises:
        MalformedCatalogFileError: If the file cannot be parsed or lacks columns
    """
    try:
        data = pa_csv.read_csv(
            str(path),
            convert_options=pa_csv.ConvertOptions(strings_can_be_null=True),
        )
    except (pa.ArrowException, OSError, ValueError) as e:
        raise MalformedCatalogFileError(path, f"cannot parse as CSV: {e}") from e

    table_values = _string_column(data, TABLE_COLUMN, path)
    field_values = _string_column(data, FIELD_COLUMN, path)

    # Tables are grouped by normalized name; the first spelling names the table.
    table_names: Dict[str, str] = {}
    columns_by_table: Dict[str, List[str]] = {}
    for table_name, field_name in zip(table_values, field_values):
        if not table_name or not field_name:
            continue
        table_name = table_name.strip()
        key = normalize_name(table_name)
        table_names.setdefault(key, table_name)
        columns_by_table.setdefault(key, []).append(field_name.strip())

    return [
        CanonicalTable(name=table_names[key], columns=tuple(columns))
        for key, columns in columns_by_table.items()
    ]


def _string_column(data: pa.Table, name: str, path: Path) -> List:
    for column_name in data.column_names:
        if column_name.strip().lower() == name:
            try:
                return data.column(column_name).cast(pa.string()).to_pylist()
            except pa.ArrowException as e:
                raise MalformedCatalogFileError(path, f"column '{name}' is not text: {e}") from e
    raise MalformedCatalogFileError(path, f"missing required column '{name}'")


@dataclass
class CatalogLoadResult:
    """Outcome of loading a models directory."""

    catalog: ModelCatalog
    failures: List[CatalogFileError] = field(default_factory=list)
    duplicates: List[DuplicateVersionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every file produced a catalog entry."""
        return not self.failures and not self.duplicates

    @property
    def failed_paths(self) -> List[Path]:
        return [failure.path for failure in self.failures]

    def raise_for_errors(self) -> None:
        """Raise CatalogLoadError if any file failed to load."""
        if self.failures:
            raise CatalogLoadError(self.failures)


class CatalogLoader:
    """Walks a models directory and builds a ModelCatalog."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def load(self) -> CatalogLoadResult:
        """Load every catalog file under the root directory.

        Files that fail are reported in the result rather than aborting the load.

        Raises:
            FileNotFoundError: If the root directory does not exist
        """
        if not self.root.is_dir():
            raise FileNotFoundError(f"Models directory not found: {self.root}")

        entries: Dict[Tuple[str, str], CatalogEntry] = {}
        failures: List[CatalogFileError] = []
        duplicates: List[DuplicateVersionError] = []

        for path in self._iter_files():
            try:
                entry = self.load_file(path)
            except CatalogFileError as e:
                logger.warning(f"Skipping catalog file: {e}")
                failures.append(e)
                continue

            existing = entries.get(entry.identity)
            if existing is not None:
                duplicate = DuplicateVersionError(
                    entry.family.value, entry.version, path, existing.source
                )
                logger.warning(f"Ignoring {duplicate}")
                duplicates.append(duplicate)
                continue
            entries[entry.identity] = entry

        catalog = ModelCatalog(entries.values())
        logger.info(
            f"Loaded {len(catalog)} catalog entries from {self.root} "
            f"({len(failures)} failed, {len(duplicates)} duplicate)"
        )
        return CatalogLoadResult(catalog=catalog, failures=failures, duplicates=duplicates)

    def load_file(self, path: Path) -> CatalogEntry:
        """Build a catalog entry from a single file."""
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            relative = path
        family = parse_family(relative)
        version = parse_version(path)
        tables = read_catalog_file(path)
        logger.debug(f"Read {family.value}/{version} from {path}: {len(tables)} tables")
        return CatalogEntry(family=family, version=version, tables=tuple(tables), source=path)

    def _iter_files(self) -> List[Path]:
        files = []
        for path in sorted(self.root.rglob("*")):
            if not path.is_file():
                continue
            if any(part.startswith(".") for part in path.relative_to(self.root).parts):
                continue
            files.append(path)
        return files


def load_catalog(root: Union[str, Path]) -> CatalogLoadResult:
    """Load every catalog definition under ``root``."""
    return CatalogLoader(root).load()
