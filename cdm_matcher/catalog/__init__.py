"""Model catalog: reference definitions for every supported CDM version."""

from .catalog import ModelCatalog
from .loader import CatalogLoader, CatalogLoadResult, load_catalog, parse_family, parse_version
from .schema import CanonicalTable, CatalogEntry, DataModel, normalize_name

__all__ = [
    "CanonicalTable",
    "CatalogEntry",
    "CatalogLoadResult",
    "CatalogLoader",
    "DataModel",
    "ModelCatalog",
    "load_catalog",
    "normalize_name",
    "parse_family",
    "parse_version",
]
