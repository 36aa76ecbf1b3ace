"""Schema matching against the model catalog."""

from .detector import VersionMatch, count_matches, detect_version, rank_entries
from .match import MatchResult, match_schema
from .normalize import NameIndex, normalize_name
from .schema import ObservedIndex, ObservedSchema, ObservedTable
from .sql import build_select
from .table_map import TableMap, TableMapping, build_table_map

__all__ = [
    "MatchResult",
    "NameIndex",
    "ObservedIndex",
    "ObservedSchema",
    "ObservedTable",
    "TableMap",
    "TableMapping",
    "VersionMatch",
    "build_select",
    "build_table_map",
    "count_matches",
    "detect_version",
    "match_schema",
    "normalize_name",
    "rank_entries",
]
