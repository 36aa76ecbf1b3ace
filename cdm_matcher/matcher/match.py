"""One-call schema matching: detect the version, then map its tables."""

import logging
from dataclasses import dataclass
from typing import Tuple, Union

from ..catalog import DataModel, ModelCatalog
from ..errors import IncompatibleDataModelError
from .detector import VersionMatch, detect_version, select_entry
from .schema import ObservedSchema
from .table_map import TableMap, build_table_map

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Detected CDM version plus the table map built from it."""

    family: str
    version: str
    match_count: int
    table_map: TableMap
    detection: VersionMatch

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.family, self.version)

    @property
    def is_confident(self) -> bool:
        return self.match_count > 0


def match_schema(
    catalog: ModelCatalog,
    observed: ObservedSchema,
    family: Union[DataModel, str],
    require_match: bool = True,
) -> MatchResult:
    """Detect the CDM version of ``observed`` and build its table map.

    Args:
        catalog: Loaded model catalog
        observed: Tables and columns of the connected database
        family: Data model family selected by the user
        require_match: Refuse a winner that matched zero columns

    Returns:
        Match result

    Raises:
        NoSuchFamilyError: If the catalog has no entries for ``family``
        IncompatibleDataModelError: If nothing matched and ``require_match`` is set
    """
    detection = detect_version(catalog, observed, family)
    if require_match and not detection.is_confident:
        raise IncompatibleDataModelError(detection.family, detection.version)

    entry = select_entry(catalog, detection)
    table_map = build_table_map(entry, observed)
    return MatchResult(
        family=detection.family,
        version=detection.version,
        match_count=detection.match_count,
        table_map=table_map,
        detection=detection,
    )
