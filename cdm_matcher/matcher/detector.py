"""Common data model version detection.

Every catalog version of the requested family is scored by how many of its
canonical (table, column) pairs exist in the observed schema after name
normalization. The highest score wins; ties go to the greatest version
string under plain string ordering. That ordering is not semantic: "v2"
sorts above "v10", and "v5_2_bugfix1" above "v5_2_2".
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from ..catalog import CatalogEntry, DataModel, ModelCatalog
from ..errors import NoSuchFamilyError
from .schema import ObservedIndex, ObservedSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionMatch:
    """The selected catalog version and how well it matched."""

    family: str
    version: str
    match_count: int
    total_pairs: int
    scores: Dict[str, int] = field(default_factory=dict, compare=False)

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.family, self.version)

    @property
    def is_confident(self) -> bool:
        """False when the winner matched nothing and was picked by tie-break only."""
        return self.match_count > 0

    @property
    def coverage(self) -> float:
        """Fraction of the winner's canonical pairs found in the database."""
        if self.total_pairs == 0:
            return 0.0
        return self.match_count / self.total_pairs


def count_matches(entry: CatalogEntry, index: ObservedIndex) -> int:
    """Count canonical (table, column) pairs present in the observed index."""
    count = 0
    for table in entry.tables:
        observed_table = index.resolve_table(table.name)
        if observed_table is None:
            continue
        columns = index.columns_for(observed_table)
        for column in table.columns:
            if column in columns:
                count += 1
    return count


def rank_entries(
    entries: List[CatalogEntry], index: ObservedIndex
) -> List[Tuple[int, CatalogEntry]]:
    """Score entries and order them best first.

    Args:
        entries: Candidate catalog entries
        index: Normalized observed schema

    Returns:
        (match_count, entry) pairs, highest count first, then version descending
    """
    scored = [(count_matches(entry, index), entry) for entry in entries]
    scored.sort(key=lambda item: (item[0], item[1].version), reverse=True)
    return scored


def detect_version(
    catalog: ModelCatalog,
    observed: ObservedSchema,
    family: Union[DataModel, str],
) -> VersionMatch:
    """Determine which catalog version the observed schema most likely implements.

    Args:
        catalog: Loaded model catalog
        observed: Tables and columns of the connected database
        family: Data model family selected by the user

    Returns:
        The best scoring version. A zero match count still yields a winner;
        check ``is_confident`` before trusting it.

    Raises:
        NoSuchFamilyError: If the catalog has no entries for ``family``
    """
    model = DataModel.parse(family)
    candidates = catalog.for_family(model)
    if not candidates:
        raise NoSuchFamilyError(model.value)

    index = ObservedIndex(observed)
    ranked = rank_entries(candidates, index)
    best_count, best = ranked[0]

    scores = {entry.version: count for count, entry in ranked}
    logger.debug(f"Version scores for {model.value}: {scores}")

    if best_count == 0:
        logger.warning(
            f"No {model.value} version matched the observed schema; "
            f"falling back to {best.version}"
        )
    else:
        logger.info(
            f"Detected {model.value} {best.version} "
            f"({best_count}/{best.column_count} columns matched)"
        )

    return VersionMatch(
        family=model.value,
        version=best.version,
        match_count=best_count,
        total_pairs=best.column_count,
        scores=scores,
    )


def select_entry(catalog: ModelCatalog, match: VersionMatch) -> Optional[CatalogEntry]:
    """Look up the catalog entry a detection result refers to."""
    return catalog.get(match.family, match.version)
