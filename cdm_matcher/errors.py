"""Exception hierarchy for catalog loading and schema matching."""

from pathlib import Path
from typing import List, Optional, Union


class CDMMatcherError(Exception):
    """Base class for every error raised by cdm_matcher."""


class CatalogError(CDMMatcherError):
    """Base class for model catalog errors."""


class CatalogFileError(CatalogError):
    """A single catalog file could not be turned into a catalog entry."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class UnrecognizedFamilyError(CatalogFileError):
    """No known data model token appears in the catalog file path."""


class MalformedCatalogFileError(CatalogFileError):
    """Catalog file is not delimited text or lacks the table/field columns."""


class DuplicateVersionError(CatalogError):
    """Two catalog definitions share the same (family, version) identity."""

    def __init__(
        self,
        family: str,
        version: str,
        path: Optional[Path] = None,
        existing: Optional[Path] = None,
    ):
        self.family = family
        self.version = version
        self.path = path
        self.existing = existing
        message = f"duplicate catalog entry {family}/{version}"
        if path is not None and existing is not None:
            message += f" ({path} duplicates {existing})"
        super().__init__(message)


class CatalogLoadError(CatalogError):
    """Aggregate of every per-file failure from a catalog load."""

    def __init__(self, failures: List[CatalogFileError]):
        self.failures = list(failures)
        lines = [f"{len(self.failures)} catalog file(s) failed to load:"]
        for failure in self.failures:
            lines.append(f"  - {failure}")
        super().__init__("\n".join(lines))


class MatchError(CDMMatcherError):
    """Base class for errors raised while matching a schema."""


class NoSuchFamilyError(MatchError):
    """The requested data model family has no catalog entries."""

    def __init__(self, family: str):
        self.family = family
        super().__init__(f"no catalog entries for data model '{family}'")


class IncompatibleDataModelError(MatchError):
    """The best catalog candidate matched none of the observed schema."""

    def __init__(self, family: str, version: str):
        self.family = family
        self.version = version
        super().__init__("could not determine a compatible data model version")


class UnmappedTableError(MatchError):
    """A canonical table has no physical counterpart to query."""
