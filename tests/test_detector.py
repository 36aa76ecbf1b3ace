"""Tests for CDM version detection."""

import pytest

from cdm_matcher.catalog import DataModel, ModelCatalog
from cdm_matcher.errors import NoSuchFamilyError
from cdm_matcher.matcher import ObservedIndex, ObservedSchema, count_matches, detect_version
from tests.helpers import OMOP_V5_3_1, make_entry, mirror_schema


def test_detects_fully_matching_version(catalog, omop_v60):
    """A schema mirroring v6_0 beats the half-matching v5_3_1."""
    observed = mirror_schema(omop_v60)

    result = detect_version(catalog, observed, "omop")

    assert result.identity == ("omop", "v6_0")
    assert result.match_count == 9
    assert result.total_pairs == 9
    assert result.scores == {"v6_0": 9, "v5_3_1": 7}
    assert result.is_confident
    assert result.coverage == 1.0


def test_half_match_is_counted(omop_v531, omop_v60):
    """v5_3_1 shares exactly half of its pairs with a v6_0 database."""
    index = ObservedIndex(mirror_schema(omop_v60))

    assert count_matches(omop_v531, index) == omop_v531.column_count // 2


def test_detects_older_version(catalog, omop_v531):
    """A schema mirroring v5_3_1 is detected as v5_3_1."""
    result = detect_version(catalog, mirror_schema(omop_v531), DataModel.OMOP)

    assert result.identity == ("omop", "v5_3_1")
    assert result.match_count == 14


def test_names_are_normalized_before_matching(catalog):
    """Case and separator differences do not prevent a match."""
    observed = ObservedSchema.from_mapping(
        {
            "PERSON": ["Person-ID", "GENDER.CONCEPT.ID", "Year_Of_Birth", "race-concept-id", "DEATH_DATETIME"],
            "Visit-Occurrence": ["VISIT_OCCURRENCE_ID", "person_id", "Visit.Start.Date", "Admitted-From-Concept-ID"],
        }
    )

    result = detect_version(catalog, observed, "omop")

    assert result.identity == ("omop", "v6_0")
    assert result.match_count == 9


def test_column_must_belong_to_matched_table(catalog):
    """A canonical column found only in another table does not count."""
    observed = ObservedSchema.from_mapping(
        {"person": ["person_id"], "somewhere_else": ["gender_concept_id", "year_of_birth"]}
    )

    result = detect_version(catalog, observed, "omop")

    assert result.match_count == 1


def test_zero_overlap_still_returns_greatest_version(catalog):
    """With nothing in common the tie-break picks the greatest version string."""
    observed = ObservedSchema.from_mapping({"billing": ["invoice_id", "amount"]})

    result = detect_version(catalog, observed, "omop")

    assert result.identity == ("omop", "v6_0")
    assert result.match_count == 0
    assert not result.is_confident
    assert result.coverage == 0.0


def test_empty_schema_returns_winner(catalog):
    """An empty database behaves like a zero-overlap one."""
    result = detect_version(catalog, ObservedSchema(), "mimic")

    assert result.identity == ("mimic3", "v1_4")
    assert result.match_count == 0


def test_tie_break_uses_string_ordering():
    """"v2" beats "v10" because plain string ordering compares character by character."""
    catalog = ModelCatalog(
        [
            make_entry(DataModel.OMOP, "v10", OMOP_V5_3_1),
            make_entry(DataModel.OMOP, "v2", OMOP_V5_3_1),
        ]
    )
    observed = ObservedSchema.from_mapping({"person": ["person_id"]})

    result = detect_version(catalog, observed, "omop")

    assert result.version == "v2"
    assert result.scores == {"v2": 1, "v10": 1}


def test_tie_break_does_not_use_semantic_versions():
    """Known limitation: "v5_2_bugfix1" outranks "v5_2_2" on a tie."""
    catalog = ModelCatalog(
        [
            make_entry(DataModel.OMOP, "v5_2_2", OMOP_V5_3_1),
            make_entry(DataModel.OMOP, "v5_2_bugfix1", OMOP_V5_3_1),
        ]
    )

    result = detect_version(catalog, ObservedSchema(), "omop")

    assert result.version == "v5_2_bugfix1"


def test_higher_count_beats_greater_version():
    """The tie-break only applies between equal counts."""
    catalog = ModelCatalog(
        [
            make_entry(DataModel.OMOP, "v9", {"person": ["person_id", "dob"]}),
            make_entry(DataModel.OMOP, "v10", {"person": ["person_id", "gender"]}),
        ]
    )
    observed = ObservedSchema.from_mapping({"person": ["person_id", "gender"]})

    assert detect_version(catalog, observed, "omop").version == "v10"


def test_other_families_are_ignored(catalog):
    """Only entries of the requested family are scored."""
    observed = ObservedSchema.from_mapping({"patients": ["subject_id", "gender", "dob"]})

    result = detect_version(catalog, observed, "omop")

    assert result.family == "omop"
    assert set(result.scores) == {"v5_3_1", "v6_0"}


def test_no_such_family():
    """A family with no catalog entries is an error."""
    catalog = ModelCatalog([make_entry(DataModel.OMOP, "v6_0", {"person": ["person_id"]})])

    with pytest.raises(NoSuchFamilyError, match="mimic3"):
        detect_version(catalog, ObservedSchema(), "mimic")


def test_detection_is_repeatable(catalog, omop_v531):
    """Repeated calls with the same inputs agree."""
    observed = mirror_schema(omop_v531)

    first = detect_version(catalog, observed, "omop")
    second = detect_version(catalog, observed, "omop")

    assert first == second
