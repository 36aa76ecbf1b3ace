"""Shared fixtures for catalog and matcher tests."""

import pytest

from cdm_matcher.catalog import DataModel, ModelCatalog
from tests.helpers import (
    MIMIC_V1_4,
    OMOP_V5_3_1,
    OMOP_V6_0,
    make_entry,
    write_catalog_file,
)


@pytest.fixture
def omop_v531():
    """OMOP v5.3.1 style entry (includes death and note tables)."""
    return make_entry(DataModel.OMOP, "v5_3_1", OMOP_V5_3_1)


@pytest.fixture
def omop_v60():
    """OMOP v6.0 style entry (death folded into person)."""
    return make_entry(DataModel.OMOP, "v6_0", OMOP_V6_0)


@pytest.fixture
def catalog(omop_v531, omop_v60):
    """Catalog with two OMOP versions and one MIMIC-III version."""
    mimic = make_entry(DataModel.MIMIC3, "v1_4", MIMIC_V1_4)
    return ModelCatalog([omop_v531, omop_v60, mimic])


@pytest.fixture
def models_dir(tmp_path):
    """Models directory laid out like the shipped one."""
    root = tmp_path / "models"
    write_catalog_file(root / "omop" / "OMOP_CDM_v5_3_1.csv", OMOP_V5_3_1)
    write_catalog_file(root / "omop" / "OMOP_CDM_v6_0.csv", OMOP_V6_0)
    write_catalog_file(root / "mimic3" / "mimic3_v1_4.csv", MIMIC_V1_4)
    return root
