"""
Tests for CatalogIndex: building from a model list, version ordering, and
version resolution.
"""

import pytest

from datadirectory.catalog.client import CatalogError, CatalogNotFoundError
from datadirectory.catalog.index import CatalogIndex, load_catalog, version_sort_key

from conftest import SAMPLE_MODELS, StubCatalog


def test_from_models_groups_versions(catalog_index):
    assert catalog_index.models() == ["omop", "pedsnet"]
    assert catalog_index.versions("pedsnet") == ["2.0.0", "2.1.0"]
    assert "location" in catalog_index.tables("pedsnet", "2.1.0")
    assert "location" not in catalog_index.tables("pedsnet", "2.0.0")


def test_from_models_lowercases_names():
    index = CatalogIndex.from_models([
        {"name": "PEDSnet", "version": "2.1.0-RC", "tables": ["Person"]},
    ])

    assert index.models() == ["pedsnet"]
    assert index.versions("pedsnet") == ["2.1.0-rc"]
    assert index.has_table("pedsnet", "2.1.0-rc", "person")


def test_from_models_rejects_malformed_entry():
    with pytest.raises(CatalogError):
        CatalogIndex.from_models([{"name": "pedsnet", "tables": []}])


def test_versions_sorted_semantically():
    """10.0.0 is newer than 9.1.0 even though it sorts first as text."""
    index = CatalogIndex.from_models([
        {"name": "m", "version": "10.0.0", "tables": []},
        {"name": "m", "version": "2.1.0", "tables": []},
        {"name": "m", "version": "9.1.0", "tables": []},
    ])

    assert index.versions("m") == ["2.1.0", "9.1.0", "10.0.0"]
    assert index.latest_version("m") == "10.0.0"


def test_version_sort_key_numeric_before_text():
    assert sorted(["1.0.0-rc", "1.0.0-1", "1.0.0"], key=version_sort_key) == [
        "1.0.0",
        "1.0.0-1",
        "1.0.0-rc",
    ]


def test_resolve_version_defaults_to_latest(catalog_index):
    assert catalog_index.resolve_version("pedsnet") == "2.1.0"
    assert catalog_index.resolve_version("pedsnet", "") == "2.1.0"


def test_resolve_version_explicit(catalog_index):
    assert catalog_index.resolve_version("pedsnet", "2.0.0") == "2.0.0"


def test_resolve_version_unknown_model(catalog_index):
    with pytest.raises(CatalogNotFoundError):
        catalog_index.resolve_version("foo")


def test_resolve_version_unknown_version(catalog_index):
    with pytest.raises(CatalogNotFoundError):
        catalog_index.resolve_version("pedsnet", "9.9.9")


def test_tables_unknown_version(catalog_index):
    with pytest.raises(CatalogNotFoundError):
        catalog_index.tables("pedsnet", "9.9.9")


def test_load_catalog_pings_then_builds():
    catalog = StubCatalog()
    index = load_catalog(catalog)

    assert catalog.pinged
    assert index.models() == sorted({m["name"] for m in SAMPLE_MODELS})
