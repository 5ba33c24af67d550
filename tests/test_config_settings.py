"""
Tests for configuration loading.

Environment variables are set with monkeypatch so nothing leaks between tests;
the settings singleton is reset around every test.
"""

import pytest

from datadirectory.config.settings import (
    DEFAULT_SERVICE_URL,
    CatalogSettings,
    DirectorySettings,
    Settings,
    get_settings,
    reset_settings,
)

ENV_VARS = [
    "DATA_MODELS_SERVICE_URL",
    "DATA_MODELS_TIMEOUT_SECONDS",
    "DATADIR_ROOT_PATH",
    "DATADIR_SITE",
    "DATADIR_MODEL",
    "DATADIR_MODEL_VERSION",
    "DATADIR_DATA_VERSION",
    "DATADIR_ETL",
    "DATADIR_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


def test_catalog_settings_defaults():
    settings = CatalogSettings.from_env()
    assert settings.base_url == DEFAULT_SERVICE_URL
    assert settings.timeout_seconds == 30


def test_catalog_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATA_MODELS_SERVICE_URL", "http://localhost:8123/")
    monkeypatch.setenv("DATA_MODELS_TIMEOUT_SECONDS", "5")

    settings = CatalogSettings.from_env()

    assert settings.base_url == "http://localhost:8123"
    assert settings.timeout_seconds == 5


def test_catalog_settings_bad_timeout(monkeypatch):
    monkeypatch.setenv("DATA_MODELS_TIMEOUT_SECONDS", "soon")
    with pytest.raises(ValueError):
        CatalogSettings.from_env()


def test_catalog_settings_non_positive_timeout():
    with pytest.raises(ValueError):
        CatalogSettings(timeout_seconds=0)


def test_directory_settings_require_root():
    with pytest.raises(ValueError) as exc_info:
        DirectorySettings.from_env()
    assert "DATADIR_ROOT_PATH" in str(exc_info.value)


def test_directory_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATADIR_ROOT_PATH", "/data/export")
    monkeypatch.setenv("DATADIR_SITE", "chop")
    monkeypatch.setenv("DATADIR_MODEL", "pedsnet")

    settings = DirectorySettings.from_env()

    assert settings.root_path == "/data/export"
    assert settings.site == "chop"
    assert settings.model == "pedsnet"
    assert settings.model_version == ""


def test_with_overrides_skips_none():
    base = DirectorySettings(root_path="/data", site="org", model="pedsnet")

    merged = base.with_overrides(root_path="/other", site=None, model_version="2.0.0")

    assert merged.root_path == "/other"
    assert merged.site == "org"
    assert merged.model == "pedsnet"
    assert merged.model_version == "2.0.0"


def test_settings_directory_optional():
    settings = Settings.from_env()
    assert settings.directory is None
    assert settings.log_level == "INFO"


def test_settings_directory_required():
    with pytest.raises(ValueError):
        Settings.from_env(require_directory=True)


def test_settings_log_level_upper_cased(monkeypatch):
    monkeypatch.setenv("DATADIR_LOG_LEVEL", "debug")
    assert Settings.from_env().log_level == "DEBUG"


def test_get_settings_is_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("DATADIR_SITE", "changed")
    monkeypatch.setenv("DATADIR_ROOT_PATH", "/data")

    assert get_settings() is first

    reset_settings()
    assert get_settings().directory.site == "changed"


def test_get_settings_require_directory_after_cache():
    get_settings()
    with pytest.raises(ValueError):
        get_settings(require_directory=True)
