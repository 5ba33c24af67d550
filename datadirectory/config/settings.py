"""
Configuration settings for the data directory tools.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
at construction, so a missing root path or a malformed timeout is reported
before any file is hashed or any request is sent.

**What is configured here**:
  - Where the data models service lives (base URL, timeout).
  - What we already know about the data directory (root path, site, model,
    model version, data version, ETL reference).
  - How chatty the logs are.

Only the root path is mandatory. Everything else about the directory may be
collected interactively or inferred (e.g., the latest model version).

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (no-op when the file is absent)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


DEFAULT_SERVICE_URL = "https://data-models-service.research.chop.edu"


@dataclass(frozen=True)
class CatalogSettings:
    """
    Configuration for the data models service client.

    **Conceptual**: The data models service is the catalog of common data
    models (e.g., pedsnet, omop), their versions, and the tables defined by
    each version. The client only needs to know where the service is and how
    long to wait for it.

    Attributes:
        base_url: Base URL of the data models service.
                 Defaults to the public CHOP deployment.
        timeout_seconds: HTTP request timeout in seconds (default 30).
    """
    base_url: str = DEFAULT_SERVICE_URL
    timeout_seconds: int = 30

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.base_url:
            raise ValueError(
                "DATA_MODELS_SERVICE_URL is required but empty. "
                "Unset it to use the default service."
            )
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got: {self.timeout_seconds}"
            )

    @classmethod
    def from_env(cls) -> "CatalogSettings":
        """
        Load catalog settings from environment variables.

        **Environment variables**:
          - DATA_MODELS_SERVICE_URL (optional): Base URL for the service.
          - DATA_MODELS_TIMEOUT_SECONDS (optional): HTTP timeout in seconds.
            Defaults to 30 if not set.

        Raises:
            ValueError: If the timeout is not an integer.
        """
        base_url = os.getenv("DATA_MODELS_SERVICE_URL", DEFAULT_SERVICE_URL)
        timeout_str = os.getenv("DATA_MODELS_TIMEOUT_SECONDS", "30")

        try:
            timeout_seconds = int(timeout_str)
        except ValueError:
            raise ValueError(
                f"DATA_MODELS_TIMEOUT_SECONDS must be an integer, got: {timeout_str}"
            )

        return cls(base_url=base_url.rstrip("/"), timeout_seconds=timeout_seconds)


@dataclass(frozen=True)
class DirectorySettings:
    """
    What is known up front about a data directory.

    **Conceptual**: A data directory is a tree of CSV data files plus a
    metadata.csv ledger at its root. Sites usually know their own name and
    the model they export, so these can be supplied once (in .env or on the
    command line) instead of being typed at every prompt.

    Attributes:
        root_path: Directory holding the data files and metadata.csv.
                  REQUIRED - raises ValueError if not provided.
        site: Organization name expected in every ledger record.
        model: Common data model name (e.g., "pedsnet").
        model_version: Model version; inferred as the latest when empty.
        data_version: Data version tag of this export.
        etl: URL (or other reference) of the ETL code that produced the data.
    """
    root_path: str
    site: str = ""
    model: str = ""
    model_version: str = ""
    data_version: str = ""
    etl: str = ""

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.root_path:
            raise ValueError(
                "DATADIR_ROOT_PATH is required but not set. "
                "Pass the data directory on the command line or set it in .env."
            )

    @classmethod
    def from_env(cls) -> "DirectorySettings":
        """
        Load directory settings from environment variables.

        **Environment variables**:
          - DATADIR_ROOT_PATH (required)
          - DATADIR_SITE, DATADIR_MODEL, DATADIR_MODEL_VERSION,
            DATADIR_DATA_VERSION, DATADIR_ETL (optional)

        Raises:
            ValueError: If DATADIR_ROOT_PATH is missing or empty.
        """
        return cls(
            root_path=os.getenv("DATADIR_ROOT_PATH", ""),
            site=os.getenv("DATADIR_SITE", ""),
            model=os.getenv("DATADIR_MODEL", ""),
            model_version=os.getenv("DATADIR_MODEL_VERSION", ""),
            data_version=os.getenv("DATADIR_DATA_VERSION", ""),
            etl=os.getenv("DATADIR_ETL", ""),
        )

    def with_overrides(self, **values: Optional[str]) -> "DirectorySettings":
        """
        Return a copy with every non-None value replaced.

        Command line flags default to None, so anything the user did not pass
        keeps the value from the environment.

        Example:
            >>> base = DirectorySettings(root_path="/data", site="org")
            >>> base.with_overrides(site=None, model="pedsnet").model
            'pedsnet'
        """
        changes = {key: value for key, value in values.items() if value is not None}
        return replace(self, **changes)


@dataclass(frozen=True)
class Settings:
    """
    Global settings for the data directory tools.

    Attributes:
        catalog: Data models service settings (always available, has defaults).
        directory: Directory settings. None when DATADIR_ROOT_PATH is unset and
                  the caller did not require it (scripts take the path as an
                  argument instead).
        log_level: Logging level name (default "INFO").
    """
    catalog: CatalogSettings
    directory: Optional[DirectorySettings] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, require_directory: bool = False) -> "Settings":
        """
        Load global settings from environment variables.

        Args:
            require_directory: If True, raise error if DATADIR_ROOT_PATH is missing.
                             If False (default), directory settings are optional.

        Raises:
            ValueError: If require_directory=True and the root path is missing,
                       or if any catalog setting is malformed.
        """
        directory_settings = None
        try:
            directory_settings = DirectorySettings.from_env()
        except ValueError as e:
            if require_directory:
                raise ValueError(
                    f"Directory settings are required but could not be loaded: {e}"
                )

        return cls(
            catalog=CatalogSettings.from_env(),
            directory=directory_settings,
            log_level=os.getenv("DATADIR_LOG_LEVEL", "INFO").upper(),
        )


_default_settings: Optional[Settings] = None


def get_settings(require_directory: bool = False) -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.
    Tests can bypass this by constructing their own Settings objects, or call
    reset_settings() after changing the environment.

    Raises:
        ValueError: If require_directory=True and no root path is configured.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env(require_directory=require_directory)

    if require_directory and _default_settings.directory is None:
        raise ValueError(
            "Directory settings are required but not configured. "
            "Please set DATADIR_ROOT_PATH in your .env file."
        )

    return _default_settings


def reset_settings():
    """Reset the global settings singleton (for testing)."""
    global _default_settings
    _default_settings = None
