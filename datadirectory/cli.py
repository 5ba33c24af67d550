"""
Command line plumbing shared by the scripts in actions/.

Both scripts take the data directory as a positional argument and the same
optional flags for what is already known about it. Flags override values from
the environment (.env); anything left unset is prompted for or inferred.
"""

import argparse

from datadirectory.catalog.client import DataModelsClient
from datadirectory.catalog.index import CatalogIndex, load_catalog
from datadirectory.config.settings import CatalogSettings, DirectorySettings, get_settings


def add_directory_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the data directory argument and context flags to a parser."""
    parser.add_argument(
        "root",
        help="Data directory containing the data files and metadata.csv",
    )
    parser.add_argument("--site", default=None, help="Organization (site) name")
    parser.add_argument("--model", default=None, help="Common data model name (e.g., pedsnet)")
    parser.add_argument(
        "--model-version",
        default=None,
        help="Model version (default: latest version of --model)",
    )
    parser.add_argument("--data-version", default=None, help="Data version tag")
    parser.add_argument("--etl", default=None, help="URL of the ETL code that produced the data")
    parser.add_argument(
        "--service-url",
        default=None,
        help="Data models service URL (default: DATA_MODELS_SERVICE_URL or the public service)",
    )


def settings_from_args(args: argparse.Namespace) -> tuple[CatalogSettings, DirectorySettings]:
    """
    Merge command line flags over the environment settings.

    Raises:
        ValueError: If a setting is invalid.
    """
    settings = get_settings()

    catalog_settings = settings.catalog
    if args.service_url:
        catalog_settings = CatalogSettings(
            base_url=args.service_url.rstrip("/"),
            timeout_seconds=catalog_settings.timeout_seconds,
        )

    base = settings.directory or DirectorySettings(root_path=args.root)
    directory_settings = base.with_overrides(
        root_path=args.root,
        site=args.site,
        model=args.model,
        model_version=args.model_version,
        data_version=args.data_version,
        etl=args.etl,
    )

    return catalog_settings, directory_settings


def fetch_catalog_index(settings: CatalogSettings) -> CatalogIndex:
    """
    Load the catalog index from the data models service.

    Raises:
        CatalogError: If the service is unreachable or answers badly.
    """
    with DataModelsClient(settings) as client:
        return load_catalog(client)
