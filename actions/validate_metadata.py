#!/usr/bin/env python3
"""
Validate a data directory's metadata.csv.

**Purpose**: Read <root>/metadata.csv and check every record against what is
known about the directory (site, model, versions), against the data models
service (model, version and table exist), and finally against the files
themselves (every checksum matches). Stops at the first problem and reports
the ledger line it was found on.

**Usage**:
    python actions/validate_metadata.py /data/export
    python actions/validate_metadata.py /data/export --site chop --model pedsnet --data-version 3

**Example output**:
    $ python actions/validate_metadata.py /data/export --site chop
    Loading data models from https://data-models-service.research.chop.edu...
    ✓ Loaded 4 models
    ✓ Read 12 records from /data/export/metadata.csv
    ✗ line '7' table 'visits' not found in data models service (unknown_table)
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path so we can import datadirectory modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datadirectory.catalog.client import CatalogError
from datadirectory.cli import add_directory_arguments, fetch_catalog_index, settings_from_args
from datadirectory.config.settings import get_settings
from datadirectory.directory import DataDirectory
from datadirectory.ledger.errors import LedgerError, RecordRejectedError
from datadirectory.utils.logging import configure_logging


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Validate a data directory's metadata.csv",
        epilog="""
Examples:
  # Check the ledger against the catalog and the files
  python actions/validate_metadata.py /data/export

  # Also require every record to belong to this site, model and data version
  python actions/validate_metadata.py /data/export --site chop --model pedsnet --data-version 3
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_directory_arguments(parser)
    return parser.parse_args(argv)


def validate(args) -> int:
    """
    Run the validate workflow; return the process exit code.

    **Exit codes**:
      - 0: every record valid
      - 1: a record was rejected, or a configuration, catalog or file error
    """
    try:
        catalog_settings, directory_settings = settings_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Loading data models from {catalog_settings.base_url}...")
    try:
        index = fetch_catalog_index(catalog_settings)
        print(f"  ✓ Loaded {len(index.models())} models")

        directory = DataDirectory.open(directory_settings, index)
        directory.read_metadata_file()
        print(f"  ✓ Read {len(directory.store)} records from {directory.context.ledger_path}")

        directory.validate()
    except RecordRejectedError as e:
        print(f"  ✗ {e} ({e.reason.value})")
        return 1
    except (CatalogError, LedgerError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"  ✓ All {len(directory.store)} records valid")
    return 0


def main():
    """Main entry point for the script."""
    try:
        configure_logging(get_settings().log_level)
        sys.exit(validate(parse_args()))
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...")
        sys.exit(130)


if __name__ == "__main__":
    main()
