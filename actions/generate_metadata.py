#!/usr/bin/env python3
"""
Generate metadata.csv for a data directory.

**Purpose**: Walk a data directory, checksum every data file, work out which
table each file holds, and write the ledger to <root>/metadata.csv. Anything
not supplied on the command line or in .env (site, model, model version, ETL
URL, unrecognized table names) is asked for interactively.

**Usage**:
    python actions/generate_metadata.py /data/export
    python actions/generate_metadata.py /data/export --site chop --model pedsnet
    python actions/generate_metadata.py /data/export --site chop --model pedsnet \\
        --model-version 2.1.0 --etl https://github.com/org/etl/tree/v3

**What this script does**:
  1. Parse command line arguments
  2. Load the model catalog from the data models service
  3. Prompt for missing directory context
  4. Scan the directory into ledger records
  5. Write <root>/metadata.csv (overwriting any existing ledger)

**Example output**:
    $ python actions/generate_metadata.py /data/export --site chop --model pedsnet
    Loading data models from https://data-models-service.research.chop.edu...
    ✓ Loaded 4 models
    Please provide etl code URL: https://github.com/org/etl
    ✓ Scanned 12 data files
    ✓ Saved to /data/export/metadata.csv
    Done!
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
from datadirectory.ledger.errors import LedgerError
from datadirectory.prompts import ConsolePrompter
from datadirectory.utils.logging import configure_logging


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate metadata.csv for a data directory",
        epilog="""
Examples:
  # Prompt for everything not in .env
  python actions/generate_metadata.py /data/export

  # Supply the context up front (latest pedsnet version is inferred)
  python actions/generate_metadata.py /data/export --site chop --model pedsnet --etl https://github.com/org/etl
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_directory_arguments(parser)
    return parser.parse_args(argv)


def generate(args, prompter=None) -> int:
    """
    Run the generate workflow; return the process exit code.

    **Exit codes**:
      - 0: metadata.csv written
      - 1: configuration, catalog, ledger or file error
    """
    try:
        catalog_settings, directory_settings = settings_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not Path(directory_settings.root_path).is_dir():
        print(f"Error: data directory not found: {directory_settings.root_path}", file=sys.stderr)
        return 1

    print(f"Loading data models from {catalog_settings.base_url}...")
    try:
        index = fetch_catalog_index(catalog_settings)
        print(f"  ✓ Loaded {len(index.models())} models")

        directory = DataDirectory.open(directory_settings, index)
        directory.populate(prompter or ConsolePrompter())
        print(f"  ✓ Scanned {len(directory.store)} data files")

        directory.write_metadata_file()
        print(f"  ✓ Saved to {directory.context.ledger_path}")
    except (CatalogError, LedgerError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Done!")
    return 0


def main():
    """Main entry point for the script."""
    try:
        configure_logging(get_settings().log_level)
        sys.exit(generate(parse_args()))
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...")
        sys.exit(130)


if __name__ == "__main__":
    main()
