"""
DataDirectory: one data directory, its context, and its ledger records.

**Conceptual**: This is the object the command line scripts work with. It ties
together the directory context (what we know about the directory), the
catalog index (what models exist), and the record store (the ledger rows),
and exposes the four things a site does with a data directory:

  - populate(): walk the files and generate fresh records
  - write_metadata_file(): save records to <root>/metadata.csv
  - read_metadata_file(): load records from <root>/metadata.csv
  - validate(): check records against the context, catalog and files

**Example usage**:
    >>> from datadirectory.catalog.client import DataModelsClient
    >>> from datadirectory.catalog.index import load_catalog
    >>> with DataModelsClient(settings.catalog) as client:
    ...     index = load_catalog(client)
    >>> directory = DataDirectory.open(settings.directory, index)
    >>> directory.populate(ConsolePrompter())
    >>> directory.write_metadata_file()
"""

from dataclasses import replace
from typing import Optional

from datadirectory.catalog.index import CatalogIndex
from datadirectory.config.settings import DirectorySettings
from datadirectory.ledger.codec import (
    parse_ledger,
    read_ledger_file,
    serialize_ledger,
    write_ledger_file,
)
from datadirectory.ledger.models import DirectoryContext, RecordStore
from datadirectory.ledger.scanner import scan_directory
from datadirectory.ledger.validator import validate_records
from datadirectory.prompts import Prompter
from datadirectory.utils.logging import get_logger

logger = get_logger(__name__)


class DataDirectory:
    """
    A data directory with its context and ledger records.

    Attributes:
        context: DirectoryContext for this run.
        catalog: CatalogIndex used by populate() and validate().
        store: RecordStore holding the current records and header.
    """

    def __init__(self, context: DirectoryContext, catalog: CatalogIndex):
        self.context = context
        self.catalog = catalog
        self.store = RecordStore()

    @classmethod
    def open(cls, settings: DirectorySettings, catalog: CatalogIndex) -> "DataDirectory":
        """
        Build a DataDirectory from settings.

        If a model is configured it must exist in the catalog, and a missing
        model version is inferred as the model's latest version.

        Raises:
            CatalogNotFoundError: If the configured model or version is unknown.
        """
        context = DirectoryContext.from_settings(settings)

        if context.model:
            version = catalog.resolve_version(context.model, context.model_version)
            context = replace(context, model_version=version)

        return cls(context, catalog)

    def read_metadata(self, text: str) -> None:
        """Parse ledger text into the store, replacing its header and records."""
        header, records = parse_ledger(text)
        self.store.replace(header, records)

    def read_metadata_file(self) -> None:
        """Load <root>/metadata.csv into the store."""
        header, records = read_ledger_file(self.context.ledger_path)
        self.store.replace(header, records)
        logger.info("read metadata file", path=str(self.context.ledger_path), records=len(records))

    def write_metadata(self) -> str:
        """Serialize the store as ledger text."""
        return serialize_ledger(self.store.header, self.store.records)

    def write_metadata_file(self) -> None:
        """Write the store to <root>/metadata.csv, overwriting it."""
        write_ledger_file(self.context.ledger_path, self.store.header, self.store.records)
        logger.info("wrote metadata file", path=str(self.context.ledger_path), records=len(self.store))

    def collect_context(self, prompter: Prompter) -> DirectoryContext:
        """
        Ask for whatever the context is missing and adopt the result.

        Site and ETL are free text; model and model version must be chosen
        from the catalog.
        """
        context = self.context
        changes = {}

        if not context.site:
            changes["site"] = prompter.prompt("site name")

        model = context.model
        if not model:
            model = prompter.prompt("common data model name", self.catalog.models()).lower()
            changes["model"] = model

        if not context.model_version:
            changes["model_version"] = prompter.prompt(
                "model version", self.catalog.versions(model)
            ).lower()

        if not context.etl:
            changes["etl"] = prompter.prompt("etl code URL")

        if changes:
            self.context = replace(context, **changes)

        return self.context

    def populate(self, prompter: Optional[Prompter] = None) -> None:
        """
        Generate records for every data file, replacing the store's contents.

        With a prompter, missing context values are collected first and
        unknown table names are asked for. Without one, the context must
        already be complete.

        Raises:
            OSError: If any file can't be read.
            CatalogNotFoundError: If a table can't be resolved.
        """
        if prompter is not None:
            self.collect_context(prompter)

        records = scan_directory(self.context, self.catalog, prompter, self.store.header)
        self.store.clear()
        self.store.extend(records)

    def validate(self) -> None:
        """
        Validate the store's records.

        Raises:
            RecordRejectedError: For the first rejected record.
            OSError: If a data file is missing or unreadable.
        """
        validate_records(self.store.records, self.context, self.catalog)
