"""
Generate ledger records by walking a data directory.

**Conceptual**: The scanner turns a directory tree into one MetadataRecord per
data file. It is split into two steps so each can be tested on its own:

  1. iter_data_files(): pure traversal. Depth-first, lexical order, yielding
     only data files (".csv"), never directories, other files, or the ledger
     itself.
  2. build_record(): per-file transformation. Hashes the file, works out which
     table it holds, and fills every header field from the directory context.

**Table names**: a file's base name without extension (lower-cased) is taken as
its table when the catalog lists such a table for the context's model and
version. Otherwise the prompter is asked to pick one of the known tables.

**Failure policy**: any I/O error aborts the whole scan. There is no partial
result.
"""

from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from datadirectory.catalog.client import CatalogNotFoundError
from datadirectory.catalog.index import CatalogIndex
from datadirectory.ledger.checksum import compute_checksum
from datadirectory.ledger.models import DirectoryContext, MetadataRecord, RecordStore
from datadirectory.ledger.schemas import (
    CANONICAL_HEADER,
    DATA_FILE_EXTENSION,
    LINE_FIELD,
    METADATA_FILENAME,
)
from datadirectory.prompts import Prompter
from datadirectory.utils.logging import get_logger

logger = get_logger(__name__)


def iter_data_files(
    root: Path | str,
    ledger_name: str = METADATA_FILENAME,
    extension: str = DATA_FILE_EXTENSION,
) -> Iterator[Path]:
    """
    Yield the data files under root, depth-first in lexical order.

    Only the ledger at the root itself is skipped; a file named metadata.csv
    in a subdirectory is treated as data. Symlinked directories are not
    followed, so a link back up the tree can't repeat files.

    Raises:
        OSError: If a directory can't be listed.
    """
    root = Path(root)
    ledger_path = root / ledger_name

    def walk(directory: Path) -> Iterator[Path]:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                if not entry.is_symlink():
                    yield from walk(entry)
            elif entry.suffix == extension and entry != ledger_path:
                yield entry

    yield from walk(root)


def resolve_table(
    path: Path,
    context: DirectoryContext,
    catalog: CatalogIndex,
    prompter: Optional[Prompter] = None,
) -> str:
    """
    Work out which table a data file holds.

    Raises:
        CatalogNotFoundError: If the context's model/version is not in the
                             catalog, or the name is unknown and there is no
                             prompter to ask.
    """
    known_tables = catalog.tables(context.model, context.model_version)
    table = path.stem.lower()

    if table in known_tables:
        return table

    if prompter is None:
        raise CatalogNotFoundError(
            f"table '{table}' for '{path}' not found in {context.model} "
            f"{context.model_version} and no prompter is available"
        )

    answer = prompter.prompt(f"table name for '{path}'", sorted(known_tables))
    return answer.lower()


def build_record(
    path: Path,
    context: DirectoryContext,
    catalog: CatalogIndex,
    prompter: Optional[Prompter] = None,
    header: Sequence[str] = CANONICAL_HEADER,
    line: int = 2,
) -> MetadataRecord:
    """
    Build the ledger record for one data file.

    Args:
        path: Data file (absolute, or relative to the working directory).
        context: Directory context supplying organization, model, etc.
        catalog: Catalog index for table lookups.
        prompter: Asked when the table can't be inferred from the name.
        header: Fields to populate.
        line: Ledger line this record will occupy.

    Raises:
        OSError: If the file can't be read.
        CatalogNotFoundError: As resolve_table().
    """
    table = resolve_table(path, context, catalog, prompter)

    logger.debug("calculating checksum", file=path.name)
    checksum = compute_checksum(path)

    values = {
        "organization": context.site,
        "filename": path.relative_to(context.root_path).as_posix(),
        "checksum": checksum,
        "cdm": context.model,
        "cdm-version": context.model_version,
        "table": table,
        "etl": context.etl,
        "data-version": context.data_version,
    }

    record = {field: values[field] for field in header}
    record[LINE_FIELD] = str(line)
    return record


def scan_directory(
    context: DirectoryContext,
    catalog: CatalogIndex,
    prompter: Optional[Prompter] = None,
    header: Sequence[str] = CANONICAL_HEADER,
) -> List[MetadataRecord]:
    """
    Build one record per data file under context.root_path.

    Records come out in traversal order, numbered from line 2 (the header is
    line 1 of the written ledger).

    Raises:
        OSError: If any directory or file can't be read.
        CatalogNotFoundError: As resolve_table().

    Example:
        >>> records = scan_directory(context, index, prompter)
        >>> [r["table"] for r in records]
        ['care_site', 'person', 'visit_occurrence']
    """
    store = RecordStore(header)

    for path in iter_data_files(context.root_path):
        store.add(
            build_record(path, context, catalog, prompter, header, line=store.next_line())
        )

    logger.info("scanned data directory", root=str(context.root_path), records=len(store))
    return store.records
