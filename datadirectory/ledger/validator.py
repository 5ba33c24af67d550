"""
Validate ledger records against the directory context, the catalog, and the
files on disk.

**Conceptual**: Validation runs in two passes over all records.

  Pass 1, per record (check_record):
    1. required fields are non-empty
    2. organization matches the context site (if declared)
    3. cdm is a known model; an empty cdm-version is filled with the model's
       latest version, otherwise it must be a known version
    4. cdm / cdm-version match the context model / version (if declared)
    5. table is defined by that model version
    6. data-version matches the context data version (if both declared)

  Pass 2, per record (verify_checksum):
    7. the filename is relative and stays under the root, the file exists
       and its SHA-256 matches the checksum

Pass 2 only starts once every record has passed pass 1, so a bad table on
line 40 is reported before a bad checksum on line 3. The cheap checks run
before any file is hashed.

**All-or-nothing**: the first rejection is raised as RecordRejectedError and
validation stops. There is no aggregate report of every failing record.
"""

from pathlib import Path, PurePosixPath
from typing import Sequence

from datadirectory.catalog.index import CatalogIndex
from datadirectory.ledger.checksum import compute_checksum
from datadirectory.ledger.errors import RecordRejectedError, RejectionReason
from datadirectory.ledger.models import DirectoryContext, MetadataRecord
from datadirectory.ledger.schemas import CANONICAL_HEADER, LINE_FIELD, REQUIRED_FIELDS
from datadirectory.utils.logging import get_logger

logger = get_logger(__name__)

# Checked in canonical order so the reported field is deterministic
_REQUIRED_IN_ORDER = [field for field in CANONICAL_HEADER if field in REQUIRED_FIELDS]


def _reject(record: MetadataRecord, reason: RejectionReason, message: str) -> RecordRejectedError:
    line = record.get(LINE_FIELD, "")
    return RecordRejectedError(reason, line, f"line '{line}' {message}")


def check_record(
    record: MetadataRecord,
    context: DirectoryContext,
    catalog: CatalogIndex,
) -> None:
    """
    Run the non-checksum checks (1-6) on one record.

    Fills an empty cdm-version with the model's latest version.

    Raises:
        RecordRejectedError: On the first failed check.
    """
    for field in _REQUIRED_IN_ORDER:
        if not record.get(field):
            raise _reject(
                record, RejectionReason.MISSING_FIELD,
                f"missing required value '{field}'",
            )

    if context.site and record["organization"] != context.site:
        raise _reject(
            record, RejectionReason.ORGANIZATION_MISMATCH,
            f"organization '{record['organization']}' does not match "
            f"expected organization '{context.site}'",
        )

    model = record["cdm"]
    version = record.get("cdm-version", "")
    if not catalog.has_model(model) or (version and not catalog.has_version(model, version)):
        raise _reject(
            record, RejectionReason.UNKNOWN_MODEL_OR_VERSION,
            f"cdm '{model}' version '{version}' not found in data models service",
        )
    if not version:
        version = catalog.latest_version(model)
        record["cdm-version"] = version

    if context.model and model != context.model:
        raise _reject(
            record, RejectionReason.CONTEXT_MISMATCH,
            f"cdm '{model}' does not match expected model '{context.model}'",
        )

    if context.model_version and version != context.model_version:
        raise _reject(
            record, RejectionReason.CONTEXT_MISMATCH,
            f"cdm-version '{version}' does not match expected model version "
            f"'{context.model_version}'",
        )

    if not catalog.has_table(model, version, record["table"]):
        raise _reject(
            record, RejectionReason.UNKNOWN_TABLE,
            f"table '{record['table']}' not found in data models service",
        )

    data_version = record.get("data-version", "")
    if context.data_version and data_version and data_version != context.data_version:
        raise _reject(
            record, RejectionReason.DATA_VERSION_MISMATCH,
            f"data-version '{data_version}' does not match expected data version "
            f"'{context.data_version}'",
        )


def verify_checksum(record: MetadataRecord, root: Path | str) -> None:
    """
    Recompute a record's file checksum and compare (check 7).

    Raises:
        FileNotFoundError: If the file doesn't exist under root.
        OSError: If the file can't be read.
        RecordRejectedError: If the filename points outside root, or the
                            checksum differs.
    """
    filename = record["filename"]
    relative = PurePosixPath(filename)
    if relative.is_absolute() or Path(filename).is_absolute() or ".." in relative.parts:
        raise _reject(
            record, RejectionReason.FILENAME_OUTSIDE_ROOT,
            f"file '{filename}' is not a path inside the data directory",
        )

    path = Path(root) / filename

    if not path.is_file():
        raise FileNotFoundError(
            f"line '{record.get(LINE_FIELD, '')}' file '{record['filename']}' "
            f"not found under {root}"
        )

    logger.debug("validating checksum", file=path.name)
    if compute_checksum(path) != record["checksum"]:
        raise _reject(
            record, RejectionReason.CHECKSUM_MISMATCH,
            f"file '{record['filename']}' checksum does not match",
        )


def validate_records(
    records: Sequence[MetadataRecord],
    context: DirectoryContext,
    catalog: CatalogIndex,
) -> None:
    """
    Validate every record; return quietly if all pass.

    Raises:
        RecordRejectedError: For the first rejected record (see module doc
                            for the check order).
        OSError: If a data file is missing or unreadable.
    """
    for record in records:
        check_record(record, context, catalog)

    for record in records:
        verify_checksum(record, context.root_path)

    logger.info("ledger valid", records=len(records))
