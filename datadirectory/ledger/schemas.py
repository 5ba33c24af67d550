"""
Canonical ledger schema and header validation.

**Conceptual**: This module defines the data contract of metadata.csv. A
ledger header is any permutation of a subset of the canonical fields, as long
as every required field is present. Column names are case-insensitive on read
and always lower-case on write.

**Case rules for values**: organization, filename and etl carry org codes,
paths and URLs, so their case is preserved. Every other value is lower-cased
on read so that comparisons against the catalog are case-insensitive.
"""

from typing import Iterable, Tuple

from datadirectory.ledger.errors import SchemaError

METADATA_FILENAME = "metadata.csv"
DATA_FILE_EXTENSION = ".csv"

# Default *ordered* header, used when a ledger is generated from scratch
CANONICAL_HEADER: Tuple[str, ...] = (
    "organization",
    "filename",
    "checksum",
    "cdm",
    "cdm-version",
    "table",
    "etl",
    "data-version",
)

REQUIRED_FIELDS = frozenset({
    "organization",
    "filename",
    "checksum",
    "cdm",
    "table",
    "etl",
})

CASE_SENSITIVE_FIELDS = frozenset({"organization", "filename", "etl"})

# Derived field holding the ledger line a record came from
LINE_FIELD = "line"


def normalize_header(header: Iterable[str]) -> Tuple[str, ...]:
    """
    Lower-case a header and check it against the canonical schema.

    Raises:
        SchemaError: If a token is not a canonical field, or a required
                    field is missing.

    Example:
        >>> normalize_header(["Organization", "filename", "checksum", "cdm", "table", "etl"])
        ('organization', 'filename', 'checksum', 'cdm', 'table', 'etl')
    """
    normalized = []
    for value in header:
        lowered = str(value).lower()
        if lowered not in CANONICAL_HEADER:
            raise SchemaError(
                f"unexpected header value: {value}. "
                f"Expected values from: {list(CANONICAL_HEADER)}."
            )
        normalized.append(lowered)

    missing = sorted(REQUIRED_FIELDS - set(normalized))
    if missing:
        raise SchemaError(
            f"missing required header value: {', '.join(missing)}. "
            f"Found header: {normalized}."
        )

    return tuple(normalized)


def normalize_value(field: str, value: str) -> str:
    """Apply the per-field case rule to a raw ledger value."""
    if field in CASE_SENSITIVE_FIELDS:
        return value
    return value.lower()
