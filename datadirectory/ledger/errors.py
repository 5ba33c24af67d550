"""
Exceptions raised while reading, building or validating a ledger.

Every ledger operation is all-or-nothing: the first problem aborts the
operation and is raised with enough context (line number, file name, field)
to fix it. Filesystem problems are left as the builtin OSError family.
"""

from enum import Enum


class LedgerError(Exception):
    """Base exception for ledger problems."""
    pass


class SchemaError(LedgerError):
    """
    Raised when the ledger header is unusable.

    **Conceptual**: an unknown header token, a missing required field, or no
    header at all.
    """
    pass


class FormatError(LedgerError):
    """
    Raised when the ledger text is not well-formed CSV.

    **Conceptual**: unterminated quotes, or a row whose field count does not
    match the header.
    """
    pass


class RejectionReason(str, Enum):
    """Why a record failed validation."""
    MISSING_FIELD = "missing_field"
    ORGANIZATION_MISMATCH = "organization_mismatch"
    UNKNOWN_MODEL_OR_VERSION = "unknown_model_or_version"
    CONTEXT_MISMATCH = "context_mismatch"
    UNKNOWN_TABLE = "unknown_table"
    DATA_VERSION_MISMATCH = "data_version_mismatch"
    FILENAME_OUTSIDE_ROOT = "filename_outside_root"
    CHECKSUM_MISMATCH = "checksum_mismatch"


class RecordRejectedError(LedgerError):
    """
    Raised when a ledger record fails validation.

    Attributes:
        reason: RejectionReason naming the failed check.
        line: Ledger line of the record ("" if unknown).
    """

    def __init__(self, reason: RejectionReason, line: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.line = line
