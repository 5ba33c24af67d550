"""
Strict CSV reader and writer for the metadata ledger.

**Conceptual**: This module is the *only* I/O boundary for metadata.csv. Every
ledger read goes through parse_ledger() (header validation, case rules, line
numbers) and every write goes through serialize_ledger() (fully quoted
fields, header order, "\\n" terminators).

**Reading is strict**: rows are tokenized by csv.reader in strict mode and
every value is kept as a literal string ("NA" or "null" stay as typed). The
following are FormatErrors:
  - a row with more or fewer fields than the header
  - an unterminated quoted field
  - text after a closing quote ('"foo"bar')
  - a quote inside an unquoted field ('fo"o')
Header problems are SchemaErrors.

**Writing** goes through pandas to_csv with every field quoted.

**Line numbers**: the header is line 1, so the first record is line "2".
Blank lines are skipped and do not count.
"""

import csv
import io
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from datadirectory.ledger.errors import FormatError, SchemaError
from datadirectory.ledger.models import MetadataRecord
from datadirectory.ledger.schemas import LINE_FIELD, normalize_header, normalize_value

QUOTE = '"'


def _find_bare_quote(text: str) -> Optional[int]:
    """
    Return the physical line of the first quote inside an unquoted field.

    csv.reader keeps such quotes as literal characters even in strict mode,
    so they are looked for separately. Returns None if there are none.
    """
    line = 1
    in_quotes = False
    field_start = True
    i = 0

    while i < len(text):
        char = text[i]

        if in_quotes:
            if char == QUOTE:
                if text[i + 1:i + 2] == QUOTE:
                    i += 1
                else:
                    in_quotes = False
            elif char == "\n":
                line += 1
        elif char == QUOTE:
            if not field_start:
                return line
            in_quotes = True
            field_start = False
        elif char in ",\r\n":
            field_start = True
            if char == "\n":
                line += 1
        else:
            field_start = False

        i += 1

    return None


def _read_rows(text: str) -> List[List[str]]:
    """Tokenize ledger text into non-blank rows, raising FormatError on bad CSV."""
    bad_line = _find_bare_quote(text)
    if bad_line is not None:
        raise FormatError(
            f"malformed ledger CSV: bare '\"' in unquoted field on line {bad_line}"
        )

    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        return [row for row in reader if row]
    except csv.Error as e:
        raise FormatError(f"malformed ledger CSV: line {reader.line_num}: {e}") from e


def parse_ledger(text: str) -> Tuple[Tuple[str, ...], List[MetadataRecord]]:
    """
    Parse ledger text into a header and records.

    Args:
        text: Full metadata.csv content.

    Returns:
        (header, records): the lower-cased header tuple, and one dict per data
        row mapping header fields to values plus the derived "line" field.

    Raises:
        SchemaError: If there is no header, a header token is unknown, or a
                    required field is missing from the header.
        FormatError: If the text is not well-formed CSV, or a row's field
                    count differs from the header's.

    Example:
        >>> header, records = parse_ledger(
        ...     "organization,filename,checksum,cdm,table,etl\\n"
        ...     "foo,./data,456,pedsnet,Person,http://foo.org/etl\\n"
        ... )
        >>> records[0]["table"], records[0]["line"]
        ('person', '2')
    """
    rows = _read_rows(text)
    if not rows:
        raise SchemaError("ledger has no header row")

    header = normalize_header(rows[0])

    records: List[MetadataRecord] = []
    for offset, values in enumerate(rows[1:]):
        line = offset + 2
        if len(values) != len(header):
            raise FormatError(
                f"malformed ledger CSV: line {line} has {len(values)} fields, "
                f"expected {len(header)}"
            )

        record = {
            field: normalize_value(field, value)
            for field, value in zip(header, values)
        }
        record[LINE_FIELD] = str(line)
        records.append(record)

    return header, records


def serialize_ledger(header: Sequence[str], records: Sequence[MetadataRecord]) -> str:
    """
    Serialize a header and records to ledger text.

    Every field, header included, is double-quoted. Record values are written
    in header order; fields a record lacks are written as "". The derived
    "line" field is never written. The header is not validated here.

    Example:
        >>> serialize_ledger(["foo", "bar"], [{"foo": "boo", "bar": "far"}])
        '"foo","bar"\\n"boo","far"\\n'
    """
    rows = [[record.get(field, "") for field in header] for record in records]
    df = pd.DataFrame(rows, columns=list(header), dtype=object)
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def read_ledger_file(path: Path | str) -> Tuple[Tuple[str, ...], List[MetadataRecord]]:
    """
    Read and parse a metadata.csv file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SchemaError, FormatError: As parse_ledger().
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(
            f"Metadata file not found: {path}. "
            f"Generate it first or check the data directory path."
        )

    with open(path, "r", encoding="utf-8", newline="") as handle:
        text = handle.read()

    return parse_ledger(text)


def write_ledger_file(
    path: Path | str,
    header: Sequence[str],
    records: Sequence[MetadataRecord],
) -> None:
    """
    Serialize records and write them to a metadata.csv file.

    An existing file is overwritten.

    Raises:
        OSError: If the file can't be written (permissions, disk full, etc.).
    """
    path = Path(path)
    text = serialize_ledger(header, records)

    try:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
    except OSError as e:
        raise OSError(f"Failed to write metadata file {path}. Error: {e}") from e
