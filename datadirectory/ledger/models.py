"""
Ledger data model: records, the directory context, and the record store.

A MetadataRecord is a plain dict mapping header fields (plus the derived
"line" field) to string values. Records are created by the codec or the
scanner and are not edited afterwards, except that validation fills an empty
cdm-version with the model's latest version.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from datadirectory.config.settings import DirectorySettings
from datadirectory.ledger.schemas import CANONICAL_HEADER, METADATA_FILENAME

MetadataRecord = Dict[str, str]


@dataclass(frozen=True)
class DirectoryContext:
    """
    What is known about the data directory for this run.

    Empty strings mean "not declared"; the validator only enforces the
    values that are declared.

    Attributes:
        root_path: Directory holding the data files.
        site: Expected organization of every record.
        model: Expected common data model (lower-case).
        model_version: Expected model version (lower-case).
        data_version: Expected data version (lower-case).
        etl: ETL code reference written into generated records.
    """
    root_path: Path
    site: str = ""
    model: str = ""
    model_version: str = ""
    data_version: str = ""
    etl: str = ""

    @property
    def ledger_path(self) -> Path:
        """The ledger always lives at <root_path>/metadata.csv."""
        return self.root_path / METADATA_FILENAME

    @classmethod
    def from_settings(cls, settings: DirectorySettings) -> "DirectoryContext":
        """Build a context, lower-casing model, model version and data version."""
        return cls(
            root_path=Path(settings.root_path),
            site=settings.site,
            model=settings.model.lower(),
            model_version=settings.model_version.lower(),
            data_version=settings.data_version.lower(),
            etl=settings.etl,
        )


class RecordStore:
    """
    Ordered collection of ledger records plus the header they follow.

    The store starts with the canonical header; reading a ledger replaces
    both header and records with what the file contains.
    """

    def __init__(self, header: Sequence[str] = CANONICAL_HEADER):
        self.header: Tuple[str, ...] = tuple(header)
        self._records: List[MetadataRecord] = []

    def add(self, record: MetadataRecord) -> None:
        self._records.append(record)

    def extend(self, records: Iterable[MetadataRecord]) -> None:
        self._records.extend(records)

    def replace(self, header: Sequence[str], records: Iterable[MetadataRecord]) -> None:
        self.header = tuple(header)
        self._records = list(records)

    def clear(self) -> None:
        self._records = []

    def next_line(self) -> int:
        """Ledger line the next added record will occupy (header is line 1)."""
        return len(self._records) + 2

    @property
    def records(self) -> List[MetadataRecord]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MetadataRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> MetadataRecord:
        return self._records[index]
