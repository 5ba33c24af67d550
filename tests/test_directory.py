"""
Tests for DataDirectory: opening from settings, populating with prompts, and
the write / read / validate cycle on disk.
"""

import pytest

from datadirectory.catalog.client import CatalogNotFoundError
from datadirectory.config.settings import DirectorySettings
from datadirectory.directory import DataDirectory
from datadirectory.ledger.errors import RecordRejectedError, RejectionReason
from datadirectory.ledger.schemas import CANONICAL_HEADER

from conftest import ETL_URL, StubPrompter


def test_open_infers_latest_version(data_dir, catalog_index):
    settings = DirectorySettings(root_path=str(data_dir), site="org", model="PEDSnet")

    directory = DataDirectory.open(settings, catalog_index)

    assert directory.context.model == "pedsnet"
    assert directory.context.model_version == "2.1.0"
    assert directory.context.ledger_path == data_dir / "metadata.csv"


def test_open_unknown_model(data_dir, catalog_index):
    settings = DirectorySettings(root_path=str(data_dir), model="foo")
    with pytest.raises(CatalogNotFoundError):
        DataDirectory.open(settings, catalog_index)


def test_open_unknown_version(data_dir, catalog_index):
    settings = DirectorySettings(root_path=str(data_dir), model="pedsnet", model_version="9.9.9")
    with pytest.raises(CatalogNotFoundError):
        DataDirectory.open(settings, catalog_index)


def test_open_without_model_leaves_version_empty(data_dir, catalog_index):
    directory = DataDirectory.open(DirectorySettings(root_path=str(data_dir)), catalog_index)
    assert directory.context.model_version == ""


def test_populate_prompts_for_missing_context(data_dir, catalog_index):
    directory = DataDirectory.open(DirectorySettings(root_path=str(data_dir)), catalog_index)
    prompter = StubPrompter(["org", "PEDSNET", "2.0.0", ETL_URL])

    directory.populate(prompter)

    assert [message for message, _ in prompter.calls] == [
        "site name",
        "common data model name",
        "model version",
        "etl code URL",
    ]
    assert prompter.calls[1][1] == ["omop", "pedsnet"]
    assert prompter.calls[2][1] == ["2.0.0", "2.1.0"]

    assert len(directory.store) == 3
    record = directory.store[0]
    assert record["cdm"] == "pedsnet"
    assert record["cdm-version"] == "2.0.0"
    assert record["organization"] == "org"
    assert record["etl"] == ETL_URL


def test_populate_complete_context_does_not_prompt(context, catalog_index):
    directory = DataDirectory(context, catalog_index)
    prompter = StubPrompter()

    directory.populate(prompter)

    assert prompter.calls == []
    assert len(directory.store) == 3


def test_populate_replaces_previous_records(context, catalog_index):
    directory = DataDirectory(context, catalog_index)
    directory.populate()
    directory.populate()

    assert len(directory.store) == 3


def test_write_read_validate_cycle(context, catalog_index):
    directory = DataDirectory(context, catalog_index)
    directory.populate()
    directory.write_metadata_file()

    reread = DataDirectory(context, catalog_index)
    reread.read_metadata_file()

    assert reread.store.header == CANONICAL_HEADER
    assert reread.store.records == directory.store.records
    reread.validate()


def test_validate_after_file_change(context, catalog_index, data_dir):
    directory = DataDirectory(context, catalog_index)
    directory.populate()
    directory.write_metadata_file()

    (data_dir / "sub" / "care_site.csv").write_text("care_site_id\n8\n")

    reread = DataDirectory(context, catalog_index)
    reread.read_metadata_file()
    with pytest.raises(RecordRejectedError) as exc_info:
        reread.validate()

    assert exc_info.value.reason is RejectionReason.CHECKSUM_MISMATCH
    assert exc_info.value.line == "3"


def test_read_metadata_text_keeps_file_header(context, catalog_index):
    directory = DataDirectory(context, catalog_index)
    directory.read_metadata(
        "organization,filename,checksum,cdm,table,etl\n"
        "org,person.csv,abc,pedsnet,person,http://etl\n"
    )

    assert directory.store.header == ("organization", "filename", "checksum", "cdm", "table", "etl")
    assert directory.write_metadata() == (
        '"organization","filename","checksum","cdm","table","etl"\n'
        '"org","person.csv","abc","pedsnet","person","http://etl"\n'
    )


def test_read_metadata_file_missing(tmp_path, catalog_index):
    directory = DataDirectory.open(DirectorySettings(root_path=str(tmp_path)), catalog_index)
    with pytest.raises(FileNotFoundError):
        directory.read_metadata_file()
