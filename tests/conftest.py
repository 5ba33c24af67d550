"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import datadirectory...' works,
and provides the shared fixtures: an in-memory catalog, a stub prompter, and
a small data directory on disk.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from datadirectory.catalog.index import CatalogIndex  # noqa: E402
from datadirectory.ledger.models import DirectoryContext  # noqa: E402


SAMPLE_MODELS = [
    {"name": "pedsnet", "version": "2.0.0", "tables": ["person", "visit_occurrence", "care_site"]},
    {
        "name": "pedsnet",
        "version": "2.1.0",
        "tables": ["person", "visit_occurrence", "care_site", "location", "provider"],
    },
    {"name": "omop", "version": "5.0.0", "tables": ["person", "observation", "care_site"]},
]

ETL_URL = "https://persistentcodestorage.com/ETLScript3.sql"


class StubPrompter:
    """Prompter answering from a fixed list and recording every question."""

    def __init__(self, answers=()):
        self.answers = list(answers)
        self.calls = []

    def prompt(self, message, choices=None):
        self.calls.append((message, list(choices) if choices else None))
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {message}")
        return self.answers.pop(0)


class StubCatalog:
    """ModelCatalog returning SAMPLE_MODELS."""

    def __init__(self, models=None):
        self.models = SAMPLE_MODELS if models is None else models
        self.pinged = False

    def ping(self):
        self.pinged = True

    def list_models(self):
        return self.models


@pytest.fixture
def catalog_index():
    return CatalogIndex.from_models(SAMPLE_MODELS)


@pytest.fixture
def data_dir(tmp_path):
    """
    A data directory with three data files, one non-data file, and a stale
    ledger that the scanner must skip.
    """
    (tmp_path / "person.csv").write_text("person_id,gender\n1,F\n2,M\n")
    (tmp_path / "visit_occurrence.csv").write_text("visit_id,person_id\n10,1\n")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "care_site.csv").write_text("care_site_id\n7\n")
    (tmp_path / "README.txt").write_text("not data\n")
    (tmp_path / "metadata.csv").write_text('"organization"\n')
    return tmp_path


@pytest.fixture
def context(data_dir):
    return DirectoryContext(
        root_path=data_dir,
        site="org",
        model="pedsnet",
        model_version="2.1.0",
        data_version="3",
        etl=ETL_URL,
    )
