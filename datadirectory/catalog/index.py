"""
In-memory index of the model catalog.

**Conceptual**: The data models service is asked once per run. Its answer is
folded into a CatalogIndex that maps

    model name -> sorted versions
    (model name, version) -> set of table names

and is read-only afterwards. The scanner uses it to recognize table names
from file names; the validator uses it to check every ledger record.

Names, versions and tables are lower-cased on the way in, because ledger
values (other than organization, filename and etl) are lower-cased on read.

**Version ordering**: versions are sorted semantically, so "10.0.0" comes
after "9.1.0". Each version is split on "." and "-"; numeric parts compare as
numbers, other parts compare as text and sort after numbers.
"""

import re
from typing import Any, Dict, FrozenSet, Iterable, List, Tuple

from datadirectory.catalog.base import ModelCatalog
from datadirectory.catalog.client import CatalogError, CatalogNotFoundError
from datadirectory.utils.logging import get_logger

logger = get_logger(__name__)

_VERSION_SPLIT = re.compile(r"[.\-]")


def version_sort_key(version: str) -> Tuple[Tuple[int, int, str], ...]:
    """
    Sort key for version strings.

    Example:
        >>> sorted(["2.1.0", "10.0.0", "2.0.0"], key=version_sort_key)
        ['2.0.0', '2.1.0', '10.0.0']
    """
    parts = []
    for part in _VERSION_SPLIT.split(version):
        if part.isdigit():
            parts.append((0, int(part), ""))
        else:
            parts.append((1, 0, part))
    return tuple(parts)


class CatalogIndex:
    """
    Read-only lookup structure over the catalog's models.

    Build it with CatalogIndex.from_models() (from any list_models() payload)
    or load_catalog() (ping + fetch + build).
    """

    def __init__(self, tables: Dict[str, Dict[str, FrozenSet[str]]]):
        self._tables = tables
        self._versions = {
            model: sorted(versions, key=version_sort_key)
            for model, versions in tables.items()
        }

    @classmethod
    def from_models(cls, models: Iterable[Dict[str, Any]]) -> "CatalogIndex":
        """
        Fold a list_models() payload into an index.

        Raises:
            CatalogError: If an entry lacks name, version or tables.
        """
        tables: Dict[str, Dict[str, FrozenSet[str]]] = {}

        for entry in models:
            try:
                name = entry["name"].lower()
                version = entry["version"].lower()
                table_names = frozenset(t.lower() for t in entry["tables"])
            except (KeyError, TypeError, AttributeError) as e:
                raise CatalogError(f"Malformed model entry {entry!r}: {e}") from e

            tables.setdefault(name, {})[version] = table_names

        return cls(tables)

    def models(self) -> List[str]:
        """Known model names, sorted."""
        return sorted(self._tables)

    def has_model(self, model: str) -> bool:
        return model in self._tables

    def has_version(self, model: str, version: str) -> bool:
        return version in self._tables.get(model, {})

    def has_table(self, model: str, version: str, table: str) -> bool:
        return table in self._tables.get(model, {}).get(version, frozenset())

    def versions(self, model: str) -> List[str]:
        """
        Versions of a model, oldest first.

        Raises:
            CatalogNotFoundError: If the model is unknown.
        """
        if model not in self._versions:
            raise CatalogNotFoundError(f"model '{model}' not found in data models service")
        return list(self._versions[model])

    def latest_version(self, model: str) -> str:
        """Greatest version of a model."""
        return self.versions(model)[-1]

    def tables(self, model: str, version: str) -> FrozenSet[str]:
        """
        Table names of a model version.

        Raises:
            CatalogNotFoundError: If the model or version is unknown.
        """
        if not self.has_version(model, version):
            raise CatalogNotFoundError(
                f"model '{model}' version '{version}' not found in data models service"
            )
        return self._tables[model][version]

    def resolve_version(self, model: str, explicit_version: str = "") -> str:
        """
        Resolve the version to use for a model.

        An empty explicit_version means "latest". An explicit version is
        returned unchanged if the model has it.

        Raises:
            CatalogNotFoundError: If the model is unknown, or the explicit
                                 version is not one of its versions.

        Example:
            >>> index.resolve_version("pedsnet")
            '2.1.0'
            >>> index.resolve_version("pedsnet", "2.0.0")
            '2.0.0'
        """
        if not self.has_model(model):
            raise CatalogNotFoundError(
                f"model '{model}' version '{explicit_version}' not found in data models service"
            )

        if not explicit_version:
            return self.latest_version(model)

        if not self.has_version(model, explicit_version):
            raise CatalogNotFoundError(
                f"model '{model}' version '{explicit_version}' not found in data models service"
            )

        return explicit_version


def load_catalog(catalog: ModelCatalog) -> CatalogIndex:
    """
    Ping the catalog, fetch its models and build the index.

    Raises:
        CatalogUnavailableError: If the catalog cannot be reached.
        CatalogError: If the model list is malformed.
    """
    catalog.ping()
    index = CatalogIndex.from_models(catalog.list_models())
    logger.info("catalog loaded", models=len(index.models()))
    return index
