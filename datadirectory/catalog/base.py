"""
Base abstraction for model catalogs.

**Conceptual**: The scanner and validator need to know which common data
models exist, which versions each model has, and which tables each version
defines. Where that knowledge comes from (the data models service over HTTP,
a JSON fixture, a stub in tests) is irrelevant to them, so it is expressed as
a Protocol: any object with ping() and list_models() is a ModelCatalog.

**Data guarantees** every implementation must provide from list_models():
  1. One entry per (model, version) pair.
  2. Each entry is a dict with keys "name" (str), "version" (str) and
     "tables" (list of str table names).
  3. Failures raise CatalogError (or a subclass), never a raw transport error.
"""

from typing import Any, Dict, List, Protocol


class ModelCatalog(Protocol):
    """
    Protocol for fetching model definitions from any catalog source.

    **Testing strategy**: a stub is a few lines:
        >>> class StubCatalog:
        ...     def ping(self):
        ...         pass
        ...     def list_models(self):
        ...         return [{"name": "pedsnet", "version": "2.1.0",
        ...                  "tables": ["person", "visit_occurrence"]}]
    """

    def ping(self) -> None:
        """Raise CatalogUnavailableError if the catalog cannot be reached."""
        ...

    def list_models(self) -> List[Dict[str, Any]]:
        """Return every model version as {"name", "version", "tables"}."""
        ...
