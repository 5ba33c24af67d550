"""
HTTP client for the data models service.

**Conceptual**: This module is a thin wrapper around HTTP requests to the data
models service. It handles request construction, error mapping, and shaping
the JSON payload into plain {"name", "version", "tables"} dicts. It does NOT
sort versions or answer lookups; that is CatalogIndex's job.

**Endpoints used**:
  - GET {base_url}/        liveness check (ping)
  - GET {base_url}/models  every model version with its tables

The service may describe tables either as bare names or as objects with a
"name" key; both are accepted.
"""

from typing import Any, Dict, List

import requests

from datadirectory.config.settings import CatalogSettings
from datadirectory.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogError(Exception):
    """
    Base exception for catalog failures.

    Callers can catch CatalogError to handle every catalog-related problem,
    or one of the subclasses for finer handling.
    """
    pass


class CatalogUnavailableError(CatalogError):
    """
    Raised when the data models service cannot be reached.

    **Conceptual**: connection refused, DNS failure, timeout, or a 5xx answer.

    **Recovery**: check the service URL (DATA_MODELS_SERVICE_URL) and network.
    """
    pass


class CatalogNotFoundError(CatalogError):
    """
    Raised when a model, version or table is not in the catalog.

    **Recovery**: check spelling; list what exists with CatalogIndex.models()
    and CatalogIndex.versions(model).
    """
    pass


class DataModelsClient:
    """
    Thin HTTP client for the data models service.

    **Responsibilities**:
      - Construct request URLs
      - Make HTTP requests with timeout
      - Map transport and HTTP errors to CatalogError subclasses
      - Validate and normalize the model list payload

    **Example usage**:
        >>> from datadirectory.config.settings import CatalogSettings
        >>> with DataModelsClient(CatalogSettings()) as client:
        ...     client.ping()
        ...     models = client.list_models()
        >>> models[0]
        {'name': 'pedsnet', 'version': '2.1.0', 'tables': ['person', ...]}
    """

    def __init__(self, settings: CatalogSettings):
        self.settings = settings
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": "datadirectory/1.0",
        })

    def _get(self, path: str) -> requests.Response:
        """Issue a GET request and map failures to catalog errors."""
        url = f"{self.settings.base_url}{path}"

        try:
            response = self.session.get(url, timeout=self.settings.timeout_seconds)
        except requests.Timeout as e:
            raise CatalogUnavailableError(
                f"Request to {url} timed out after {self.settings.timeout_seconds}s."
            ) from e
        except requests.ConnectionError as e:
            raise CatalogUnavailableError(
                f"Failed to connect to data models service at {self.settings.base_url}. "
                f"Check network connection and service URL."
            ) from e
        except requests.RequestException as e:
            raise CatalogError(f"HTTP request to {url} failed: {e}") from e

        if response.status_code >= 500:
            raise CatalogUnavailableError(
                f"Data models service error (status {response.status_code}). "
                f"Response: {response.text}"
            )

        if response.status_code >= 400:
            raise CatalogError(
                f"Request to {url} rejected (status {response.status_code}). "
                f"Response: {response.text}"
            )

        return response

    def ping(self) -> None:
        """
        Check that the service answers.

        Raises:
            CatalogUnavailableError: If the service is unreachable or failing.
            CatalogError: For other non-2xx answers.
        """
        self._get("/")

    def list_models(self) -> List[Dict[str, Any]]:
        """
        Fetch every model version the service knows about.

        Returns:
            List of {"name": str, "version": str, "tables": [str, ...]}.

        Raises:
            CatalogUnavailableError: If the service is unreachable or failing.
            CatalogError: If the payload is not JSON or has the wrong shape.
        """
        response = self._get("/models")

        try:
            payload = response.json()
        except ValueError as e:
            raise CatalogError(
                f"Failed to parse JSON response: {e}. Response: {response.text}"
            ) from e

        if not isinstance(payload, list):
            raise CatalogError(
                f"Expected a list of models, got {type(payload).__name__}"
            )

        models = [_normalize_model(entry) for entry in payload]
        logger.info("fetched model list", models=len(models))
        return models

    def close(self):
        """Close the HTTP session and release pooled connections."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def _normalize_model(entry: Any) -> Dict[str, Any]:
    """Shape one service entry into {"name", "version", "tables"}."""
    if not isinstance(entry, dict):
        raise CatalogError(f"Expected model entry to be an object, got {entry!r}")

    name = entry.get("name")
    version = entry.get("version")
    if not isinstance(name, str) or not name or not isinstance(version, str) or not version:
        raise CatalogError(
            f"Model entry missing 'name' or 'version'. Keys: {sorted(entry.keys())}"
        )

    tables = entry.get("tables") or []
    if not isinstance(tables, list):
        raise CatalogError(
            f"Expected 'tables' of {name} {version} to be a list, got {type(tables).__name__}"
        )

    names = []
    for table in tables:
        if isinstance(table, dict):
            table = table.get("name")
        if not isinstance(table, str) or not table:
            raise CatalogError(f"Malformed table entry in {name} {version}: {table!r}")
        names.append(table)

    return {"name": name, "version": version, "tables": names}
