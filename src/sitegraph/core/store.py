"""Document store clients.

The build reads every public, published document in one query, newest
first. ``SupabaseStore`` talks to the PostgREST API; ``JsonFileStore``
reads the same row shape from a local file.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from types import TracebackType
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from sitegraph.core.models import DocumentRow, parse_timestamp
from sitegraph.exceptions import DocumentStoreError

logger = logging.getLogger(__name__)

_rows_adapter = TypeAdapter(list[DocumentRow])


def _parse_rows(payload: Any, source: str) -> list[DocumentRow]:
    if not isinstance(payload, list):
        raise DocumentStoreError(f"Expected a list of documents from {source}")
    try:
        return _rows_adapter.validate_python(payload)
    except ValidationError as e:
        raise DocumentStoreError(f"Invalid document rows from {source}: {e}") from e


class DocumentStore(ABC):
    """Abstract base class for document sources.

    Stores are context managers; leaving the block calls ``close``.
    """

    def __enter__(self) -> "DocumentStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release any resources held by the store."""

    @abstractmethod
    def fetch_published(self) -> list[DocumentRow]:
        """Return public, published documents ordered by published_at, newest first."""
        ...


class SupabaseStore(DocumentStore):
    """Reads documents through the Supabase REST API.

    Usage:
        with SupabaseStore(url, key, owner_id) as store:
            rows = store.fetch_published()
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        owner_id: str,
        table: str = "documents",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self.url = url.rstrip("/")
        self.owner_id = owner_id
        self.table = table
        # An injected client belongs to the caller and is left open
        self._owns_client = client is None
        self._http_client = client or httpx.Client(timeout=timeout)
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }

    def close(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._owns_client:
            self._http_client.close()

    def fetch_published(self) -> list[DocumentRow]:
        """Fetch the site owner's public, published documents."""
        params = {
            "select": "*",
            "user_id": f"eq.{self.owner_id}",
            "visibility": "eq.public",
            "status": "eq.published",
            "order": "published_at.desc",
        }
        endpoint = f"{self.url}/rest/v1/{self.table}"
        logger.info("Fetching documents from %s", endpoint)

        try:
            response = self._http_client.get(endpoint, params=params, headers=self._headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise DocumentStoreError(
                f"Supabase query failed: {e.response.status_code} {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise DocumentStoreError(f"Supabase query failed: {e}") from e
        except json.JSONDecodeError as e:
            raise DocumentStoreError(f"Supabase returned invalid JSON: {e}") from e

        return _parse_rows(payload, endpoint)


class JsonFileStore(DocumentStore):
    """Reads document rows from a local JSON array.

    Rows are filtered and ordered the same way the remote query does.
    """

    def __init__(self, path: Path):
        self.path = path

    def fetch_published(self) -> list[DocumentRow]:
        """Load public, published rows from the file."""
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise DocumentStoreError(f"Cannot read {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise DocumentStoreError(f"Invalid JSON in {self.path}: {e}") from e

        rows = [
            row
            for row in _parse_rows(payload, str(self.path))
            if row.visibility == "public" and row.status == "published"
        ]
        # Undated rows first, as PostgreSQL orders NULLs in a descending sort
        dated = sorted(
            (r for r in rows if r.published_at is not None),
            key=lambda r: parse_timestamp(r.published_at).timestamp(),
            reverse=True,
        )
        undated = [r for r in rows if r.published_at is None]
        return undated + dated
