"""Remote store client wrapper with table-level CRUD operations.

Talks to the hosted database's REST endpoint (``/rest/v1/<table>``). Every
function raises ``DatabaseError`` on transport or remote failure so callers can
decide how to degrade; nothing here retries.
"""

import logging
import re
from typing import Any

import httpx

from src.core.config import constants, settings


logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Raised when the remote store cannot be reached or rejects a request."""


class RecordNotFoundError(DatabaseError):
    """Raised when an update or delete matched no row."""


_client: httpx.AsyncClient | None = None


def _validate_collection_name(collection: str) -> None:
    """Validate that a collection name contains only alphanumeric characters and underscores."""
    if not re.match(r"^[a-zA-Z_][a-zA-Z0-9_]*$", collection):
        msg = f"Invalid collection name: {collection}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def _rest_url(collection: str) -> str:
    base_url = settings.require_credential("supabase_url", "Supabase URL")
    return f"{base_url.rstrip('/')}/rest/v1/{collection}"


def _headers() -> dict[str, str]:
    key = settings.require_credential("supabase_key", "Supabase key")
    return {
        "apikey": key,
        "Authorization": f"Bearer {key}",
        "Content-Type": "application/json",
        "Prefer": "return=representation",
    }


def get_client() -> httpx.AsyncClient:
    """Get or create the shared HTTP client."""
    global _client  # noqa: PLW0603
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(timeout=constants.API_TIMEOUT_SECONDS)
        logger.info("Created remote store HTTP client")
    return _client


async def close_client() -> None:
    """Close the shared HTTP client if one was created."""
    global _client  # noqa: PLW0603
    if _client is None:
        return
    try:
        await _client.aclose()
        logger.info("Closed remote store HTTP client")
    except Exception as e:
        logger.warning("Error closing remote store HTTP client", extra={"error": str(e)})
    finally:
        _client = None


async def _request(
    method: str,
    collection: str,
    *,
    params: dict[str, str] | None = None,
    json: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Issue a request and return the decoded row list."""
    _validate_collection_name(collection)
    try:
        response = await get_client().request(
            method,
            _rest_url(collection),
            params=params,
            json=json,
            headers=_headers(),
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        msg = f"{method} {collection} rejected with {e.response.status_code}: {e.response.text[:200]}"
        raise DatabaseError(msg) from e
    except (httpx.HTTPError, ValueError) as e:
        msg = f"{method} {collection} failed: {e}"
        raise DatabaseError(msg) from e

    if not response.content:
        return []
    payload = response.json()
    return payload if isinstance(payload, list) else [payload]


async def list_records(*, collection: str, select: str = "*") -> list[dict[str, Any]]:
    """Select every row of a collection.

    ``select`` follows the store's embedding syntax, e.g. ``"*,attachments(*)"``.
    """
    try:
        records = await _request("GET", collection, params={"select": select})
        logger.info("Listed records", extra={"collection": collection, "count": len(records)})
        return records
    except DatabaseError as e:
        logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
        raise


async def create_record(*, collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a new row and return it as stored."""
    try:
        records = await _request("POST", collection, json=data)
        logger.info("Created record", extra={"collection": collection, "record_id": data.get("id")})
        return records[0] if records else data
    except DatabaseError as e:
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        raise


async def update_record(*, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Overwrite the given fields of a row by ID and return the updated row."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)

    try:
        records = await _request("PATCH", collection, params={"id": f"eq.{record_id}"}, json=data)
        if not records:
            msg = f"Record not found in {collection}: {record_id}"
            raise RecordNotFoundError(msg)
        logger.info("Updated record", extra={"collection": collection, "record_id": record_id})
        return records[0]
    except DatabaseError as e:
        logger.error("update_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        raise


async def delete_record(*, collection: str, record_id: str) -> None:
    """Delete a row by ID, raising RecordNotFoundError if nothing was deleted."""
    try:
        records = await _request("DELETE", collection, params={"id": f"eq.{record_id}"})
        if not records:
            msg = f"Record not found in {collection}: {record_id}"
            raise RecordNotFoundError(msg)
        logger.info("Deleted record", extra={"collection": collection, "record_id": record_id})
    except DatabaseError as e:
        logger.error("delete_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        raise
