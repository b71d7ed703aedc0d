"""Google Drive upload and Google Sheets snapshot integration.

Optional and best-effort: credentials are supplied by the user, and every
failure is logged and reported through the sync indicator without touching
task data.
"""

import json
import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from src.core.config import constants
from src.core.logging import span
from src.domain.task import Task
from src.services.capabilities import Available, Unavailable, is_available


if TYPE_CHECKING:
    from src.core.app_context import AppContext


logger = logging.getLogger(__name__)

DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"
REVOKE_URL = "https://oauth2.googleapis.com/revoke"

SHEET_HEADER = ["ID", "Title", "Description", "Priority", "Status", "Due Date", "Assignee ID", "Attachments Count"]


class SyncIndicator(StrEnum):
    """Spreadsheet sync status shown next to the sync button."""

    IDLE = "idle"
    SYNCING = "syncing"
    SUCCESS = "success"
    ERROR = "error"


class DriveFile(BaseModel):
    """Uploaded file reference returned by Drive."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    web_content_link: str | None = Field(default=None, alias="webContentLink")
    web_view_link: str | None = Field(default=None, alias="webViewLink")


def task_sheet_values(tasks: list[Task]) -> list[list[Any]]:
    """Header row plus one row per task."""
    rows = [
        [
            task.id,
            task.title,
            task.description,
            task.priority.value,
            task.status.value,
            task.due_date.isoformat(),
            task.assignee_id or "",
            len(task.attachments),
        ]
        for task in tasks
    ]
    return [SHEET_HEADER, *rows]


class GoogleService:
    """Thin client for the two Google endpoints the board uses."""

    def __init__(
        self,
        *,
        api_key: str | None,
        access_token: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._access_token = access_token
        self._client = http_client or httpx.AsyncClient(timeout=constants.API_TIMEOUT_SECONDS)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    def _params(self, **extra: str) -> dict[str, str]:
        params = dict(extra)
        if self._api_key:
            params["key"] = self._api_key
        return params

    async def upload_file(self, *, name: str, content_type: str, content: bytes) -> DriveFile:
        """Upload a file to Drive (multipart) and return its reference."""
        metadata = {"name": name, "mimeType": content_type}
        files = {
            "metadata": (None, json.dumps(metadata), "application/json"),
            "file": (name, content, content_type),
        }
        response = await self._client.post(
            DRIVE_UPLOAD_URL,
            params=self._params(uploadType="multipart", fields="id,webContentLink,webViewLink"),
            headers=self._headers(),
            files=files,
        )
        response.raise_for_status()
        return DriveFile.model_validate(response.json())

    async def sync_tasks(self, sheet_id: str, tasks: list[Task]) -> None:
        """Overwrite the sheet with a fresh snapshot of all tasks."""
        clear_url = f"{SHEETS_API_URL}/{sheet_id}/values/{constants.SHEET_CLEAR_RANGE}:clear"
        response = await self._client.post(clear_url, params=self._params(), headers=self._headers())
        response.raise_for_status()

        update_url = f"{SHEETS_API_URL}/{sheet_id}/values/{constants.SHEET_WRITE_RANGE}"
        response = await self._client.put(
            update_url,
            params=self._params(valueInputOption="RAW"),
            headers=self._headers(),
            json={"values": task_sheet_values(tasks)},
        )
        response.raise_for_status()

    async def sign_out(self) -> None:
        """Revoke the access token."""
        response = await self._client.post(REVOKE_URL, params={"token": self._access_token})
        response.raise_for_status()

    async def aclose(self) -> None:
        await self._client.aclose()


async def connect_google(
    context: "AppContext",
    *,
    api_key: str | None,
    access_token: str,
    sheet_id: str | None,
    http_client: httpx.AsyncClient | None = None,
) -> None:
    """Install the Google capability from credentials entered at runtime.

    Reconnecting replaces the previous client, which is closed without
    revoking its token.
    """
    if not access_token or not access_token.strip():
        msg = "Google access token is required"
        raise ValueError(msg)

    previous = context.google
    context.google = Available(GoogleService(api_key=api_key, access_token=access_token, http_client=http_client))
    context.sheet_id = sheet_id or None
    if is_available(previous):
        await previous.handle.aclose()
    logger.info("Google integration connected", extra={"sheet_configured": bool(sheet_id)})


async def disconnect_google(context: "AppContext", *, revoke: bool = True) -> None:
    """Drop the capability and close its client.

    With ``revoke`` the access token is signed out first, as on logout.
    Revocation failures are logged only.
    """
    capability = context.google
    context.google = Unavailable("signed out" if revoke else "session closed")
    if not is_available(capability):
        return

    try:
        if revoke:
            await capability.handle.sign_out()
    except httpx.HTTPError as e:
        logger.warning("Google sign-out failed", extra={"error": str(e)})
    finally:
        await capability.handle.aclose()


async def sync_to_sheets(context: "AppContext") -> bool:
    """Push the current task collection to the configured sheet.

    Returns:
        True when the snapshot was written
    """
    if not is_available(context.google) or not context.sheet_id:
        logger.info("Sheets sync skipped, integration not configured")
        return False

    with span("google_service.sync_to_sheets"):
        context.set_sync_indicator(SyncIndicator.SYNCING)
        try:
            await context.google.handle.sync_tasks(context.sheet_id, context.board.tasks)
        except Exception as e:
            logger.error("Sheets sync failed", extra={"error": str(e)})
            context.set_sync_indicator(SyncIndicator.ERROR)
            return False

        context.set_sync_indicator(SyncIndicator.SUCCESS)
        logger.info("Synced tasks to sheet", extra={"count": len(context.board.tasks)})
        return True
