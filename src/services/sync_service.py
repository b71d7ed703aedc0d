"""Best-effort mirroring of local mutations to the remote store.

Local state is always updated first by the caller. This module only decides
whether to attempt the remote write and records the outcome; it never rolls
the local change back and never retries.
"""

import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from src.core.errors import classify_error_with_response
from src.core.logging import log_with_context


if TYPE_CHECKING:
    from src.core.app_context import AppContext


logger = logging.getLogger(__name__)


class SyncStatus(StrEnum):
    """Outcome of mirroring one mutation."""

    SYNCED = "synced"
    OFFLINE = "offline"


class SyncResult(BaseModel):
    """Result of a mutation's remote write."""

    status: SyncStatus = Field(..., description="synced, or degraded to offline")
    attempted: bool = Field(..., description="Whether a remote call was issued")
    error: str | None = Field(default=None, description="Remote failure text, if any")

    @property
    def synced(self) -> bool:
        return self.status == SyncStatus.SYNCED

    @classmethod
    def ok(cls) -> "SyncResult":
        return cls(status=SyncStatus.SYNCED, attempted=True)

    @classmethod
    def skipped(cls) -> "SyncResult":
        return cls(status=SyncStatus.OFFLINE, attempted=False)

    @classmethod
    def failed(cls, error: str) -> "SyncResult":
        return cls(status=SyncStatus.OFFLINE, attempted=True, error=error)


async def sync_write(
    context: "AppContext",
    *,
    operation: str,
    write: Callable[[], Awaitable[Any]],
) -> SyncResult:
    """Run ``write`` unless the session is offline; any failure makes it offline.

    Args:
        context: Application context holding the sticky offline flag
        operation: Name used in logs (e.g. "tasks.update_status")
        write: Zero-argument coroutine factory issuing the remote call

    Returns:
        SyncResult describing what happened
    """
    if context.offline:
        logger.debug("Offline, skipping remote write", extra={"operation": operation})
        return SyncResult.skipped()

    try:
        await write()
    except Exception as e:
        error = classify_error_with_response(e)
        log_with_context(
            logger,
            "warning",
            "Remote write failed, switching to offline mode",
            operation=operation,
            category=error.category.value,
            severity=error.severity.value,
            error=str(e),
        )
        context.mark_offline(error.message)
        return SyncResult.failed(str(e))

    return SyncResult.ok()
