"""Photo and video capture for tasks."""

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from src.core.logging import span
from src.domain.rows import generate_id
from src.domain.task import Attachment, AttachmentKind
from src.services.capabilities import is_available
from src.services.google_service import SyncIndicator
from src.services.sync_service import SyncResult


if TYPE_CHECKING:
    from src.core.app_context import AppContext


logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "attachment"


def classify_kind(content_type: str | None) -> AttachmentKind:
    """``video/*`` is a video, anything else is treated as an image."""
    if content_type and content_type.lower().startswith("video/"):
        return AttachmentKind.VIDEO
    return AttachmentKind.IMAGE


def _store_locally(media_dir: Path, attachment_id: str, filename: str, content: bytes) -> Path:
    safe_name = Path(filename).name or DEFAULT_FILENAME
    path = media_dir / f"{attachment_id}_{safe_name}"
    path.write_bytes(content)
    return path


async def _upload_to_drive(context: "AppContext", *, name: str, content_type: str, content: bytes) -> None:
    """Best-effort copy to Drive. The local file stays the displayed reference."""
    if not is_available(context.google):
        return

    try:
        drive_file = await context.google.handle.upload_file(name=name, content_type=content_type, content=content)
    except Exception as e:
        logger.error("Drive upload failed", extra={"file_name": name, "error": str(e)})
        context.set_sync_indicator(SyncIndicator.ERROR)
        return

    logger.info("Uploaded %s to Drive as %s", name, drive_file.id)


async def attach_file(
    context: "AppContext",
    task_id: str,
    *,
    filename: str,
    content_type: str | None,
    content: bytes,
) -> tuple[Attachment, SyncResult]:
    """Attach captured media to a task.

    Args:
        context: Application context
        task_id: Task receiving the attachment
        filename: Original file name, used as the display name
        content_type: Declared MIME type
        content: Raw file bytes

    Returns:
        Tuple of (attachment, sync result)

    Raises:
        LoginRequiredError: If nobody is logged in
        KeyError: If the task does not exist
    """
    with span("attachment_service.attach_file"):
        context.require_user()
        context.board.get_task(task_id)

        if context.media_dir is None:
            msg = "Application context is not initialized"
            raise RuntimeError(msg)

        attachment_id = generate_id()
        display_name = filename or DEFAULT_FILENAME
        local_path = _store_locally(context.media_dir, attachment_id, display_name, content)

        await _upload_to_drive(
            context,
            name=display_name,
            content_type=content_type or "application/octet-stream",
            content=content,
        )

        attachment = Attachment(
            id=attachment_id,
            kind=classify_kind(content_type),
            url=local_path.as_uri(),
            name=display_name,
            created_at=datetime.now().astimezone(),
        )
        result = await context.board.add_attachment(task_id, attachment)
        logger.info("Attached %s (%s) to task %s", display_name, attachment.kind, task_id)
        return attachment, result
