"""Routine templates: admin management and daily activation."""

import logging
from datetime import date
from typing import TYPE_CHECKING

from src.core.logging import span
from src.domain.member import Member
from src.domain.routine import Routine
from src.domain.rows import generate_id
from src.domain.task import Priority, Status, Task
from src.services import task_service
from src.services.sync_service import SyncResult


if TYPE_CHECKING:
    from src.core.app_context import AppContext
    from src.services.board_state import BoardState


logger = logging.getLogger(__name__)


def today_local() -> date:
    """Today's date on the local clock."""
    return date.today()


def _require_admin(context: "AppContext") -> Member:
    user = context.require_user()
    if not user.is_admin:
        msg = "Only an admin can manage routines"
        logger.warning("%s (user %s)", msg, user.id)
        raise PermissionError(msg)
    return user


def _clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        msg = "Routine title is required"
        raise ValueError(msg)
    return title


async def create_routine(
    context: "AppContext",
    *,
    title: str,
    description: str = "",
    default_priority: Priority = Priority.NORMAL,
) -> tuple[Routine, SyncResult]:
    """Create a routine template (admin only).

    Raises:
        PermissionError: If the current user is not an admin
        ValueError: If the title is blank
    """
    with span("routine_service.create_routine"):
        _require_admin(context)
        routine = Routine(
            id=generate_id(),
            title=_clean_title(title),
            description=description,
            default_priority=default_priority,
        )
        result = await context.board.add_routine(routine)
        logger.info("Created routine %s (%s)", routine.id, routine.title)
        return routine, result


async def edit_routine(
    context: "AppContext",
    routine_id: str,
    *,
    title: str,
    description: str = "",
    default_priority: Priority = Priority.NORMAL,
) -> tuple[Routine, SyncResult]:
    """Replace a routine's fields (admin only).

    Raises:
        PermissionError: If the current user is not an admin
        KeyError: If the routine does not exist
        ValueError: If the title is blank
    """
    with span("routine_service.edit_routine"):
        _require_admin(context)
        context.board.get_routine(routine_id)
        routine = Routine(
            id=routine_id,
            title=_clean_title(title),
            description=description,
            default_priority=default_priority,
        )
        result = await context.board.update_routine(routine)
        logger.info("Updated routine %s", routine_id)
        return routine, result


async def delete_routine(context: "AppContext", routine_id: str) -> SyncResult:
    with span("routine_service.delete_routine"):
        _require_admin(context)
        result = await context.board.delete_routine(routine_id)
        logger.info("Deleted routine %s", routine_id)
        return result


async def activate_routine(
    context: "AppContext",
    routine_id: str,
    today: date | None = None,
) -> tuple[Task, SyncResult]:
    """Stamp out today's task from a routine and log the activation.

    The task goes through the normal creation path. Activating the same routine
    twice in one day is allowed; the log only hides it from the available list.

    Args:
        context: Application context
        routine_id: Routine to activate
        today: Local date to stamp, defaults to today_local()

    Returns:
        Tuple of (created task, sync result)

    Raises:
        LoginRequiredError: If nobody is logged in
        KeyError: If the routine does not exist
    """
    with span("routine_service.activate_routine"):
        context.require_user()
        routine = context.board.get_routine(routine_id)
        day = today or today_local()

        task = Task(
            id=generate_id(),
            title=routine.title,
            description=routine.description,
            priority=routine.default_priority,
            status=Status.TODO,
            due_date=day,
            assignee_id=None,
            attachments=[],
        )
        result = await task_service.add_task(context, task)
        context.board.log_routine_start(routine_id, day)

        logger.info("Activated routine %s as task %s for %s", routine_id, task.id, day.isoformat())
        return task, result


def hidden_routine_ids(board: "BoardState", today: date) -> set[str]:
    """Routines already started today."""
    return {entry.routine_id for entry in board.routine_log if entry.day == today}


def available_routines(board: "BoardState", today: date) -> list[Routine]:
    hidden = hidden_routine_ids(board, today)
    return [r for r in board.routines if r.id not in hidden]
