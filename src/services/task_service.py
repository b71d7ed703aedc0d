"""Task creation and the status machine."""

import logging
from datetime import date
from typing import TYPE_CHECKING

from src.core.logging import log_with_user_context, span
from src.domain.member import Member
from src.domain.rows import generate_id
from src.domain.task import Priority, Status, Task
from src.services import google_service
from src.services.capabilities import is_available
from src.services.sync_service import SyncResult


if TYPE_CHECKING:
    from src.core.app_context import AppContext


logger = logging.getLogger(__name__)

# DONE -> TODO is the explicit "reopen"; TODO -> DONE must pass through DOING
ALLOWED_TRANSITIONS: dict[Status, frozenset[Status]] = {
    Status.TODO: frozenset({Status.DOING}),
    Status.DOING: frozenset({Status.TODO, Status.DONE}),
    Status.DONE: frozenset({Status.DOING, Status.TODO}),
}


def can_transition(current: Status, new: Status) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


def new_task(
    *,
    title: str,
    description: str = "",
    priority: Priority = Priority.NORMAL,
    due_date: date,
    assignee_id: str | None = None,
) -> Task:
    """Build a fresh TODO task with no attachments.

    Raises:
        ValueError: If the title is blank
    """
    title = title.strip()
    if not title:
        msg = "Task title is required"
        raise ValueError(msg)

    return Task(
        id=generate_id(),
        title=title,
        description=description,
        priority=priority,
        status=Status.TODO,
        due_date=due_date,
        assignee_id=assignee_id or None,
        attachments=[],
    )


async def add_task(context: "AppContext", task: Task) -> SyncResult:
    """Insert an already built task.

    When a sheet is configured its snapshot is refreshed in the background.
    """
    result = await context.board.add_task(task)

    if is_available(context.google) and context.sheet_id:
        context.run_in_background(google_service.sync_to_sheets(context))

    return result


async def create_task(
    context: "AppContext",
    *,
    title: str,
    description: str = "",
    priority: Priority = Priority.NORMAL,
    due_date: date,
    assignee_id: str | None = None,
) -> tuple[Task, SyncResult]:
    """Create a task on behalf of the current user.

    Args:
        context: Application context
        title: Task title
        description: Free text description
        priority: Task priority
        due_date: Local calendar date the task is due
        assignee_id: Optional member to assign up front

    Returns:
        Tuple of (created task, sync result)

    Raises:
        LoginRequiredError: If nobody is logged in
        ValueError: If the title is blank
    """
    with span("task_service.create_task"):
        context.require_user()

        task = new_task(
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            assignee_id=assignee_id,
        )
        result = await add_task(context, task)
        logger.info("Created task %s (%s)", task.id, task.title)
        return task, result


async def move_task(context: "AppContext", task_id: str, new_status: Status) -> tuple[Task, SyncResult]:
    """Move a task to another column.

    Entering DOING without an assignee assigns the acting user. An existing
    assignee is never overwritten.

    Returns:
        Tuple of (updated task, sync result)

    Raises:
        LoginRequiredError: If nobody is logged in
        KeyError: If the task does not exist
        ValueError: If the transition is not allowed
    """
    with span("task_service.move_task"):
        user = context.require_user()
        task = context.board.get_task(task_id)

        # Guard: Validate transition
        if not can_transition(task.status, new_status):
            msg = f"Cannot move task from {task.status} to {new_status}"
            logger.warning(msg)
            raise ValueError(msg)

        assignee_id = task.assignee_id
        if new_status == Status.DOING and not assignee_id:
            assignee_id = user.id
            log_with_user_context(logger, "info", "Auto-assigned task", user_id=user.id, task_id=task_id)

        result = await context.board.update_task_status(task_id, new_status, assignee_id)
        logger.info("Moved task %s: %s -> %s", task_id, task.status, new_status)
        return context.board.get_task(task_id), result


def format_due_date(day: date) -> str:
    return f"{day:%b} {day.day}"


def task_readout_text(task: Task, members: list[Member]) -> str:
    """Sentence read aloud for a task's details."""
    assignee = next((m for m in members if m.id == task.assignee_id), None)
    assignee_name = assignee.name if assignee else "Unassigned"
    description = task.description or "No tasks"
    return (
        f"Task Name: {task.title}. Description: {description}. "
        f"Assign To {assignee_name}. Due Date {format_due_date(task.due_date)}."
    )
