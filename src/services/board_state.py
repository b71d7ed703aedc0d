"""In-memory board collections mirrored to the remote store.

Every mutation follows the same contract: change the local collection first,
then hand the matching remote write to ``sync_write``. A failed write flips the
session offline and the local change stands.
"""

import asyncio
import logging
from datetime import date
from typing import TYPE_CHECKING

from src.core import db_client
from src.core.logging import span
from src.domain.member import Member
from src.domain.routine import Routine, RoutineLogEntry
from src.domain.rows import (
    attachment_to_row,
    member_from_row,
    member_to_row,
    routine_from_row,
    routine_to_row,
    task_from_row,
    task_to_row,
)
from src.domain.task import Attachment, Status, Task
from src.services.sync_service import SyncResult, sync_write


if TYPE_CHECKING:
    from src.core.app_context import AppContext


logger = logging.getLogger(__name__)

OFFLINE_NOTICE = "Offline mode: could not reach the database. Changes are kept on this device for this session."


class BoardState:
    """Tasks, members, routines and the routine start log for one session."""

    def __init__(self, context: "AppContext") -> None:
        self._context = context
        self.tasks: list[Task] = []
        self.members: list[Member] = []
        self.routines: list[Routine] = []
        self.routine_log: list[RoutineLogEntry] = []

    # Initial load

    async def load_all(self) -> bool:
        """Fetch members, tasks (with attachments) and routines.

        The three requests run independently; if any of them fails the whole
        load counts as failed, all collections stay empty and the session goes
        offline.

        Returns:
            True when all three collections were loaded
        """
        with span("board_state.load_all"):
            results = await asyncio.gather(
                db_client.list_records(collection="members"),
                db_client.list_records(collection="tasks", select="*,attachments(*)"),
                db_client.list_records(collection="routines"),
                return_exceptions=True,
            )

            failures = [r for r in results if isinstance(r, BaseException)]
            if not failures:
                member_rows, task_rows, routine_rows = results
                try:
                    members = [member_from_row(row) for row in member_rows]
                    tasks = [task_from_row(row) for row in task_rows]
                    routines = [routine_from_row(row) for row in routine_rows]
                except ValueError as e:
                    failures.append(e)

            if failures:
                self.tasks, self.members, self.routines = [], [], []
                logger.warning(
                    "Initial load failed, entering offline mode",
                    extra={"errors": [str(f) for f in failures]},
                )
                self._context.mark_offline(OFFLINE_NOTICE)
                return False

            self.members, self.tasks, self.routines = members, tasks, routines
            logger.info(
                "Initial load complete",
                extra={"members": len(members), "tasks": len(tasks), "routines": len(routines)},
            )
            return True

    # Lookups

    def get_task(self, task_id: str) -> Task:
        for task in self.tasks:
            if task.id == task_id:
                return task
        msg = f"Task not found: {task_id}"
        raise KeyError(msg)

    def get_member(self, member_id: str) -> Member:
        for member in self.members:
            if member.id == member_id:
                return member
        msg = f"Member not found: {member_id}"
        raise KeyError(msg)

    def get_member_by_phone(self, phone: str) -> Member | None:
        return next((m for m in self.members if m.phone_number == phone), None)

    def get_routine(self, routine_id: str) -> Routine:
        for routine in self.routines:
            if routine.id == routine_id:
                return routine
        msg = f"Routine not found: {routine_id}"
        raise KeyError(msg)

    def _replace_task(self, updated: Task) -> None:
        self.tasks = [updated if t.id == updated.id else t for t in self.tasks]

    # Task mutations

    async def add_task(self, task: Task) -> SyncResult:
        self.tasks = [*self.tasks, task]

        async def write() -> None:
            row = task_to_row(task)
            await db_client.create_record(collection="tasks", data=row.insert_payload())
            for attachment_row in row.attachments:
                await db_client.create_record(collection="attachments", data=attachment_row.model_dump(mode="json"))

        return await sync_write(self._context, operation="tasks.insert", write=write)

    async def update_task_status(self, task_id: str, status: Status, assignee_id: str | None) -> SyncResult:
        """Set status and assignee, then overwrite the remote row with every task field."""
        updated = self.get_task(task_id).model_copy(update={"status": status, "assignee_id": assignee_id})
        self._replace_task(updated)

        async def write() -> None:
            payload = task_to_row(updated).insert_payload()
            payload.pop("id")
            await db_client.update_record(collection="tasks", record_id=task_id, data=payload)

        return await sync_write(self._context, operation="tasks.update", write=write)

    async def add_attachment(self, task_id: str, attachment: Attachment) -> SyncResult:
        task = self.get_task(task_id)
        self._replace_task(task.model_copy(update={"attachments": [*task.attachments, attachment]}))

        async def write() -> None:
            row = attachment_to_row(attachment, task_id=task_id)
            await db_client.create_record(collection="attachments", data=row.model_dump(mode="json"))

        return await sync_write(self._context, operation="attachments.insert", write=write)

    # Member mutations

    async def add_member(self, member: Member) -> SyncResult:
        self.members = [*self.members, member]

        async def write() -> None:
            await db_client.create_record(collection="members", data=member_to_row(member).model_dump(mode="json"))

        return await sync_write(self._context, operation="members.insert", write=write)

    def ensure_member(self, member: Member) -> None:
        """Add a member locally if missing (restored sessions), without a remote write."""
        if not any(m.id == member.id for m in self.members):
            self.members = [*self.members, member]

    async def remove_member(self, member_id: str) -> SyncResult:
        """Drop a member. Tasks keep whatever assignee_id they had."""
        self.get_member(member_id)
        self.members = [m for m in self.members if m.id != member_id]

        async def write() -> None:
            await db_client.delete_record(collection="members", record_id=member_id)

        return await sync_write(self._context, operation="members.delete", write=write)

    # Routine mutations

    async def add_routine(self, routine: Routine) -> SyncResult:
        self.routines = [*self.routines, routine]

        async def write() -> None:
            await db_client.create_record(collection="routines", data=routine_to_row(routine).model_dump(mode="json"))

        return await sync_write(self._context, operation="routines.insert", write=write)

    async def update_routine(self, routine: Routine) -> SyncResult:
        self.get_routine(routine.id)
        self.routines = [routine if r.id == routine.id else r for r in self.routines]

        async def write() -> None:
            payload = routine_to_row(routine).model_dump(mode="json")
            payload.pop("id")
            await db_client.update_record(collection="routines", record_id=routine.id, data=payload)

        return await sync_write(self._context, operation="routines.update", write=write)

    async def delete_routine(self, routine_id: str) -> SyncResult:
        self.get_routine(routine_id)
        self.routines = [r for r in self.routines if r.id != routine_id]

        async def write() -> None:
            await db_client.delete_record(collection="routines", record_id=routine_id)

        return await sync_write(self._context, operation="routines.delete", write=write)

    # Routine log (session only, never persisted)

    def log_routine_start(self, routine_id: str, day: date) -> None:
        self.routine_log = [*self.routine_log, RoutineLogEntry(routine_id=routine_id, day=day)]
