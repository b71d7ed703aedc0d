"""Remote row schemas and the mapping between rows and domain models.

The remote store names columns in snake_case (``due_date``, ``assignee_id``,
``phone_number``) while the local serialized form uses camelCase aliases. Every
conversion between the two goes through the functions below so the boundary is
checked by schema in both directions.
"""

import secrets
import string
from typing import Any

from pydantic import BaseModel, Field

from src.domain.member import Member
from src.domain.routine import Routine
from src.domain.task import Attachment, AttachmentKind, Priority, Status, Task


ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 9


def generate_id() -> str:
    """Return a short random opaque identifier."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


class MemberRow(BaseModel):
    """Row of the ``members`` table."""

    id: str
    name: str
    role: str
    phone_number: str
    is_admin: bool = False
    avatar: str | None = None


class AttachmentRow(BaseModel):
    """Row of the ``attachments`` table."""

    id: str
    task_id: str
    type: AttachmentKind
    url: str
    name: str
    created_at: str


class TaskRow(BaseModel):
    """Row of the ``tasks`` table, optionally with embedded attachment rows."""

    id: str
    title: str
    description: str | None = None
    priority: Priority
    status: Status
    due_date: str
    assignee_id: str | None = None
    attachments: list[AttachmentRow] = Field(default_factory=list)

    def insert_payload(self) -> dict[str, Any]:
        """Column values for an insert (embedded attachments are a separate table)."""
        return self.model_dump(mode="json", exclude={"attachments"})


class RoutineRow(BaseModel):
    """Row of the ``routines`` table."""

    id: str
    title: str
    description: str | None = None
    default_priority: Priority


def member_to_row(member: Member) -> MemberRow:
    return MemberRow(
        id=member.id,
        name=member.name,
        role=member.role,
        phone_number=member.phone_number,
        is_admin=member.is_admin,
        avatar=member.avatar,
    )


def member_from_row(row: MemberRow | dict[str, Any]) -> Member:
    row = MemberRow.model_validate(row)
    return Member(
        id=row.id,
        name=row.name,
        role=row.role,
        phone_number=row.phone_number,
        is_admin=row.is_admin,
        avatar=row.avatar or "",
    )


def attachment_to_row(attachment: Attachment, *, task_id: str) -> AttachmentRow:
    return AttachmentRow(
        id=attachment.id,
        task_id=task_id,
        type=attachment.kind,
        url=attachment.url,
        name=attachment.name,
        created_at=attachment.created_at.isoformat(),
    )


def attachment_from_row(row: AttachmentRow | dict[str, Any]) -> Attachment:
    row = AttachmentRow.model_validate(row)
    return Attachment(
        id=row.id,
        kind=row.type,
        url=row.url,
        name=row.name,
        created_at=row.created_at,
    )


def task_to_row(task: Task) -> TaskRow:
    return TaskRow(
        id=task.id,
        title=task.title,
        description=task.description,
        priority=task.priority,
        status=task.status,
        due_date=task.due_date.isoformat(),
        assignee_id=task.assignee_id,
        attachments=[attachment_to_row(a, task_id=task.id) for a in task.attachments],
    )


def task_from_row(row: TaskRow | dict[str, Any]) -> Task:
    """Build a Task from a row; embedded attachments keep their capture order."""
    row = TaskRow.model_validate(row)
    attachments = sorted(
        (attachment_from_row(a) for a in row.attachments),
        key=lambda a: a.created_at,
    )
    return Task(
        id=row.id,
        title=row.title,
        description=row.description or "",
        priority=row.priority,
        status=row.status,
        due_date=row.due_date,
        assignee_id=row.assignee_id,
        attachments=attachments,
    )


def routine_to_row(routine: Routine) -> RoutineRow:
    return RoutineRow(
        id=routine.id,
        title=routine.title,
        description=routine.description,
        default_priority=routine.default_priority,
    )


def routine_from_row(row: RoutineRow | dict[str, Any]) -> Routine:
    row = RoutineRow.model_validate(row)
    return Routine(
        id=row.id,
        title=row.title,
        description=row.description or "",
        default_priority=row.default_priority,
    )
