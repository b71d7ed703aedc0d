"""Domain models and remote row schemas."""

from src.domain.member import Member
from src.domain.routine import Routine, RoutineLogEntry
from src.domain.rows import AttachmentRow, MemberRow, RoutineRow, TaskRow, generate_id
from src.domain.task import Attachment, AttachmentKind, Priority, Status, Task


__all__ = [
    "Attachment",
    "AttachmentKind",
    "AttachmentRow",
    "Member",
    "MemberRow",
    "Priority",
    "Routine",
    "RoutineLogEntry",
    "RoutineRow",
    "Status",
    "Task",
    "TaskRow",
    "generate_id",
]
