"""Task domain models and enums."""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Priority(StrEnum):
    """Task urgency."""

    URGENT = "URGENT"
    MEDIUM = "MEDIUM"
    NORMAL = "NORMAL"


class Status(StrEnum):
    """Kanban column a task sits in."""

    TODO = "TODO"
    DOING = "DOING"
    DONE = "DONE"


class AttachmentKind(StrEnum):
    """Media type of an attachment."""

    IMAGE = "image"
    VIDEO = "video"


def to_local_date(value: date | datetime | str) -> date:
    """Reduce a date, datetime or ISO string to its local calendar date.

    Aware datetimes are converted to local time first so a task due late in the
    evening stays on the day the user sees on the wall clock.
    """
    if isinstance(value, str):
        text = value.strip()
        if "T" in text or " " in text:
            value = datetime.fromisoformat(text.replace("Z", "+00:00"))
        else:
            return date.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


class Attachment(BaseModel):
    """Photo or video attached to a task. Immutable once created."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., description="Opaque attachment ID")
    kind: AttachmentKind = Field(..., alias="type", description="image or video")
    url: str = Field(..., description="Local file reference or uploaded-file reference")
    name: str = Field(..., description="Display name (original filename)")
    created_at: datetime = Field(..., description="When the attachment was captured")


class Task(BaseModel):
    """Task on the garden board."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Opaque task ID")
    title: str = Field(..., description="Task title (e.g., 'Water plants')")
    description: str = Field(default="", description="Detailed task description")
    priority: Priority = Field(default=Priority.NORMAL, description="Task urgency")
    status: Status = Field(default=Status.TODO, description="Current kanban column")
    due_date: date = Field(..., description="Calendar date the task is due (no time component)")
    assignee_id: str | None = Field(default=None, description="Member responsible for the task")
    attachments: list[Attachment] = Field(default_factory=list, description="Media in capture order")

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, v: date | datetime | str) -> date:
        """Accept ISO strings and datetimes, keeping only the local calendar date."""
        return to_local_date(v)

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: str | None) -> str:
        """Treat a missing description as empty."""
        return v or ""
