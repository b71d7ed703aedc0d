"""Routine template domain models."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.task import Priority


class Routine(BaseModel):
    """Reusable task template stamped out as a new task on demand."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Opaque routine ID")
    title: str = Field(..., description="Title copied onto generated tasks")
    description: str = Field(default="", description="Description copied onto generated tasks")
    default_priority: Priority = Field(default=Priority.NORMAL, description="Priority of generated tasks")


class RoutineLogEntry(BaseModel):
    """Record that a routine was started on a calendar day (session only)."""

    model_config = ConfigDict(frozen=True)

    routine_id: str
    day: date
