"""Overdue, daily and monthly projections over the task collection.

All functions are pure and recomputed on demand; nothing is cached.
"""

import calendar
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.domain.task import Status, Task, to_local_date


class DayCell(BaseModel):
    """One day of the month grid with the tasks due on it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    day: date
    tasks: list[Task]


class MonthGrid(BaseModel):
    """Month view: leading blank cells (Sunday = 0) followed by one cell per day."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    year: int
    month: int
    first_weekday: int
    days: list[DayCell]


def is_same_day(a: date | datetime | str, b: date | datetime | str) -> bool:
    """Compare local calendar dates, ignoring any time-of-day component."""
    return to_local_date(a) == to_local_date(b)


def overdue_tasks(tasks: list[Task], today: date) -> list[Task]:
    """Tasks not yet done whose due date lies strictly before today."""
    return [t for t in tasks if t.status != Status.DONE and t.due_date < today]


def tasks_on_day(tasks: list[Task], day: date | datetime | str) -> list[Task]:
    return [t for t in tasks if is_same_day(t.due_date, day)]


def todays_tasks(tasks: list[Task], today: date, status: Status | None = None) -> list[Task]:
    """Tasks due today, optionally narrowed to one board column."""
    due_today = tasks_on_day(tasks, today)
    if status is None:
        return due_today
    return [t for t in due_today if t.status == status]


def month_grid(tasks: list[Task], year: int, month: int) -> MonthGrid:
    """Build the calendar grid for a month.

    Args:
        tasks: Full task collection
        year: Four digit year
        month: Month number, 1 to 12

    Returns:
        MonthGrid with the weekday offset of the 1st and every day's tasks

    Raises:
        ValueError: If month is outside 1..12
    """
    if not 1 <= month <= 12:
        msg = f"Invalid month: {month}"
        raise ValueError(msg)

    # calendar.monthrange counts Monday as 0
    monday_based, day_count = calendar.monthrange(year, month)
    first_weekday = (monday_based + 1) % 7

    days = []
    for day_number in range(1, day_count + 1):
        day = date(year, month, day_number)
        days.append(DayCell(day=day, tasks=tasks_on_day(tasks, day)))

    return MonthGrid(year=year, month=month, first_weekday=first_weekday, days=days)


def _parse_month(month: str) -> tuple[int, int]:
    try:
        year_part, month_part = month.split("-")
        year, month_number = int(year_part), int(month_part)
    except ValueError as e:
        msg = f"Month must be formatted as YYYY-MM, got {month!r}"
        raise ValueError(msg) from e
    if not 1 <= month_number <= 12:
        msg = f"Invalid month: {month!r}"
        raise ValueError(msg)
    return year, month_number


def completed_history(tasks: list[Task], day: date | None = None, month: str | None = None) -> list[Task]:
    """Done tasks for a chosen day, or for a ``YYYY-MM`` month when no day is given.

    With neither filter every done task is returned.
    """
    done = [t for t in tasks if t.status == Status.DONE]
    if day is not None:
        return [t for t in done if t.due_date == day]
    if month is not None:
        year, month_number = _parse_month(month)
        return [t for t in done if t.due_date.year == year and t.due_date.month == month_number]
    return done
