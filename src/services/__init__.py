from src.services import (
    attachment_service,
    auth_service,
    calendar_service,
    google_service,
    routine_service,
    task_service,
    team_service,
)


__all__ = [
    "attachment_service",
    "auth_service",
    "calendar_service",
    "google_service",
    "routine_service",
    "task_service",
    "team_service",
]
