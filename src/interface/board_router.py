"""HTTP interface for the garden board.

Each endpoint dispatches one intent to the service layer. Business-rule
violations come back as 400/401/403/404; remote sync failures never do, they
show up in the returned SyncResult and the offline flag.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.core.app_context import AppContext
from src.core.config import constants
from src.core.errors import LoginRequiredError
from src.domain.member import Member
from src.domain.routine import Routine
from src.domain.task import Attachment, Priority, Status, Task
from src.services import (
    attachment_service,
    auth_service,
    calendar_service,
    google_service,
    routine_service,
    task_service,
    team_service,
)
from src.services.capabilities import is_available
from src.services.speech_service import SpeechOutcome
from src.services.sync_service import SyncResult


logger = logging.getLogger(__name__)

router = APIRouter(tags=["board"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests


class LoginRequest(_CamelModel):
    phone: str
    name: str = ""


class TaskCreateRequest(_CamelModel):
    title: str
    description: str = ""
    priority: Priority = Priority.NORMAL
    due_date: date
    assignee_id: str | None = None


class MoveRequest(_CamelModel):
    status: Status


class MemberCreateRequest(_CamelModel):
    name: str
    phone: str
    role: str = constants.ROLE_GARDENER


class RoutineRequest(_CamelModel):
    title: str
    description: str = ""
    default_priority: Priority = Priority.NORMAL


class GoogleConnectRequest(_CamelModel):
    access_token: str
    api_key: str | None = None
    sheet_id: str | None = None


# Responses


class StatusResponse(_CamelModel):
    offline: bool
    offline_notice: str | None
    sync_indicator: google_service.SyncIndicator
    google_connected: bool
    sheet_configured: bool
    speech_available: bool


class SessionResponse(_CamelModel):
    user: Member | None
    sync: SyncResult | None = None


class BoardResponse(_CamelModel):
    tasks: list[Task]
    members: list[Member]
    routines: list[Routine]
    available_routines: list[Routine]
    overdue: list[Task]
    offline: bool


class TaskResponse(_CamelModel):
    task: Task
    sync: SyncResult


class AttachmentResponse(_CamelModel):
    attachment: Attachment
    sync: SyncResult


class MemberResponse(_CamelModel):
    member: Member
    sync: SyncResult


class RoutineResponse(_CamelModel):
    routine: Routine
    sync: SyncResult


class SyncResponse(_CamelModel):
    sync: SyncResult


class ReadoutResponse(_CamelModel):
    text: str
    speaking: bool


class SheetSyncResponse(_CamelModel):
    synced: bool
    sync_indicator: google_service.SyncIndicator


def get_context(request: Request) -> AppContext:
    """The session context created by the application lifespan."""
    return request.app.state.context


@contextmanager
def _service_errors() -> Iterator[None]:
    """Translate service-layer exceptions into HTTP errors."""
    try:
        yield
    except LoginRequiredError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except KeyError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.args[0] if e.args else "Not found") from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


# Status and session


@router.get("/status", response_model=StatusResponse)
async def get_status(context: AppContext = Depends(get_context)) -> StatusResponse:
    return StatusResponse(
        offline=context.offline,
        offline_notice=context.offline_notice,
        sync_indicator=context.sync_indicator(),
        google_connected=is_available(context.google),
        sheet_configured=bool(context.sheet_id),
        speech_available=context.speech.available,
    )


@router.post("/session/login", response_model=SessionResponse)
async def login(body: LoginRequest, context: AppContext = Depends(get_context)) -> SessionResponse:
    with _service_errors():
        member, result = await auth_service.login(context, body.phone, body.name)
    return SessionResponse(user=member, sync=result)


@router.post("/session/logout", response_model=SessionResponse)
async def logout(context: AppContext = Depends(get_context)) -> SessionResponse:
    await auth_service.logout(context)
    return SessionResponse(user=None)


@router.get("/session", response_model=SessionResponse)
async def get_session(context: AppContext = Depends(get_context)) -> SessionResponse:
    return SessionResponse(user=context.current_user)


# Board


@router.get("/board", response_model=BoardResponse)
async def get_board(context: AppContext = Depends(get_context)) -> BoardResponse:
    with _service_errors():
        context.require_user()
    today = routine_service.today_local()
    board = context.board
    return BoardResponse(
        tasks=board.tasks,
        members=board.members,
        routines=board.routines,
        available_routines=routine_service.available_routines(board, today),
        overdue=calendar_service.overdue_tasks(board.tasks, today),
        offline=context.offline,
    )


# Tasks


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(body: TaskCreateRequest, context: AppContext = Depends(get_context)) -> TaskResponse:
    with _service_errors():
        task, result = await task_service.create_task(
            context,
            title=body.title,
            description=body.description,
            priority=body.priority,
            due_date=body.due_date,
            assignee_id=body.assignee_id,
        )
    return TaskResponse(task=task, sync=result)


@router.post("/tasks/{task_id}/move", response_model=TaskResponse)
async def move_task(task_id: str, body: MoveRequest, context: AppContext = Depends(get_context)) -> TaskResponse:
    with _service_errors():
        task, result = await task_service.move_task(context, task_id, body.status)
    return TaskResponse(task=task, sync=result)


@router.post("/tasks/{task_id}/attachments", response_model=AttachmentResponse, status_code=status.HTTP_201_CREATED)
async def upload_attachment(
    task_id: str,
    file: UploadFile = File(...),
    context: AppContext = Depends(get_context),
) -> AttachmentResponse:
    content = await file.read()
    with _service_errors():
        attachment, result = await attachment_service.attach_file(
            context,
            task_id,
            filename=file.filename or "",
            content_type=file.content_type,
            content=content,
        )
    return AttachmentResponse(attachment=attachment, sync=result)


@router.post("/tasks/{task_id}/readout", response_model=ReadoutResponse)
async def read_task_aloud(task_id: str, context: AppContext = Depends(get_context)) -> ReadoutResponse:
    with _service_errors():
        context.require_user()
        task = context.board.get_task(task_id)

    text = task_service.task_readout_text(task, context.board.members)

    def on_complete(outcome: SpeechOutcome) -> None:
        logger.info("Readout finished", extra={"task_id": task_id, "outcome": outcome.value})

    context.speech.speak(text, on_complete)
    return ReadoutResponse(text=text, speaking=context.speech.is_active)


@router.post("/speech/stop", status_code=status.HTTP_204_NO_CONTENT)
async def stop_speech(context: AppContext = Depends(get_context)) -> None:
    context.speech.stop()


@router.get("/tasks/today", response_model=list[Task])
async def get_todays_tasks(
    status_filter: Status | None = Query(default=None, alias="status"),
    context: AppContext = Depends(get_context),
) -> list[Task]:
    with _service_errors():
        context.require_user()
    return calendar_service.todays_tasks(context.board.tasks, routine_service.today_local(), status_filter)


@router.get("/tasks/overdue", response_model=list[Task])
async def get_overdue_tasks(context: AppContext = Depends(get_context)) -> list[Task]:
    with _service_errors():
        context.require_user()
    return calendar_service.overdue_tasks(context.board.tasks, routine_service.today_local())


@router.get("/tasks/history", response_model=list[Task])
async def get_history(
    day: date | None = None,
    month: str | None = None,
    context: AppContext = Depends(get_context),
) -> list[Task]:
    with _service_errors():
        context.require_user()
        return calendar_service.completed_history(context.board.tasks, day=day, month=month)


@router.get("/calendar/{year}/{month}", response_model=calendar_service.MonthGrid)
async def get_month(year: int, month: int, context: AppContext = Depends(get_context)) -> calendar_service.MonthGrid:
    with _service_errors():
        context.require_user()
        return calendar_service.month_grid(context.board.tasks, year, month)


# Team


@router.post("/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member(body: MemberCreateRequest, context: AppContext = Depends(get_context)) -> MemberResponse:
    with _service_errors():
        member, result = await team_service.add_member(context, name=body.name, phone=body.phone, role=body.role)
    return MemberResponse(member=member, sync=result)


@router.delete("/members/{member_id}", response_model=SyncResponse)
async def remove_member(member_id: str, context: AppContext = Depends(get_context)) -> SyncResponse:
    with _service_errors():
        result = await team_service.remove_member(context, member_id)
    return SyncResponse(sync=result)


# Routines


@router.get("/routines/available", response_model=list[Routine])
async def get_available_routines(context: AppContext = Depends(get_context)) -> list[Routine]:
    with _service_errors():
        context.require_user()
    return routine_service.available_routines(context.board, routine_service.today_local())


@router.post("/routines", response_model=RoutineResponse, status_code=status.HTTP_201_CREATED)
async def create_routine(body: RoutineRequest, context: AppContext = Depends(get_context)) -> RoutineResponse:
    with _service_errors():
        routine, result = await routine_service.create_routine(
            context,
            title=body.title,
            description=body.description,
            default_priority=body.default_priority,
        )
    return RoutineResponse(routine=routine, sync=result)


@router.put("/routines/{routine_id}", response_model=RoutineResponse)
async def edit_routine(
    routine_id: str,
    body: RoutineRequest,
    context: AppContext = Depends(get_context),
) -> RoutineResponse:
    with _service_errors():
        routine, result = await routine_service.edit_routine(
            context,
            routine_id,
            title=body.title,
            description=body.description,
            default_priority=body.default_priority,
        )
    return RoutineResponse(routine=routine, sync=result)


@router.delete("/routines/{routine_id}", response_model=SyncResponse)
async def delete_routine(routine_id: str, context: AppContext = Depends(get_context)) -> SyncResponse:
    with _service_errors():
        result = await routine_service.delete_routine(context, routine_id)
    return SyncResponse(sync=result)


@router.post("/routines/{routine_id}/activate", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def activate_routine(routine_id: str, context: AppContext = Depends(get_context)) -> TaskResponse:
    with _service_errors():
        task, result = await routine_service.activate_routine(context, routine_id)
    return TaskResponse(task=task, sync=result)


# Google integration


@router.post("/integrations/google/connect", response_model=StatusResponse)
async def connect_google(body: GoogleConnectRequest, context: AppContext = Depends(get_context)) -> StatusResponse:
    with _service_errors():
        context.require_user()
        await google_service.connect_google(
            context,
            api_key=body.api_key,
            access_token=body.access_token,
            sheet_id=body.sheet_id,
        )
    return await get_status(context)


@router.post("/integrations/google/sync", response_model=SheetSyncResponse)
async def sync_google_sheet(context: AppContext = Depends(get_context)) -> SheetSyncResponse:
    with _service_errors():
        context.require_user()
    synced = await google_service.sync_to_sheets(context)
    return SheetSyncResponse(synced=synced, sync_indicator=context.sync_indicator())
