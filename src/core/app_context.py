"""Application context passed to every mutation handler.

Holds what the single-page app kept in ambient globals: the logged-in member,
the sticky offline flag, the board collections and the optional integrations.
"""

import asyncio
import logging
import shutil
import tempfile
from collections.abc import Coroutine
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from src.core import db_client
from src.core.config import Settings, constants, settings as default_settings
from src.core.errors import LoginRequiredError
from src.core.session_store import SessionStore
from src.domain.member import Member
from src.services.board_state import BoardState
from src.services.capabilities import Capability, Unavailable
from src.services.google_service import (
    GoogleService,
    SyncIndicator,
    connect_google,
    disconnect_google,
)
from src.services.speech_service import SpeechService


logger = logging.getLogger(__name__)


class AppContext:
    """Session-scoped state with an explicit initialize/teardown lifecycle."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        session_store: SessionStore | None = None,
        speech: SpeechService | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.session_store = session_store or SessionStore(self.settings.session_file)
        self.speech = speech or SpeechService()
        self.board = BoardState(self)
        self.current_user: Member | None = None
        self.offline = False
        self.offline_notice: str | None = None
        self.google: Capability[GoogleService] = Unavailable()
        self.sheet_id: str | None = None
        self.media_dir: Path | None = None
        self._sync_indicator = SyncIndicator.IDLE
        self._sync_indicator_at: datetime | None = None
        self._background_tasks: set[asyncio.Task] = set()

    async def initialize(self) -> None:
        """Start a session: restore the login, load the board, wire integrations.

        Acts as a full reload, so it is the only place the offline flag is cleared.
        """
        self.offline = False
        self.offline_notice = None
        self.board = BoardState(self)
        if self.media_dir is None:
            self.media_dir = Path(tempfile.mkdtemp(prefix="gardenos_media_"))

        self.current_user = self.session_store.load()

        await self.board.load_all()

        if self.current_user is not None:
            self.board.ensure_member(self.current_user)

        if self.settings.google_access_token:
            await connect_google(
                self,
                api_key=self.settings.google_api_key,
                access_token=self.settings.google_access_token,
                sheet_id=self.settings.google_sheet_id,
            )

        logger.info(
            "Application context initialized",
            extra={"offline": self.offline, "user_restored": self.current_user is not None},
        )

    async def teardown(self) -> None:
        """Release resources. Local media references die with the session.

        The Google token stays valid; only an explicit logout revokes it.
        """
        await self.wait_for_background()
        self.speech.stop()
        await disconnect_google(self, revoke=False)
        await db_client.close_client()
        if self.media_dir is not None:
            shutil.rmtree(self.media_dir, ignore_errors=True)
            self.media_dir = None
        logger.info("Application context torn down")

    def run_in_background(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Schedule work the caller should not wait on. Teardown waits for it."""
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def wait_for_background(self) -> None:
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    def mark_offline(self, reason: str) -> None:
        """Set the sticky offline flag. Only a new initialize() clears it."""
        if not self.offline:
            logger.warning("Switching to offline mode", extra={"reason": reason})
        self.offline = True
        if self.offline_notice is None:
            self.offline_notice = reason

    def require_user(self) -> Member:
        """Return the acting member or raise LoginRequiredError when logged out."""
        if self.current_user is None:
            msg = "Login required"
            raise LoginRequiredError(msg)
        return self.current_user

    def set_sync_indicator(self, indicator: SyncIndicator) -> None:
        self._sync_indicator = indicator
        self._sync_indicator_at = datetime.now()

    def sync_indicator(self, now: datetime | None = None) -> SyncIndicator:
        """Current indicator; a success message falls back to idle after a few seconds."""
        if self._sync_indicator == SyncIndicator.SUCCESS and self._sync_indicator_at is not None:
            now = now or datetime.now()
            if now - self._sync_indicator_at >= timedelta(seconds=constants.SYNC_STATUS_RESET_SECONDS):
                return SyncIndicator.IDLE
        return self._sync_indicator
