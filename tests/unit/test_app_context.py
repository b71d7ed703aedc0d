"""Tests for the application context lifecycle."""

from datetime import datetime, timedelta

import httpx
import pytest

from src.core.app_context import AppContext
from src.core.errors import LoginRequiredError
from src.services.capabilities import is_available
from src.services.google_service import SyncIndicator, connect_google


@pytest.mark.unit
class TestAppContext:
    def test_mark_offline_keeps_first_notice(self, test_settings):
        context = AppContext(settings=test_settings)

        context.mark_offline("first")
        context.mark_offline("second")

        assert context.offline is True
        assert context.offline_notice == "first"

    def test_require_user(self, test_settings, admin_member):
        context = AppContext(settings=test_settings)

        with pytest.raises(LoginRequiredError, match="Login required"):
            context.require_user()

        context.current_user = admin_member
        assert context.require_user() == admin_member

    def test_sync_indicator_success_reverts_to_idle(self, test_settings):
        context = AppContext(settings=test_settings)
        context.set_sync_indicator(SyncIndicator.SUCCESS)

        assert context.sync_indicator() == SyncIndicator.SUCCESS
        assert context.sync_indicator(datetime.now() + timedelta(seconds=4)) == SyncIndicator.IDLE

    def test_error_indicator_stays(self, test_settings):
        context = AppContext(settings=test_settings)
        context.set_sync_indicator(SyncIndicator.ERROR)

        assert context.sync_indicator(datetime.now() + timedelta(minutes=5)) == SyncIndicator.ERROR

    async def test_initialize_creates_media_dir_and_teardown_removes_it(self, patched_db, test_settings):
        context = AppContext(settings=test_settings)

        await context.initialize()
        media_dir = context.media_dir

        assert media_dir.is_dir()
        await context.teardown()
        assert not media_dir.exists()
        assert context.media_dir is None

    async def test_google_connected_from_settings(self, patched_db, test_settings):
        settings = test_settings.model_copy(update={"google_access_token": "token", "google_sheet_id": "sheet-1"})
        context = AppContext(settings=settings)

        await context.initialize()

        assert is_available(context.google)
        assert context.sheet_id == "sheet-1"
        await context.teardown()
        assert not is_available(context.google)

    async def test_teardown_keeps_google_token(self, patched_db, test_settings):
        requests = []

        def google(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={})

        context = AppContext(settings=test_settings)
        await context.initialize()
        client = httpx.AsyncClient(transport=httpx.MockTransport(google))
        await connect_google(context, api_key=None, access_token="env-token", sheet_id=None, http_client=client)

        await context.teardown()

        assert requests == []
        assert client.is_closed
        assert not is_available(context.google)
