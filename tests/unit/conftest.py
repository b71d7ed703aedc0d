"""Pytest configuration and fixtures for unit tests."""

import pytest
from fastapi.testclient import TestClient

from src.core.app_context import AppContext
from src.domain.rows import member_to_row, routine_to_row, task_to_row
from src.main import app
from src.services.capabilities import Available
from src.services.speech_service import SpeechService
from tests.unit.mocks import FakeSpeechEngine, InMemoryDBClient


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Route every db_client call to the in-memory store."""
    monkeypatch.setattr("src.core.db_client.list_records", in_memory_db.list_records)
    monkeypatch.setattr("src.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("src.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("src.core.db_client.delete_record", in_memory_db.delete_record)
    return in_memory_db


@pytest.fixture
def speech_engine():
    return FakeSpeechEngine()


@pytest.fixture
def seeded_db(patched_db, admin_member, gardener_member, sample_task, sample_routine):
    """In-memory store pre-loaded with two members, one task and one routine."""
    patched_db.seed("members", member_to_row(admin_member).model_dump(mode="json"))
    patched_db.seed("members", member_to_row(gardener_member).model_dump(mode="json"))
    patched_db.seed("tasks", task_to_row(sample_task).insert_payload())
    patched_db.seed("routines", routine_to_row(sample_routine).model_dump(mode="json"))
    return patched_db


@pytest.fixture
async def context(seeded_db, test_settings, speech_engine):
    """Initialized application context backed by the seeded in-memory store."""
    ctx = AppContext(settings=test_settings, speech=SpeechService(Available(speech_engine)))
    await ctx.initialize()
    seeded_db.calls.clear()
    yield ctx
    await ctx.teardown()


@pytest.fixture
def admin_context(context, admin_member):
    context.current_user = context.board.get_member(admin_member.id)
    return context


@pytest.fixture
def gardener_context(context, gardener_member):
    context.current_user = context.board.get_member(gardener_member.id)
    return context


@pytest.fixture
def client(context):
    """TestClient bound to the initialized context (lifespan is not run)."""
    app.state.context = context
    return TestClient(app)
