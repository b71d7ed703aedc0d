"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from src.core.config import Settings
from src.domain.member import Member
from src.domain.routine import Routine
from src.domain.task import Priority, Status, Task


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        supabase_url="http://supabase.test",
        supabase_key="test-key",
        session_file=tmp_path / "session.json",
        google_api_key=None,
        google_access_token=None,
        google_sheet_id=None,
    )


@pytest.fixture
def admin_member() -> Member:
    return Member(
        id="admin1",
        name="Alice Green",
        role="Head Gardener",
        phone_number="9999",
        is_admin=True,
        avatar="https://picsum.photos/seed/9999/200/200",
    )


@pytest.fixture
def gardener_member() -> Member:
    return Member(
        id="gard1",
        name="Bob Soil",
        role="Gardener",
        phone_number="0812345678",
        avatar="https://picsum.photos/seed/0812345678/200/200",
    )


@pytest.fixture
def sample_task() -> Task:
    return Task(
        id="task1",
        title="Water plants",
        description="Front lawn and roses",
        priority=Priority.NORMAL,
        status=Status.TODO,
        due_date=date(2024, 6, 1),
    )


@pytest.fixture
def sample_routine() -> Routine:
    return Routine(
        id="r1",
        title="Morning Watering",
        description="Water the rose garden and front lawn.",
        default_priority=Priority.URGENT,
    )
