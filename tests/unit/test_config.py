"""Tests for configuration validation."""

from pathlib import Path

import pytest

from src.core.config import Settings, constants


def test_require_credential_with_valid_value() -> None:
    """Test require_credential returns value when credential is set."""
    settings = Settings(_env_file=None, supabase_key="anon-key")

    assert settings.require_credential("supabase_key", "Supabase") == "anon-key"


def test_require_credential_with_none_raises_error() -> None:
    """Test require_credential raises ValueError when credential is None."""
    settings = Settings(_env_file=None, supabase_url=None)

    with pytest.raises(ValueError, match="Supabase credential not configured"):
        settings.require_credential("supabase_url", "Supabase")


def test_require_credential_with_empty_string_raises_error() -> None:
    """Test require_credential raises ValueError when credential is empty."""
    settings = Settings(_env_file=None, supabase_key="")

    with pytest.raises(ValueError, match="SUPABASE_KEY"):
        settings.require_credential("supabase_key", "Supabase")


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.admin_phone == "9999"
    assert settings.session_file == Path(".gardenos_session.json")
    assert settings.google_access_token is None


def test_settings_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("GOOGLE_SHEET_ID", "sheet-123")

    settings = Settings(_env_file=None)

    assert settings.supabase_url == "https://example.supabase.co"
    assert settings.google_sheet_id == "sheet-123"


def test_constants() -> None:
    assert constants.ROLE_HEAD_GARDENER == "Head Gardener"
    assert constants.ROLE_GARDENER == "Gardener"
    assert constants.SHEET_CLEAR_RANGE == "Sheet1!A1:Z1000"
    assert constants.AVATAR_URL_TEMPLATE.format(seed="bob") == "https://picsum.photos/seed/bob/200/200"
