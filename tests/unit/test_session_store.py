"""Tests for the persisted login session."""

import json

import pytest

from src.core.session_store import SessionStore


@pytest.mark.unit
class TestSessionStore:
    def test_missing_file_means_no_user(self, tmp_path):
        assert SessionStore(tmp_path / "session.json").load() is None

    def test_save_and_load(self, tmp_path, admin_member):
        store = SessionStore(tmp_path / "session.json")

        store.save(admin_member)

        assert store.load() == admin_member

    def test_saved_document_uses_local_field_names(self, tmp_path, admin_member):
        store = SessionStore(tmp_path / "session.json")

        store.save(admin_member)

        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["phoneNumber"] == "9999"
        assert data["isAdmin"] is True

    def test_corrupt_file_means_no_user(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")

        assert SessionStore(path).load() is None

    def test_clear(self, tmp_path, admin_member):
        store = SessionStore(tmp_path / "session.json")
        store.save(admin_member)

        store.clear()
        store.clear()

        assert store.load() is None
        assert not store.path.exists()
