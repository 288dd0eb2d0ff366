"""Tests for SessionService."""

from __future__ import annotations

from datetime import timedelta

import pytest

from canvasctl.infrastructure.sessions import SessionStore
from canvasctl.services.session import SessionService


@pytest.fixture
def service(store: SessionStore) -> SessionService:
    return SessionService(store, cleanup_days=7)


class TestLifecycle:
    def test_create_and_show(self, service: SessionService) -> None:
        created = service.create()
        assert created.ok
        session_id = created.data["sessionId"]
        shown = service.show(session_id)
        assert shown.ok
        assert shown.op == "show_session"
        assert shown.data["sessionId"] == session_id
        assert shown.meta is not None
        assert shown.meta["tokenEstimate"] > 0

    def test_show_missing(self, service: SessionService) -> None:
        result = service.show("ghost")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_show_invalid_id(self, service: SessionService) -> None:
        result = service.show("a/b")
        assert result.error is not None
        assert result.error.code == "INVALID_SESSION_ID"

    def test_delete(self, service: SessionService) -> None:
        session_id = service.create().data["sessionId"]
        assert service.delete(session_id).ok
        result = service.delete(session_id)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_list(self, service: SessionService) -> None:
        service.create()
        service.create()
        result = service.list()
        assert result.data["count"] == 2
        assert set(result.data["sessions"][0]) == {"sessionId", "timestamp"}


class TestHistoryAndDesign:
    def test_add_message_and_history(self, service: SessionService) -> None:
        session_id = service.create().data["sessionId"]
        assert service.add_message(session_id, {"role": "user", "content": "hi"}).data["count"] == 1
        service.add_message(
            session_id,
            {"role": "assistant", "content": "made it", "actions": [{"tool": "create_frame", "params": {}}]},
        )
        history = service.history(session_id)
        assert history.data["count"] == 2
        assert history.data["messages"][1]["actions"] == [{"tool": "create_frame", "params": {}}]
        assert "timestamp" in history.data["messages"][0]

    def test_add_message_to_missing_session(self, service: SessionService) -> None:
        result = service.add_message("ghost", {"role": "user", "content": "hi"})
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_add_invalid_message(self, service: SessionService) -> None:
        session_id = service.create().data["sessionId"]
        result = service.add_message(session_id, {"role": "robot", "content": "hi"})
        assert result.error is not None
        assert result.error.code == "STORE_ERROR"

    def test_update_design_state(self, service: SessionService) -> None:
        session_id = service.create().data["sessionId"]
        result = service.update_design_state(session_id, {"currentFileKey": "k1"})
        assert result.ok
        assert result.data["designState"]["currentFileKey"] == "k1"


class TestCleanup:
    def test_default_cutoff(self, service: SessionService, clock) -> None:
        now = clock.now
        clock.now = now - timedelta(days=10)
        service.create()
        clock.now = now
        service.create()
        result = service.cleanup()
        assert result.data == {"deleted": 1, "olderThanDays": 7}

    def test_explicit_cutoff(self, service: SessionService) -> None:
        service.create()
        assert service.cleanup(0).data["deleted"] == 0
