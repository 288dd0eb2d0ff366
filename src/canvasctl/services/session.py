"""SessionService — session store operations as ServiceResults."""

from __future__ import annotations

from typing import Any

from canvasctl.domain.sessions import Message
from canvasctl.infrastructure.sessions import SessionNotFound, SessionStore, SessionStoreError
from canvasctl.services.result import ServiceError, ServiceResult


def _fail(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))


class SessionService:
    def __init__(self, store: SessionStore, *, cleanup_days: int = 7) -> None:
        self._store = store
        self._cleanup_days = cleanup_days

    def create(self) -> ServiceResult:
        op = "create_session"
        try:
            state = self._store.create()
        except SessionStoreError as exc:
            return _fail(op, "STORE_ERROR", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={"sessionId": state.session_id, "timestamp": state.timestamp.isoformat()},
        )

    def list(self) -> ServiceResult:
        sessions = [s.model_dump(mode="json", by_alias=True) for s in self._store.list_sessions()]
        return ServiceResult(ok=True, op="list_sessions", data={"sessions": sessions, "count": len(sessions)})

    def show(self, session_id: str) -> ServiceResult:
        op = "show_session"
        try:
            state = self._store.load(session_id)
        except ValueError as exc:
            return _fail(op, "INVALID_SESSION_ID", str(exc), sessionId=session_id)
        if state is None:
            return _fail(op, "NOT_FOUND", f"Session not found: {session_id}", sessionId=session_id)
        return ServiceResult(
            ok=True,
            op=op,
            data=state.to_document(),
            meta={"tokenEstimate": self._store.token_estimate(session_id)},
        )

    def history(self, session_id: str) -> ServiceResult:
        op = "session_history"
        try:
            state = self._store.load(session_id)
        except ValueError as exc:
            return _fail(op, "INVALID_SESSION_ID", str(exc), sessionId=session_id)
        if state is None:
            return _fail(op, "NOT_FOUND", f"Session not found: {session_id}", sessionId=session_id)
        messages = [m.model_dump(mode="json", by_alias=True, exclude_none=True) for m in state.conversation_history]
        return ServiceResult(
            ok=True,
            op=op,
            data={"sessionId": session_id, "messages": messages, "count": len(messages)},
        )

    def add_message(self, session_id: str, message: Message | dict[str, Any]) -> ServiceResult:
        op = "add_message"
        try:
            state = self._store.append_message(session_id, message)
        except SessionNotFound as exc:
            return _fail(op, "NOT_FOUND", str(exc), sessionId=session_id)
        except (SessionStoreError, ValueError) as exc:
            return _fail(op, "STORE_ERROR", str(exc), sessionId=session_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"sessionId": session_id, "count": len(state.conversation_history)},
        )

    def update_design_state(self, session_id: str, updates: dict[str, Any]) -> ServiceResult:
        op = "update_design_state"
        try:
            state = self._store.update_design_state(session_id, updates)
        except SessionNotFound as exc:
            return _fail(op, "NOT_FOUND", str(exc), sessionId=session_id)
        except (SessionStoreError, ValueError) as exc:
            return _fail(op, "STORE_ERROR", str(exc), sessionId=session_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"sessionId": session_id, "designState": state.design_state.model_dump(mode="json")},
        )

    def delete(self, session_id: str) -> ServiceResult:
        op = "delete_session"
        try:
            removed = self._store.delete_session(session_id)
        except (SessionStoreError, ValueError) as exc:
            return _fail(op, "STORE_ERROR", str(exc), sessionId=session_id)
        if not removed:
            return _fail(op, "NOT_FOUND", f"Session not found: {session_id}", sessionId=session_id)
        return ServiceResult(ok=True, op=op, data={"sessionId": session_id, "deleted": True})

    def cleanup(self, older_than_days: int | None = None) -> ServiceResult:
        op = "cleanup_sessions"
        days = self._cleanup_days if older_than_days is None else older_than_days
        try:
            deleted = self._store.cleanup(days)
        except SessionStoreError as exc:
            return _fail(op, "STORE_ERROR", str(exc))
        return ServiceResult(ok=True, op=op, data={"deleted": deleted, "olderThanDays": days})
