"""File-backed session store.

One JSON document per session at ``<data_dir>/sessions/<sessionId>.json``.
Writes go to a temp file in the same directory and are swapped in with
``os.replace``. Read-modify-write cycles hold a per-session lock.
"""

from __future__ import annotations

import json
import logging
import math
import os
import re
import tempfile
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from canvasctl.domain.sessions import (
    Message,
    SessionState,
    SessionSummary,
    utc_now,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20
_SESSION_ID = re.compile(r"[A-Za-z0-9_-]+")


class SessionStoreError(Exception):
    """A session document could not be written or removed."""


class SessionNotFound(KeyError):
    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


class SessionStore:
    def __init__(
        self,
        data_dir: Path | str,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.sessions_dir = Path(data_dir) / "sessions"
        self.history_limit = history_limit
        self._clock = clock
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self.sessions_dir.mkdir(parents=True, exist_ok=True)

    # -- paths and locks --

    def path_for(self, session_id: str) -> Path:
        if not _SESSION_ID.fullmatch(session_id):
            msg = f"Invalid session id: {session_id!r}"
            raise ValueError(msg)
        return self.sessions_dir / f"{session_id}.json"

    @contextmanager
    def locked(self, session_id: str) -> Iterator[None]:
        """Serialize read-modify-write on one session.

        The lock is forgotten once its session has no document, so ids that
        were never created or have been deleted do not pile up.
        """
        with self._locks_guard:
            lock = self._locks.setdefault(session_id, threading.Lock())
        try:
            with lock:
                yield
        finally:
            if not (self.sessions_dir / f"{session_id}.json").is_file():
                with self._locks_guard:
                    if self._locks.get(session_id) is lock and not lock.locked():
                        del self._locks[session_id]

    # -- basic I/O --

    def create(self) -> SessionState:
        state = SessionState(session_id=str(uuid.uuid4()), timestamp=self._clock())
        self.save(state.session_id, state)
        logger.debug("Created session %s", state.session_id)
        return state

    def load(self, session_id: str) -> SessionState | None:
        """Return the session, or None when missing or unreadable."""
        path = self.path_for(session_id)
        if not path.is_file():
            return None
        try:
            return SessionState.model_validate_json(path.read_bytes())
        except (OSError, ValidationError, ValueError):
            logger.warning("Unreadable session document: %s", path, exc_info=True)
            return None

    def save(self, session_id: str, state: SessionState) -> None:
        path = self.path_for(session_id)
        if state.session_id != session_id:
            state = state.model_copy(update={"session_id": session_id})
        content = json.dumps(state.to_document(), indent=2, ensure_ascii=False)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.sessions_dir, prefix=f".{session_id}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            msg = f"Failed to save session {session_id}: {exc}"
            raise SessionStoreError(msg) from exc

    def _require(self, session_id: str) -> SessionState:
        state = self.load(session_id)
        if state is None:
            raise SessionNotFound(session_id)
        return state

    # -- read-modify-write --

    def append_message(self, session_id: str, message: Message | dict[str, Any]) -> SessionState:
        """Append *message*, keeping only the most recent ``history_limit``.

        The session timestamp is left alone; only design-state updates
        refresh it.
        """
        msg = message if isinstance(message, Message) else Message.model_validate(message)
        if msg.timestamp is None:
            msg = msg.model_copy(update={"timestamp": self._clock()})
        with self.locked(session_id):
            state = self._require(session_id)
            history = [*state.conversation_history, msg][-self.history_limit :]
            state = state.model_copy(update={"conversation_history": history})
            self.save(session_id, state)
        return state

    def update_design_state(self, session_id: str, updates: dict[str, Any]) -> SessionState:
        with self.locked(session_id):
            state = self._require(session_id)
            state = state.model_copy(
                update={
                    "design_state": state.design_state.merged(updates),
                    "timestamp": self._clock(),
                }
            )
            self.save(session_id, state)
        return state

    def delete_session(self, session_id: str) -> bool:
        path = self.path_for(session_id)
        with self.locked(session_id):
            try:
                path.unlink()
            except FileNotFoundError:
                return False
            except OSError as exc:
                msg = f"Failed to delete session {session_id}: {exc}"
                raise SessionStoreError(msg) from exc
        return True

    # -- queries --

    def list_sessions(self) -> list[SessionSummary]:
        """All readable sessions, newest first."""
        summaries: list[SessionSummary] = []
        for path in self.sessions_dir.glob("*.json"):
            if not _SESSION_ID.fullmatch(path.stem):
                continue
            state = self.load(path.stem)
            if state is not None:
                summaries.append(SessionSummary(session_id=path.stem, timestamp=state.timestamp))
        summaries.sort(key=lambda s: s.timestamp, reverse=True)
        return summaries

    def get_conversation_history(self, session_id: str) -> list[Message]:
        state = self.load(session_id)
        return list(state.conversation_history) if state is not None else []

    def token_estimate(self, session_id: str) -> int:
        """Rough token count: about four characters per token."""
        state = self.load(session_id)
        if state is None:
            return 0
        history_chars = sum(len(m.content) for m in state.conversation_history)
        design_chars = len(
            json.dumps(state.design_state.model_dump(mode="json", by_alias=True), separators=(",", ":"))
        )
        return math.ceil((history_chars + design_chars) / 4)

    def cleanup(self, older_than_days: int = 7) -> int:
        """Delete sessions whose timestamp predates the cutoff; return the count."""
        cutoff = self._clock() - timedelta(days=older_than_days)
        deleted = 0
        for summary in self.list_sessions():
            if summary.timestamp < cutoff and self.delete_session(summary.session_id):
                deleted += 1
        if deleted:
            logger.info("Cleaned up %d session(s) older than %d day(s)", deleted, older_than_days)
        return deleted

    def directory_info(self) -> dict[str, Any]:
        return {"sessionDir": str(self.sessions_dir), "exists": self.sessions_dir.is_dir()}
