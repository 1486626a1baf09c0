from __future__ import annotations

import logging
import time
import uuid
from threading import RLock
from typing import TYPE_CHECKING, Any, Dict, Optional

from .contracts import AuditEvent

if TYPE_CHECKING:
    from notea.editor.messages import Msg
    from notea.editor.model import Model
    from notea.editor.runtime import EditorRuntime
    from notea.storage.downloads import CollectingDownloadSink, PendingDownload


logger = logging.getLogger(__name__)


class UnknownSessionError(KeyError):
    pass


class InMemorySessionStore:
    def __init__(self, ttl_seconds: int):
        self._ttl_seconds = ttl_seconds
        self._lock = RLock()
        self._sessions: Dict[str, Dict[str, Any]] = {}

    def create_session(self) -> str:
        session_id = uuid.uuid4().hex
        now = time.time()
        with self._lock:
            self._sessions[session_id] = {
                "session_id": session_id,
                "created_at": now,
                "updated_at": now,
                "expires_at": now + self._ttl_seconds,
                "runtime": None,
                "downloads": None,
                "audit_events": [],
            }
        return session_id

    def _require(self, session_id: str) -> Dict[str, Any]:
        session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSessionError(f"Unknown session_id: {session_id}")
        return session

    def _touch(self, session_id: str) -> None:
        now = time.time()
        session = self._sessions[session_id]
        session["updated_at"] = now
        session["expires_at"] = now + self._ttl_seconds

    def attach_runtime(
        self,
        session_id: str,
        runtime: "EditorRuntime",
        downloads: "CollectingDownloadSink",
    ) -> "Model":
        with self._lock:
            session = self._require(session_id)
            session["runtime"] = runtime
            session["downloads"] = downloads
            model = runtime.start()
            self._touch(session_id)
            return model

    def dispatch(self, session_id: str, msg: "Msg") -> "Model":
        with self._lock:
            session = self._require(session_id)
            model = session["runtime"].dispatch(msg)
            self._touch(session_id)
            return model

    def get_model(self, session_id: str) -> "Model":
        with self._lock:
            return self._require(session_id)["runtime"].model

    def pop_download(self, session_id: str) -> Optional["PendingDownload"]:
        with self._lock:
            session = self._require(session_id)
            item = session["downloads"].pop()
            self._touch(session_id)
            return item

    def pending_downloads(self, session_id: str) -> int:
        with self._lock:
            downloads = self._require(session_id)["downloads"]
            return 0 if downloads is None else len(downloads)

    def append_audit_event(self, session_id: str, event: AuditEvent) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return
            session["audit_events"].append(event)

    def get_session(self, session_id: str) -> Dict[str, Any]:
        with self._lock:
            session = self._require(session_id)
            downloads = session["downloads"]
            return {
                "session_id": session["session_id"],
                "created_at": session["created_at"],
                "updated_at": session["updated_at"],
                "expires_at": session["expires_at"],
                "pending_downloads": 0 if downloads is None else len(downloads),
                "audit_events": list(session["audit_events"]),
            }

    def destroy_session(self, session_id: str, reason: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        runtime = session.get("runtime")
        if runtime is not None:
            runtime.stop()
        logger.info("session_destroyed session_id=%s reason=%s", session_id, reason)
        return True

    def cleanup_expired_sessions(self) -> int:
        now = time.time()
        expired = []
        with self._lock:
            for session_id, session in self._sessions.items():
                if session["expires_at"] <= now:
                    expired.append(session_id)
        for session_id in expired:
            self.destroy_session(session_id, reason="ttl_expired")
        return len(expired)
