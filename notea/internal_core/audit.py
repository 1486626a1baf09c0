from __future__ import annotations

import datetime as _dt
from typing import Optional

from notea.editor.messages import Effect, Msg, NotesArrived, Save
from notea.editor.model import Model

from .contracts import AuditEvent, AuditEventType
from .session_store import InMemorySessionStore


def _ts_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat()


def _sanitize_detail(detail: str) -> str:
    # Never copy note bodies into the audit trail; keep details short metadata.
    detail = (detail or "").replace("\n", " ").strip()
    if len(detail) > 200:
        detail = detail[:200] + "..."
    return detail


def log_event(
    store: InMemorySessionStore,
    session_id: str,
    event_type: AuditEventType,
    code: str,
    detail: str,
    duration_ms: Optional[int] = None,
) -> None:
    event = AuditEvent(
        ts_iso=_ts_iso(),
        session_id=session_id,
        type=event_type,
        code=code,
        detail=_sanitize_detail(detail),
        duration_ms=duration_ms,
    )
    store.append_audit_event(session_id, event)


def log_transition(
    store: InMemorySessionStore,
    session_id: str,
    msg: Optional[Msg],
    before: Model,
    after: Model,
    effects: list[Effect],
) -> None:
    effect_names = ",".join(type(item).__name__ for item in effects) or "none"
    if msg is None:
        log_event(store, session_id, "SESSION_CREATED", "init", f"effects={effect_names}")
        return
    msg_name = type(msg).__name__
    if isinstance(msg, Save) and not effects:
        log_event(
            store,
            session_id,
            "SAVE_IGNORED",
            "empty_field",
            f"title_empty={not before.title} content_empty={not before.content}",
        )
        return
    # Rejected note lists hand back the very same model object.
    if isinstance(msg, NotesArrived) and after is before:
        log_event(
            store,
            session_id,
            "DECODE_FAILED",
            "invalid_note_list",
            f"kept={len(before.saved_notes)}",
        )
        return
    log_event(
        store,
        session_id,
        "MESSAGE_APPLIED",
        msg_name,
        f"effects={effect_names} saved_notes={len(after.saved_notes)}",
    )
