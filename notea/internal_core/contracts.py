from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from notea.editor.model import DEFAULT_FONT


class NoteRecord(BaseModel):
    # Stored records may carry keys we do not know; types are never coerced.
    model_config = ConfigDict(extra="ignore", strict=True)

    title: str
    content: str
    font: str = DEFAULT_FONT


class EditorState(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    content: str
    selected_font: str
    saved_notes: List[NoteRecord] = Field(default_factory=list)


AuditEventType = Literal[
    "SESSION_CREATED",
    "MESSAGE_APPLIED",
    "SAVE_IGNORED",
    "DECODE_FAILED",
    "DOWNLOAD_READY",
    "DOWNLOAD_SERVED",
    "STORAGE_FAILED",
]


class AuditEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ts_iso: str
    session_id: str
    type: AuditEventType
    code: str
    detail: str
    duration_ms: Optional[int] = None
