from __future__ import annotations

"""
HTTP surface for Notea editor sessions.

Design intent:
- Host one editor runtime per browser session behind a TTL-bounded store.
- Translate request bodies into editor messages; never mutate the model here.
- Serve queued downloads and the rendered page from the same session.
"""

import logging
from typing import Annotated, Any, Literal, Union
from urllib.parse import quote

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from notea.editor.messages import (
    DeleteNote,
    Download,
    EditContent,
    EditTitle,
    LoadNote,
    Msg,
    NotesArrived,
    Save,
    SelectFont,
)
from notea.editor.model import DEFAULT_FONT, FONTS, Model, Note
from notea.editor.runtime import EditorRuntime
from notea.editor.view import render_page
from notea.internal_core import audit
from notea.internal_core.config import NoteaConfig, load_config, project_root
from notea.internal_core.contracts import AuditEvent, EditorState, NoteRecord
from notea.internal_core.session_store import InMemorySessionStore, UnknownSessionError
from notea.storage import (
    CollectingDownloadSink,
    InMemoryNoteStorage,
    JsonFileNoteStorage,
    NoteStorage,
    StorageError,
)


class NoteInput(BaseModel):
    title: str
    content: str
    font: str = DEFAULT_FONT

    def to_note(self) -> Note:
        return Note(title=self.title, content=self.content, font=self.font)


class EditTitleMessage(BaseModel):
    type: Literal["edit_title"]
    text: str


class EditContentMessage(BaseModel):
    type: Literal["edit_content"]
    text: str


class SelectFontMessage(BaseModel):
    type: Literal["select_font"]
    name: Literal[
        "Arial",
        "Courier New",
        "Georgia",
        "Times New Roman",
        "Verdana",
        "Sans-serif",
        "Serif",
        "Helvetica",
        "Tahoma",
        "Trebuchet MS",
    ]


class SaveMessage(BaseModel):
    type: Literal["save"]


class DownloadMessage(BaseModel):
    type: Literal["download"]


class LoadNoteMessage(BaseModel):
    type: Literal["load_note"]
    note: NoteInput


class DeleteNoteMessage(BaseModel):
    type: Literal["delete_note"]
    note: NoteInput


class NotesArrivedMessage(BaseModel):
    type: Literal["notes_arrived"]
    raw: Any = None


EditorMessage = Annotated[
    Union[
        EditTitleMessage,
        EditContentMessage,
        SelectFontMessage,
        SaveMessage,
        DownloadMessage,
        LoadNoteMessage,
        DeleteNoteMessage,
        NotesArrivedMessage,
    ],
    Field(discriminator="type"),
]


class EditorStateResponse(BaseModel):
    session_id: str
    state: EditorState
    can_save: bool
    pending_downloads: int = Field(ge=0)
    debug: dict[str, Any] = Field(default_factory=dict)


class FontsResponse(BaseModel):
    fonts: list[str]
    default_font: str


class AuditResponse(BaseModel):
    session_id: str
    events: list[AuditEvent] = Field(default_factory=list)


app = FastAPI(title="notea editor service")
logger = logging.getLogger(__name__)


def _get_config() -> NoteaConfig:
    existing = getattr(app.state, "notea_config", None)
    if isinstance(existing, NoteaConfig):
        return existing
    created = load_config()
    logging.getLogger("notea").setLevel(created.NOTEA_LOG_LEVEL.upper())
    setattr(app.state, "notea_config", created)
    return created


def _get_session_store() -> InMemorySessionStore:
    existing = getattr(app.state, "editor_sessions", None)
    if isinstance(existing, InMemorySessionStore):
        return existing
    created = InMemorySessionStore(ttl_seconds=_get_config().NOTEA_SESSION_TTL_SECONDS)
    setattr(app.state, "editor_sessions", created)
    return created


def _get_note_storage() -> NoteStorage:
    existing = getattr(app.state, "note_storage", None)
    if isinstance(existing, NoteStorage):
        return existing
    cfg = _get_config()
    created: NoteStorage
    if cfg.NOTEA_STORAGE_BACKEND == "json_file":
        created = JsonFileNoteStorage(cfg.storage_path(project_root()))
    else:
        created = InMemoryNoteStorage()
    logger.info("note_storage_ready backend=%s", created.name())
    setattr(app.state, "note_storage", created)
    return created


app.add_middleware(
    CORSMiddleware,
    allow_origins=list(load_config().NOTEA_CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _to_msg(payload: Any) -> Msg:
    if isinstance(payload, EditTitleMessage):
        return EditTitle(text=payload.text)
    if isinstance(payload, EditContentMessage):
        return EditContent(text=payload.text)
    if isinstance(payload, SelectFontMessage):
        return SelectFont(name=payload.name)
    if isinstance(payload, SaveMessage):
        return Save()
    if isinstance(payload, DownloadMessage):
        return Download()
    if isinstance(payload, LoadNoteMessage):
        return LoadNote(note=payload.note.to_note())
    if isinstance(payload, DeleteNoteMessage):
        return DeleteNote(note=payload.note.to_note())
    if isinstance(payload, NotesArrivedMessage):
        return NotesArrived(raw=payload.raw)
    raise HTTPException(status_code=400, detail=f"Unsupported message: {type(payload).__name__}")


def _state_response(session_id: str, model: Model, *, action: str) -> EditorStateResponse:
    store = _get_session_store()
    return EditorStateResponse(
        session_id=session_id,
        state=EditorState(
            title=model.title,
            content=model.content,
            selected_font=model.selected_font,
            saved_notes=[NoteRecord.model_validate(item.as_record()) for item in model.saved_notes],
        ),
        can_save=bool(model.title) and bool(model.content),
        pending_downloads=store.pending_downloads(session_id),
        debug={
            "action": action,
            "saved_note_count": len(model.saved_notes),
            "storage_backend": _get_note_storage().name(),
        },
    )


def _content_disposition(filename: str) -> str:
    fallback = "".join(
        ch if 32 <= ord(ch) < 127 and ch not in {'"', "\\"} else "_" for ch in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _storage_failure(session_id: str, exc: StorageError) -> HTTPException:
    logger.warning(
        "storage_failed session_id=%s backend=%s code=%s", session_id, exc.backend_name, exc.code
    )
    audit.log_event(_get_session_store(), session_id, "STORAGE_FAILED", exc.code, exc.message)
    return HTTPException(status_code=503, detail=f"Note storage unavailable: {exc.message}")


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/fonts", response_model=FontsResponse)
async def fonts() -> FontsResponse:
    return FontsResponse(fonts=list(FONTS), default_font=DEFAULT_FONT)


@app.post("/sessions", response_model=EditorStateResponse)
def create_session() -> EditorStateResponse:
    store = _get_session_store()
    store.cleanup_expired_sessions()
    session_id = store.create_session()
    downloads = CollectingDownloadSink(max_pending=_get_config().NOTEA_MAX_PENDING_DOWNLOADS)

    def _on_transition(msg, before, after, effects) -> None:
        audit.log_transition(store, session_id, msg, before, after, effects)

    runtime = EditorRuntime(_get_note_storage(), downloads, on_transition=_on_transition)
    try:
        model = store.attach_runtime(session_id, runtime, downloads)
    except StorageError as exc:
        store.destroy_session(session_id, reason="storage_failed")
        raise HTTPException(status_code=503, detail=f"Note storage unavailable: {exc.message}") from exc
    logger.info("session_created session_id=%s saved_notes=%s", session_id, len(model.saved_notes))
    return _state_response(session_id, model, action="create")


@app.get("/sessions/{session_id}", response_model=EditorStateResponse)
def session_state(session_id: str) -> EditorStateResponse:
    try:
        model = _get_session_store().get_model(session_id)
    except UnknownSessionError as exc:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}") from exc
    return _state_response(session_id, model, action="read")


@app.post("/sessions/{session_id}/messages", response_model=EditorStateResponse)
def session_message(session_id: str, payload: EditorMessage) -> EditorStateResponse:
    store = _get_session_store()
    msg = _to_msg(payload)
    try:
        model = store.dispatch(session_id, msg)
    except UnknownSessionError as exc:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}") from exc
    except StorageError as exc:
        raise _storage_failure(session_id, exc) from exc
    if isinstance(msg, Download):
        audit.log_event(store, session_id, "DOWNLOAD_READY", "text_plain", "queued")
    return _state_response(session_id, model, action=payload.type)


@app.get("/sessions/{session_id}/view", response_class=HTMLResponse)
def session_view(session_id: str) -> HTMLResponse:
    try:
        model = _get_session_store().get_model(session_id)
    except UnknownSessionError as exc:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}") from exc
    return HTMLResponse(render_page(model, endpoint=f"/sessions/{session_id}"))


@app.get("/sessions/{session_id}/download")
def session_download(session_id: str) -> Response:
    store = _get_session_store()
    try:
        item = store.pop_download(session_id)
    except UnknownSessionError as exc:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}") from exc
    if item is None:
        raise HTTPException(status_code=404, detail="No pending download for this session.")
    audit.log_event(store, session_id, "DOWNLOAD_SERVED", "text_plain", f"bytes={len(item.content.encode('utf-8'))}")
    return Response(
        content=item.content.encode("utf-8"),
        media_type=f"{item.mime_type}; charset=utf-8",
        headers={"Content-Disposition": _content_disposition(item.filename)},
    )


@app.get("/sessions/{session_id}/audit", response_model=AuditResponse)
def session_audit(session_id: str) -> AuditResponse:
    try:
        session = _get_session_store().get_session(session_id)
    except UnknownSessionError as exc:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}") from exc
    return AuditResponse(session_id=session_id, events=session["audit_events"])


@app.delete("/sessions/{session_id}")
def delete_session(session_id: str) -> dict[str, str]:
    if not _get_session_store().destroy_session(session_id, reason="client_request"):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"status": "destroyed", "session_id": session_id}
