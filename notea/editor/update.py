from __future__ import annotations

"""
Fold editor messages into the model and collect outgoing effects.

Design intent:
- Keep every transition total: invalid input degrades to a no-op.
- Return effects in the order the storage collaborator must see them.
- Log rejected saves and undecodable note lists instead of mutating state.
"""

import logging

from notea.editor.decode import NoteDecodeError, decode_notes
from notea.editor.messages import (
    TEXT_PLAIN,
    DeleteNote,
    Download,
    DownloadFile,
    EditContent,
    EditTitle,
    Effect,
    LoadNote,
    Msg,
    NotesArrived,
    Persist,
    Remove,
    RequestAll,
    Save,
    SelectFont,
)
from notea.editor.model import Model, remove_first

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_NAME = "notea-file.txt"

Transition = tuple[Model, list[Effect]]


def init() -> Transition:
    return Model(), [RequestAll()]


def download_filename(title: str) -> str:
    # Title is used verbatim; path separators and reserved characters pass through.
    if not title:
        return DEFAULT_DOWNLOAD_NAME
    return f"{title}.txt"


def can_save(model: Model) -> bool:
    return bool(model.title) and bool(model.content)


def update(msg: Msg, model: Model) -> Transition:
    if isinstance(msg, EditTitle):
        return model.with_changes(title=msg.text), []

    if isinstance(msg, EditContent):
        return model.with_changes(content=msg.text), []

    if isinstance(msg, SelectFont):
        return model.with_changes(selected_font=msg.name), []

    if isinstance(msg, Save):
        if not can_save(model):
            logger.info(
                "save_ignored title_empty=%s content_empty=%s",
                not model.title,
                not model.content,
            )
            return model, []
        return model, [
            Persist(title=model.title, content=model.content, font=model.selected_font),
            RequestAll(),
        ]

    if isinstance(msg, Download):
        return model, [
            DownloadFile(
                filename=download_filename(model.title),
                mime_type=TEXT_PLAIN,
                content=model.content,
            )
        ]

    if isinstance(msg, NotesArrived):
        try:
            notes = decode_notes(msg.raw)
        except NoteDecodeError as exc:
            logger.warning("notes_decode_failed kept=%s error=%s", len(model.saved_notes), exc)
            return model, []
        return model.with_changes(saved_notes=notes), []

    if isinstance(msg, LoadNote):
        note = msg.note
        return model.with_changes(
            title=note.title,
            content=note.content,
            selected_font=note.font,
        ), []

    if isinstance(msg, DeleteNote):
        return model.with_changes(saved_notes=remove_first(model.saved_notes, msg.note)), [
            Remove.of(msg.note),
            RequestAll(),
        ]

    raise TypeError(f"Unsupported editor message: {type(msg).__name__}")
