from __future__ import annotations

"""
Decode note lists delivered by the storage collaborator.

Design intent:
- Accept only an array of records with string title/content and optional string font.
- Fail the whole payload on the first mismatch; never return a partial list.
"""

import json
from typing import Any

from pydantic import ValidationError

from notea.editor.model import Note
from notea.internal_core.contracts import NoteRecord


class NoteDecodeError(ValueError):
    """Raised when an incoming note list does not match the record shape."""


def decode_notes(raw: Any) -> tuple[Note, ...]:
    payload = _load_payload(raw)
    if not isinstance(payload, list):
        raise NoteDecodeError(f"Expected a JSON array of notes, got {type(payload).__name__}.")

    notes: list[Note] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise NoteDecodeError(f"Note at index {index} is not an object.")
        try:
            record = NoteRecord.model_validate(item)
        except ValidationError as exc:
            raise NoteDecodeError(f"Invalid note at index {index}: {exc}") from exc
        notes.append(Note(title=record.title, content=record.content, font=record.font))
    return tuple(notes)


def _load_payload(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise NoteDecodeError(f"Note payload is not valid UTF-8: {exc}") from exc
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise NoteDecodeError(f"Note payload is not valid JSON: {exc}") from exc
    return raw
