from __future__ import annotations

"""
Messages consumed by the editor update step and effects it emits.

Design intent:
- Keep both vocabularies as frozen value objects.
- Carry effects as data so transport adapters decide how to deliver them.
"""

from dataclasses import dataclass
from typing import Any, Union

from notea.editor.model import Note

TEXT_PLAIN = "text/plain"


@dataclass(frozen=True)
class EditTitle:
    text: str


@dataclass(frozen=True)
class EditContent:
    text: str


@dataclass(frozen=True)
class SelectFont:
    name: str


@dataclass(frozen=True)
class Save:
    pass


@dataclass(frozen=True)
class Download:
    pass


@dataclass(frozen=True)
class NotesArrived:
    # JSON text or an already parsed value; decoded inside the update step.
    raw: Any


@dataclass(frozen=True)
class LoadNote:
    note: Note


@dataclass(frozen=True)
class DeleteNote:
    note: Note


Msg = Union[
    EditTitle,
    EditContent,
    SelectFont,
    Save,
    Download,
    NotesArrived,
    LoadNote,
    DeleteNote,
]


@dataclass(frozen=True)
class Persist:
    title: str
    content: str
    font: str


@dataclass(frozen=True)
class Remove:
    title: str
    content: str
    font: str

    @classmethod
    def of(cls, note: Note) -> "Remove":
        return cls(title=note.title, content=note.content, font=note.font)


@dataclass(frozen=True)
class RequestAll:
    pass


@dataclass(frozen=True)
class DownloadFile:
    filename: str
    mime_type: str
    content: str


Effect = Union[Persist, Remove, RequestAll, DownloadFile]
