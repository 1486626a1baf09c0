from __future__ import annotations

"""
Immutable editor model and the saved-note record it mirrors.

Design intent:
- Compare notes by value over (title, content, font); there is no note id.
- Replace the model wholesale on every transition.
"""

from dataclasses import dataclass, replace
from typing import Sequence

DEFAULT_FONT = "Arial"

FONTS: tuple[str, ...] = (
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
)


@dataclass(frozen=True)
class Note:
    title: str
    content: str
    font: str = DEFAULT_FONT

    def as_record(self) -> dict[str, str]:
        return {"title": self.title, "content": self.content, "font": self.font}


@dataclass(frozen=True)
class Model:
    title: str = ""
    content: str = ""
    saved_notes: tuple[Note, ...] = ()
    selected_font: str = DEFAULT_FONT

    def with_changes(self, **changes: object) -> "Model":
        return replace(self, **changes)


def is_known_font(name: str) -> bool:
    return name in FONTS


def remove_first(notes: Sequence[Note], target: Note) -> tuple[Note, ...]:
    """Drop the first entry equal to ``target``; later duplicates are kept."""
    items = list(notes)
    for index, item in enumerate(items):
        if item == target:
            del items[index]
            break
    return tuple(items)
