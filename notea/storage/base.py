from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

from notea.editor.model import DEFAULT_FONT

NotesReceiver = Callable[[Any], None]


class StorageError(RuntimeError):
    def __init__(self, code: str, message: str, backend_name: str):
        super().__init__(message)
        self.code = code
        self.message = message
        self.backend_name = backend_name


def record_matches(item: Dict[str, Any], title: str, content: str, font: str) -> bool:
    # Stored records may omit font; they decode with the default one.
    return (
        item.get("title") == title
        and item.get("content") == content
        and item.get("font", DEFAULT_FONT) == font
    )


class NoteStorage(ABC):
    def request_all(self, receiver: NotesReceiver) -> None:
        """Answer the requester alone with the stored list as JSON text."""
        receiver(self.dump_json())

    @abstractmethod
    def persist(self, title: str, content: str, font: str) -> None: ...

    @abstractmethod
    def remove(self, title: str, content: str, font: str) -> None: ...

    @abstractmethod
    def dump_json(self) -> str: ...

    @abstractmethod
    def name(self) -> str: ...


class DownloadSink(ABC):
    @abstractmethod
    def download_string(self, filename: str, mime_type: str, content: str) -> None: ...
