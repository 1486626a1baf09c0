"""
Storage and download collaborators for the Notea editor.

Design intent:
- Treat persistence as an opaque fire-and-forget service.
- Deliver stored lists back to the editor as raw JSON text.
"""

from .base import DownloadSink, NoteStorage, StorageError
from .downloads import CollectingDownloadSink, PendingDownload
from .json_file import JsonFileNoteStorage
from .memory import InMemoryNoteStorage

__all__ = [
    "CollectingDownloadSink",
    "DownloadSink",
    "InMemoryNoteStorage",
    "JsonFileNoteStorage",
    "NoteStorage",
    "PendingDownload",
    "StorageError",
]
