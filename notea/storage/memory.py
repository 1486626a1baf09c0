from __future__ import annotations

import json
from threading import RLock
from typing import Any, Dict, List

from .base import NoteStorage, record_matches


class InMemoryNoteStorage(NoteStorage):
    def __init__(self, records: List[Dict[str, Any]] | None = None) -> None:
        self._lock = RLock()
        self._records: List[Dict[str, Any]] = [dict(item) for item in (records or [])]

    def persist(self, title: str, content: str, font: str) -> None:
        with self._lock:
            self._records.append({"title": title, "content": content, "font": font})

    def remove(self, title: str, content: str, font: str) -> None:
        with self._lock:
            for index, item in enumerate(self._records):
                if isinstance(item, dict) and record_matches(item, title, content, font):
                    del self._records[index]
                    return

    def dump_json(self) -> str:
        with self._lock:
            return json.dumps(self._records, ensure_ascii=False)

    def name(self) -> str:
        return "memory"
