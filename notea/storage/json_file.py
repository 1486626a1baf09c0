from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List

from .base import NoteStorage, StorageError, record_matches

logger = logging.getLogger(__name__)


class JsonFileNoteStorage(NoteStorage):
    """Keep the note list as one JSON array on disk, rewritten on every change."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = RLock()

    def _read(self) -> List[Dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError("read_failed", f"Cannot read note file {self._path}: {exc}", self.name()) from exc
        if not isinstance(payload, list):
            raise StorageError("corrupt", f"Note file {self._path} does not hold a JSON array.", self.name())
        return payload

    def _write(self, records: List[Dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".notes-", suffix=".json", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError("write_failed", f"Cannot write note file {self._path}: {exc}", self.name()) from exc

    def persist(self, title: str, content: str, font: str) -> None:
        with self._lock:
            records = self._read()
            records.append({"title": title, "content": content, "font": font})
            self._write(records)
        logger.info("note_persisted backend=%s count=%s", self.name(), len(records))

    def remove(self, title: str, content: str, font: str) -> None:
        with self._lock:
            records = self._read()
            for index, item in enumerate(records):
                if isinstance(item, dict) and record_matches(item, title, content, font):
                    del records[index]
                    self._write(records)
                    logger.info("note_removed backend=%s count=%s", self.name(), len(records))
                    return
        logger.info("note_remove_missed backend=%s", self.name())

    def dump_json(self) -> str:
        with self._lock:
            return json.dumps(self._read(), ensure_ascii=False)

    def name(self) -> str:
        return "json_file"
