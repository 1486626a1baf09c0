from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from threading import Lock
from typing import Deque, Optional

from .base import DownloadSink


@dataclass(frozen=True)
class PendingDownload:
    filename: str
    mime_type: str
    content: str


class CollectingDownloadSink(DownloadSink):
    """Queue downloads until the HTTP layer hands them to the browser."""

    def __init__(self, max_pending: int = 16) -> None:
        self._lock = Lock()
        self._pending: Deque[PendingDownload] = deque(maxlen=max(1, int(max_pending)))

    def download_string(self, filename: str, mime_type: str, content: str) -> None:
        with self._lock:
            self._pending.append(
                PendingDownload(filename=filename, mime_type=mime_type, content=content)
            )

    def pop(self) -> Optional[PendingDownload]:
        with self._lock:
            if not self._pending:
                return None
            return self._pending.popleft()

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
