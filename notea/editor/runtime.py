from __future__ import annotations

"""
Drive the editor update loop against storage and download collaborators.

Design intent:
- Process each message to completion before the next one starts.
- Dispatch effects in emission order; inbound note lists re-enter as messages.
- Queue re-entrant dispatches instead of nesting them.
"""

import logging
from collections import deque
from typing import Any, Callable, Deque, Optional

from notea.editor.messages import (
    DownloadFile,
    Effect,
    Msg,
    NotesArrived,
    Persist,
    Remove,
    RequestAll,
)
from notea.editor.model import Model
from notea.editor.update import init, update
from notea.storage.base import DownloadSink, NoteStorage

logger = logging.getLogger(__name__)

TransitionHook = Callable[[Optional[Msg], Model, Model, list[Effect]], None]


class EditorRuntime:
    def __init__(
        self,
        storage: NoteStorage,
        downloads: DownloadSink,
        *,
        on_transition: Optional[TransitionHook] = None,
    ) -> None:
        self._storage = storage
        self._downloads = downloads
        self._on_transition = on_transition
        self._model: Optional[Model] = None
        self._queue: Deque[Msg] = deque()
        self._draining = False

    @property
    def model(self) -> Model:
        if self._model is None:
            raise RuntimeError("EditorRuntime.start() has not been called.")
        return self._model

    def start(self) -> Model:
        if self._model is not None:
            return self._model
        model, effects = init()
        self._model = model
        self._notify(None, model, model, effects)
        self._run_effects(effects)
        self._drain()
        return self.model

    def stop(self) -> None:
        self._queue.clear()

    def on_all_received(self, raw: Any) -> None:
        self.dispatch(NotesArrived(raw=raw))

    def dispatch(self, msg: Msg) -> Model:
        if self._model is None:
            raise RuntimeError("EditorRuntime.start() has not been called.")
        self._queue.append(msg)
        self._drain()
        return self.model

    def _drain(self) -> None:
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue:
                msg = self._queue.popleft()
                before = self.model
                after, effects = update(msg, before)
                self._model = after
                self._notify(msg, before, after, effects)
                self._run_effects(effects)
        finally:
            self._draining = False

    def _notify(self, msg: Optional[Msg], before: Model, after: Model, effects: list[Effect]) -> None:
        if self._on_transition is not None:
            self._on_transition(msg, before, after, effects)

    def _run_effects(self, effects: list[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Persist):
                self._storage.persist(effect.title, effect.content, effect.font)
            elif isinstance(effect, Remove):
                self._storage.remove(effect.title, effect.content, effect.font)
            elif isinstance(effect, RequestAll):
                self._storage.request_all(self.on_all_received)
            elif isinstance(effect, DownloadFile):
                self._downloads.download_string(effect.filename, effect.mime_type, effect.content)
            else:
                raise TypeError(f"Unsupported editor effect: {type(effect).__name__}")
            logger.debug("effect_dispatched type=%s backend=%s", type(effect).__name__, self._storage.name())
