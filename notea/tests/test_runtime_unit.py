import pytest

from notea.editor.messages import (
    DeleteNote,
    Download,
    EditContent,
    EditTitle,
    LoadNote,
    NotesArrived,
    Save,
    SelectFont,
)
from notea.editor.model import Note
from notea.editor.runtime import EditorRuntime
from notea.storage import CollectingDownloadSink, InMemoryNoteStorage, StorageError
from notea.storage.base import NoteStorage


class RecordingStorage(NoteStorage):
    """Store that records calls and never answers request_all."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def persist(self, title: str, content: str, font: str) -> None:
        self.calls.append(("persist", title, content, font))

    def remove(self, title: str, content: str, font: str) -> None:
        self.calls.append(("remove", title, content, font))

    def request_all(self, receiver) -> None:
        self.calls.append(("request_all",))

    def dump_json(self) -> str:
        return "[]"

    def name(self) -> str:
        return "recording"


def _runtime(storage=None):
    storage = storage or InMemoryNoteStorage()
    downloads = CollectingDownloadSink()
    runtime = EditorRuntime(storage, downloads)
    runtime.start()
    return runtime, storage, downloads


def test_start_requests_all_notes_and_receives_existing_ones() -> None:
    storage = InMemoryNoteStorage(records=[{"title": "a", "content": "b", "font": "Serif"}])
    runtime, _, _ = _runtime(storage)
    assert runtime.model.saved_notes == (Note("a", "b", "Serif"),)


def test_dispatch_before_start_raises() -> None:
    runtime = EditorRuntime(InMemoryNoteStorage(), CollectingDownloadSink())
    with pytest.raises(RuntimeError):
        runtime.dispatch(Save())


def test_save_persists_in_order_before_request_all() -> None:
    storage = RecordingStorage()
    runtime, _, _ = _runtime(storage)
    runtime.dispatch(EditTitle(text="X"))
    runtime.dispatch(EditContent(text="Y"))
    runtime.dispatch(Save())
    assert storage.calls == [
        ("request_all",),
        ("persist", "X", "Y", "Arial"),
        ("request_all",),
    ]
    assert runtime.model.saved_notes == ()


def test_save_round_trip_refreshes_saved_notes() -> None:
    runtime, _, _ = _runtime()
    runtime.dispatch(EditTitle(text="X"))
    runtime.dispatch(EditContent(text="Y"))
    runtime.dispatch(SelectFont(name="Verdana"))
    model = runtime.dispatch(Save())
    assert model.saved_notes == (Note("X", "Y", "Verdana"),)
    assert (model.title, model.content) == ("X", "Y")


def test_empty_save_touches_nothing() -> None:
    storage = RecordingStorage()
    runtime, _, _ = _runtime(storage)
    runtime.dispatch(EditTitle(text="only title"))
    runtime.dispatch(Save())
    assert storage.calls == [("request_all",)]


def test_delete_removes_from_storage_and_reloads() -> None:
    storage = InMemoryNoteStorage(
        records=[
            {"title": "a", "content": "b", "font": "Arial"},
            {"title": "a", "content": "b", "font": "Arial"},
            {"title": "c", "content": "d", "font": "Arial"},
        ]
    )
    runtime, _, _ = _runtime(storage)
    model = runtime.dispatch(DeleteNote(note=Note("a", "b")))
    assert model.saved_notes == (Note("a", "b"), Note("c", "d"))


def test_load_note_then_download_queues_file() -> None:
    runtime, _, downloads = _runtime()
    runtime.dispatch(LoadNote(note=Note("Groceries", "milk", "Georgia")))
    runtime.dispatch(Download())
    item = downloads.pop()
    assert item is not None
    assert (item.filename, item.mime_type, item.content) == ("Groceries.txt", "text/plain", "milk")
    assert downloads.pop() is None


def test_inbound_garbage_keeps_previous_notes() -> None:
    storage = InMemoryNoteStorage(records=[{"title": "a", "content": "b", "font": "Arial"}])
    runtime, _, _ = _runtime(storage)
    runtime.on_all_received('[{"title": 5}]')
    assert runtime.model.saved_notes == (Note("a", "b"),)


def test_transition_hook_sees_every_step() -> None:
    seen = []
    runtime = EditorRuntime(
        InMemoryNoteStorage(),
        CollectingDownloadSink(),
        on_transition=lambda msg, before, after, effects: seen.append(type(msg).__name__),
    )
    runtime.start()
    runtime.dispatch(EditTitle(text="t"))
    assert seen == ["NoneType", "NotesArrived", "EditTitle"]


def test_request_all_answers_only_the_requesting_runtime() -> None:
    storage = InMemoryNoteStorage()
    seen = []
    bystander = EditorRuntime(
        storage,
        CollectingDownloadSink(),
        on_transition=lambda msg, before, after, effects: seen.append(type(msg).__name__),
    )
    bystander.start()
    runtime, _, _ = _runtime(storage)
    runtime.dispatch(EditTitle(text="X"))
    runtime.dispatch(EditContent(text="Y"))
    runtime.dispatch(Save())

    assert runtime.model.saved_notes == (Note("X", "Y"),)
    assert bystander.model.saved_notes == ()
    assert seen == ["NoneType", "NotesArrived"]


def test_delete_removes_stored_record_without_font_key() -> None:
    storage = InMemoryNoteStorage(records=[{"title": "a", "content": "b"}])
    runtime, _, _ = _runtime(storage)
    assert runtime.model.saved_notes == (Note("a", "b", "Arial"),)

    model = runtime.dispatch(DeleteNote(note=runtime.model.saved_notes[0]))
    assert model.saved_notes == ()
    runtime.dispatch(NotesArrived(raw=storage.dump_json()))
    assert runtime.model.saved_notes == ()


def test_storage_errors_propagate_to_caller() -> None:
    class BrokenStorage(RecordingStorage):
        def persist(self, title: str, content: str, font: str) -> None:
            raise StorageError("write_failed", "disk full", self.name())

    runtime, _, _ = _runtime(BrokenStorage())
    runtime.dispatch(EditTitle(text="X"))
    runtime.dispatch(EditContent(text="Y"))
    with pytest.raises(StorageError):
        runtime.dispatch(Save())
    runtime.dispatch(NotesArrived(raw="[]"))
    assert runtime.model.title == "X"
