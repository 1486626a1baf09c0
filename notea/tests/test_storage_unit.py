import json
from pathlib import Path

import pytest

from notea.storage import CollectingDownloadSink, InMemoryNoteStorage, JsonFileNoteStorage, StorageError


def _collect(storage) -> list:
    received = []
    storage.request_all(received.append)
    return [json.loads(item) for item in received]


def test_memory_storage_persist_remove_first_match() -> None:
    storage = InMemoryNoteStorage()
    storage.persist("a", "b", "Arial")
    storage.persist("c", "d", "Serif")
    storage.persist("a", "b", "Arial")
    storage.remove("a", "b", "Arial")
    storage.remove("missing", "x", "Arial")
    assert _collect(storage) == [
        [
            {"title": "c", "content": "d", "font": "Serif"},
            {"title": "a", "content": "b", "font": "Arial"},
        ]
    ]


def test_request_all_replies_once_to_the_caller() -> None:
    storage = InMemoryNoteStorage(records=[{"title": "a", "content": "b", "font": "Arial"}])
    received = []
    storage.request_all(received.append)
    assert received == ['[{"title": "a", "content": "b", "font": "Arial"}]']


def test_memory_storage_remove_matches_default_font_and_ignores_extra_keys() -> None:
    storage = InMemoryNoteStorage(
        records=[
            {"title": "a", "content": "b"},
            {"title": "c", "content": "d", "font": "Serif", "pinned": True},
        ]
    )
    storage.remove("a", "b", "Arial")
    storage.remove("c", "d", "Serif")
    assert _collect(storage) == [[]]


def test_json_file_storage_missing_file_reads_empty(tmp_path: Path) -> None:
    storage = JsonFileNoteStorage(tmp_path / "nested" / "notes.json")
    assert _collect(storage) == [[]]


def test_json_file_storage_round_trip_on_disk(tmp_path: Path) -> None:
    path = tmp_path / "notes.json"
    storage = JsonFileNoteStorage(path)
    storage.persist("Groceries", "milk", "Georgia")
    storage.persist("Todo", "ship", "Arial")
    storage.remove("Groceries", "milk", "Georgia")

    reopened = JsonFileNoteStorage(path)
    assert _collect(reopened) == [[{"title": "Todo", "content": "ship", "font": "Arial"}]]
    assert not list(tmp_path.glob(".notes-*"))


def test_json_file_storage_remove_matches_default_font(tmp_path: Path) -> None:
    path = tmp_path / "notes.json"
    path.write_text(json.dumps([{"title": "a", "content": "b"}]), encoding="utf-8")
    storage = JsonFileNoteStorage(path)
    storage.remove("a", "b", "Arial")
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_json_file_storage_passes_unvalidated_records_through(tmp_path: Path) -> None:
    path = tmp_path / "notes.json"
    path.write_text('[{"title": "a"}]', encoding="utf-8")
    assert _collect(JsonFileNoteStorage(path)) == [[{"title": "a"}]]


@pytest.mark.parametrize("content", ['{"title": "a"}', "not json"])
def test_json_file_storage_corrupt_file_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "notes.json"
    path.write_text(content, encoding="utf-8")
    storage = JsonFileNoteStorage(path)
    with pytest.raises(StorageError) as excinfo:
        storage.request_all(lambda raw: None)
    assert excinfo.value.backend_name == "json_file"


def test_download_sink_is_fifo_and_bounded() -> None:
    sink = CollectingDownloadSink(max_pending=2)
    sink.download_string("a.txt", "text/plain", "1")
    sink.download_string("b.txt", "text/plain", "2")
    sink.download_string("c.txt", "text/plain", "3")
    assert len(sink) == 2
    assert sink.pop().filename == "b.txt"
    assert sink.pop().filename == "c.txt"
    assert sink.pop() is None
