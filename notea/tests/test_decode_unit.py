import pytest

from notea.editor.decode import NoteDecodeError, decode_notes
from notea.editor.model import Note


def test_decode_defaults_missing_font_to_arial() -> None:
    assert decode_notes('[{"title":"A","content":"B"}]') == (Note("A", "B", "Arial"),)


def test_decode_keeps_explicit_font_even_if_unknown() -> None:
    assert decode_notes('[{"title":"A","content":"B","font":"Georgia"}]') == (Note("A", "B", "Georgia"),)
    assert decode_notes([{"title": "A", "content": "B", "font": "Wingdings"}]) == (
        Note("A", "B", "Wingdings"),
    )


def test_decode_preserves_storage_order_and_ignores_extra_keys() -> None:
    raw = [
        {"title": "z", "content": "1", "id": 7},
        {"title": "a", "content": "2", "font": "Serif"},
    ]
    assert decode_notes(raw) == (Note("z", "1"), Note("a", "2", "Serif"))


def test_decode_accepts_bytes_and_empty_list() -> None:
    assert decode_notes(b"[]") == ()
    assert decode_notes([]) == ()


@pytest.mark.parametrize(
    "raw",
    [
        '[{"title":"A"}]',
        '[{"content":"B"}]',
        '[{"title":1,"content":"B"}]',
        '[{"title":"A","content":"B","font":null}]',
        '[{"title":"A","content":"B","font":3}]',
        '[{"title":"A","content":"B"}, "oops"]',
        '{"title":"A","content":"B"}',
        '"notes"',
        "null",
        "not json",
        b"\xff\xfe",
        None,
        {"title": "A", "content": "B"},
    ],
)
def test_decode_rejects_malformed_payloads(raw) -> None:
    with pytest.raises(NoteDecodeError):
        decode_notes(raw)


def test_decode_failure_is_atomic_even_after_valid_entries() -> None:
    raw = [{"title": "A", "content": "B"}, {"title": "C", "content": False}]
    with pytest.raises(NoteDecodeError, match="index 1"):
        decode_notes(raw)
