from __future__ import annotations

"""
Declarative view of the editor model.

Design intent:
- Build a plain element tree from the model with no side effects.
- Tolerate fonts outside the known set for notes loaded from storage.
- Serialize to HTML with every attribute and text node escaped.
"""

import json
import re
from dataclasses import dataclass, field
from html import escape
from typing import Union

from notea.editor.model import FONTS, Model, Note, is_known_font
from notea.editor.update import can_save

_PREVIEW_CHARS = 80
_VOID_TAGS = {"input", "meta", "br"}
_GENERIC_FAMILIES = {"serif", "sans-serif"}
_CSS_CONTROL = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True)
class Element:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: tuple["Node", ...] = ()


Node = Union[Element, str]


def h(tag: str, attrs: dict[str, str] | None = None, *children: Node) -> Element:
    return Element(tag=tag, attrs=dict(attrs or {}), children=tuple(children))


def _msg(payload: dict[str, object]) -> str:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def _preview(content: str) -> str:
    flat = " ".join(content.split())
    if len(flat) <= _PREVIEW_CHARS:
        return flat
    return flat[:_PREVIEW_CHARS].rstrip() + "..."


def _font_style(font: str) -> str:
    if font.lower() in _GENERIC_FAMILIES:
        return f"font-family: {font.lower()}"
    # Fonts from storage are arbitrary text; keep them inside one CSS string.
    quoted = _CSS_CONTROL.sub(" ", font).replace("\\", "\\\\").replace('"', '\\"')
    return f'font-family: "{quoted}"'


def _font_options(selected: str) -> list[Element]:
    fonts = list(FONTS)
    if not is_known_font(selected):
        fonts.append(selected)
    options = []
    for name in fonts:
        attrs = {"value": name}
        if name == selected:
            attrs["selected"] = "selected"
        options.append(h("option", attrs, name))
    return options


def _note_item(index: int, note: Note) -> Element:
    record = note.as_record()
    return h(
        "li",
        {"class": "saved-note", "data-index": str(index)},
        h("span", {"class": "saved-note-title", "style": _font_style(note.font)}, note.title),
        h("span", {"class": "saved-note-preview"}, _preview(note.content)),
        h(
            "button",
            {"type": "button", "data-msg": _msg({"type": "load_note", "note": record})},
            "Load",
        ),
        h(
            "button",
            {"type": "button", "data-msg": _msg({"type": "delete_note", "note": record})},
            "Delete",
        ),
    )


def view(model: Model) -> Element:
    editor = h(
        "section",
        {"class": "editor"},
        h(
            "input",
            {
                "id": "note-title",
                "type": "text",
                "placeholder": "Title",
                "value": model.title,
                "data-msg-input": "edit_title",
            },
        ),
        h(
            "textarea",
            {
                "id": "note-content",
                "placeholder": "Write your note...",
                "style": _font_style(model.selected_font),
                "data-msg-input": "edit_content",
            },
            model.content,
        ),
        h(
            "select",
            {"id": "note-font", "data-msg-input": "select_font"},
            *_font_options(model.selected_font),
        ),
    )

    save_attrs = {"type": "button", "data-msg": _msg({"type": "save"})}
    if not can_save(model):
        save_attrs["data-disabled-hint"] = "Title and content are required"
    actions = h(
        "div",
        {"class": "actions"},
        h("button", save_attrs, "Save"),
        h("button", {"type": "button", "data-msg": _msg({"type": "download"})}, "Download"),
    )

    if model.saved_notes:
        listing: Node = h(
            "ul",
            {"class": "saved-notes"},
            *[_note_item(index, note) for index, note in enumerate(model.saved_notes)],
        )
    else:
        listing = h("p", {"class": "saved-notes-empty"}, "No saved notes yet.")

    return h(
        "main",
        {"class": "notea"},
        h("h1", {}, "Notea"),
        editor,
        actions,
        h("h2", {}, "Saved notes"),
        listing,
    )


def render_html(node: Node) -> str:
    if isinstance(node, str):
        return escape(node, quote=False)
    attrs = "".join(f' {name}="{escape(value, quote=True)}"' for name, value in node.attrs.items())
    if node.tag in _VOID_TAGS:
        return f"<{node.tag}{attrs}>"
    inner = "".join(render_html(child) for child in node.children)
    if node.tag == "textarea":
        # Parsers drop one newline right after the opening tag.
        inner = "\n" + inner
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"


_PAGE_SCRIPT = """
(function () {
  var base = document.body.getAttribute("data-endpoint");
  var queue = Promise.resolve();
  function post(payload) {
    return fetch(base + "/messages", {
      method: "POST",
      headers: {"Content-Type": "application/json"},
      body: JSON.stringify(payload)
    }).then(function (resp) { return resp.json(); });
  }
  // One chain for every message so the server sees them in event order.
  function send(payload) {
    var next = queue.then(function () { return post(payload); });
    queue = next.catch(function () {});
    return next;
  }
  document.querySelectorAll("[data-msg-input]").forEach(function (el) {
    el.addEventListener("change", function () {
      var type = el.getAttribute("data-msg-input");
      var payload = {type: type};
      payload[type === "select_font" ? "name" : "text"] = el.value;
      send(payload).then(function () {
        if (type === "select_font") { window.location.reload(); }
      });
    });
  });
  document.querySelectorAll("[data-msg]").forEach(function (el) {
    el.addEventListener("click", function () {
      send(JSON.parse(el.getAttribute("data-msg"))).then(function (state) {
        if (state.pending_downloads > 0) { window.location = base + "/download"; }
        setTimeout(function () { window.location.reload(); }, 50);
      });
    });
  });
})();
"""


def render_page(model: Model, *, endpoint: str) -> str:
    body = render_html(view(model))
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8"><title>Notea</title></head>'
        f'<body data-endpoint="{escape(endpoint, quote=True)}">{body}'
        f"<script>{_PAGE_SCRIPT}</script></body></html>"
    )
