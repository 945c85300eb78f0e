"""Escaping and tag serialization."""

from __future__ import annotations

from collections.abc import Mapping


def escape_html(s: str | None) -> str:
    """Escape raw source so it renders as text.

    Ampersand goes first; otherwise the entities produced by the later
    replacements would be escaped a second time.
    """
    if not s:
        return ""
    return str(s).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attr_value(value: str | None) -> str:
    if not value:
        return ""
    # Values are always double-quoted on output; "<" is escaped as well so a
    # value can never look like markup to a lenient consumer.
    return str(value).replace("&", "&amp;").replace("<", "&lt;").replace('"', "&quot;")


def serialize_start_tag(name: str, attrs: Mapping[str, str] | None = None, *, self_closing: bool = False) -> str:
    """Serialize a start tag from already-escaped attribute values.

    An empty value is written as a bare attribute name.
    """
    parts: list[str] = ["<", name]
    if attrs:
        for key, value in attrs.items():
            if value:
                parts.extend([" ", key, '="', value, '"'])
            else:
                parts.extend([" ", key])
    parts.append(" />" if self_closing else ">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"
