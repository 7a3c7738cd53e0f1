"""String helpers: splitting, escaping and list formatting."""

from __future__ import annotations

from collections.abc import Iterable

_ESCAPES = {
    "\0": "\\0",
    "\a": "\\a",
    "\b": "\\b",
    "\x1b": "\\e",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}

_UNESCAPES = {
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "e": "\x1b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def string_delim(text: str, delim: str) -> list[str]:
    """Split ``text`` on ``delim`` and trim spaces around each part."""
    if not delim:
        raise ValueError("delimiter must not be empty")
    if not text:
        return []
    return [part.strip(" ") for part in text.split(delim)]


def to_raw_string(data: str) -> str:
    """Escape backslashes and control characters."""
    return "".join("\\\\" if ch == "\\" else _ESCAPES.get(ch, ch) for ch in data)


def _unescape(data: str) -> str:
    out: list[str] = []
    chars = iter(data)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        following = next(chars, None)
        if following is None:
            out.append(ch)
        else:
            out.append(_UNESCAPES.get(following, following))
    return "".join(out)


def from_raw_string(data: str) -> str:
    """Turn backslash escapes back into the characters they stand for."""
    return _unescape(data)


def vec_to_str(items: Iterable[str]) -> str:
    """Format items as ``[a, b, c]``."""
    return "[" + ", ".join(items) + "]"


def remove_back_slash(text: str) -> str:
    """Return ``text`` with backslash escapes resolved."""
    return _unescape(text)


def view_back_slash(data: str) -> str:
    """Show control characters as escapes, leaving backslashes as they are."""
    return "".join(_ESCAPES.get(ch, ch) for ch in data)