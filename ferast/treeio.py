"""Indented tree output with box-drawing branch markers."""

from __future__ import annotations

import io
from typing import TextIO


class TreeWriter:
    """Writes lines of a tree, keeping track of the open branch levels."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream: TextIO = stream if stream is not None else io.StringIO()
        self._tabs: list[bool] = []

    def push(self, show: bool) -> None:
        """Open a nested level; ``show`` keeps its vertical bar drawn below."""
        self._tabs.append(bool(show))

    def pop(self, num: int = 1) -> None:
        """Close ``num`` levels; does nothing if fewer are open."""
        if num > len(self._tabs):
            return
        del self._tabs[len(self._tabs) - num:]

    def _indent(self, has_next: bool) -> str:
        if not self._tabs:
            return ""
        parts = [" │" if show else "  " for show in self._tabs[:-1]]
        parts.append(" ├─" if has_next else " └─")
        return "".join(parts)

    def write(self, has_next: bool, *args: object) -> None:
        """Write the branch prefix for the current level followed by ``args``."""
        self._stream.write(self._indent(has_next))
        self.write_plain(*args)

    def write_plain(self, *args: object) -> None:
        """Write ``args`` without any branch prefix."""
        self._stream.write("".join(str(arg) for arg in args))

    def getvalue(self) -> str:
        """Return everything written so far (needs a stream that keeps its text)."""
        getter = getattr(self._stream, "getvalue", None)
        if getter is None:
            raise TypeError("the underlying stream does not keep its contents")
        return getter()