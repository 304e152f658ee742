"""A bounded breadcrumb path used to say where in a config an error was found."""

from __future__ import annotations

__all__ = ["Trace"]

_MAX_DEPTH = 32
_BUFFER_SIZE = 4096


class Trace:
    """A stack of path segments rendered as "a: b: c"."""

    def __init__(self) -> None:
        self._buf = ""
        self._stack: list[int] = []

    def push(self, text: str) -> None:
        """Append a segment; ignored once the maximum depth is reached."""
        if len(self._stack) >= _MAX_DEPTH:
            return
        self._stack.append(len(self._buf))
        if len(self._stack) > 1:
            self._buf += ": "
        room = max(_BUFFER_SIZE - 1 - len(self._buf), 0)
        self._buf += text[:room]

    def pop(self) -> None:
        """Remove the last segment; does nothing when empty."""
        if not self._stack:
            return
        self._buf = self._buf[: self._stack.pop()]

    def __str__(self) -> str:
        return self._buf