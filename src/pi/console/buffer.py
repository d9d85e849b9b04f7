"""Line buffer - a single line of text with a cursor."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pi.console.utils import graphemes


@runtime_checkable
class TextBuffer(Protocol):
    """Interface for the editable text of a console line.

    Offsets and lengths are counted in code points.
    """

    cursor: int

    def get_text(self) -> str:
        """Get the current text content."""
        ...

    def set_text(self, text: str) -> None:
        """Replace the whole text and move the cursor to its end."""
        ...

    def insert(self, pos: int, text: str) -> None:
        """Insert *text* at offset *pos*, leaving the cursor where it is."""
        ...

    def delete_prev(self, count: int) -> None:
        """Delete up to *count* characters immediately before the cursor."""
        ...

    def clear(self) -> None:
        """Empty the buffer and reset the cursor."""
        ...


class LineBuffer:
    """Single-line text with a cursor and an optional length limit."""

    def __init__(self, size: int | None = None) -> None:
        self._value: str = ""
        self._cursor: int = 0
        self._size = size

    # -- Text access ----------------------------------------------------------

    def get_text(self) -> str:
        return self._value

    def set_text(self, text: str) -> None:
        self._value = self._fit(text, 0)
        self._cursor = len(self._value)

    @property
    def cursor(self) -> int:
        return self._cursor

    @cursor.setter
    def cursor(self, pos: int) -> None:
        self._cursor = max(0, min(pos, len(self._value)))

    def __len__(self) -> int:
        return len(self._value)

    # -- Primitive edits ------------------------------------------------------

    def insert(self, pos: int, text: str) -> None:
        pos = max(0, min(pos, len(self._value)))
        text = self._fit(text, len(self._value))
        if not text:
            return
        self._value = self._value[:pos] + text + self._value[pos:]

    def delete_prev(self, count: int) -> None:
        count = max(0, min(count, self._cursor))
        if count == 0:
            return
        self._value = self._value[: self._cursor - count] + self._value[self._cursor :]
        self._cursor -= count

    def clear(self) -> None:
        self._value = ""
        self._cursor = 0

    def _fit(self, text: str, used: int) -> str:
        if self._size is None:
            return text
        return text[: max(0, self._size - used)]

    # -- Editing helpers for key handlers -------------------------------------

    def insert_at_cursor(self, text: str) -> None:
        before = len(self._value)
        self.insert(self._cursor, text)
        self._cursor += len(self._value) - before

    def cursor_left(self) -> None:
        if self._cursor > 0:
            last = graphemes(self._value[: self._cursor])[-1]
            self._cursor -= len(last)

    def cursor_right(self) -> None:
        if self._cursor < len(self._value):
            first = graphemes(self._value[self._cursor :])[0]
            self._cursor += len(first)

    def cursor_line_start(self) -> None:
        self._cursor = 0

    def cursor_line_end(self) -> None:
        self._cursor = len(self._value)

    def delete_char_backward(self) -> None:
        """Delete the grapheme cluster before the cursor."""
        if self._cursor > 0:
            self.delete_prev(len(graphemes(self._value[: self._cursor])[-1]))

    def delete_char_forward(self) -> None:
        """Delete the grapheme cluster under the cursor."""
        if self._cursor < len(self._value):
            gl = len(graphemes(self._value[self._cursor :])[0])
            self._value = self._value[: self._cursor] + self._value[self._cursor + gl :]
