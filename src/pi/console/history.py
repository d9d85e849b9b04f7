"""Submitted-line history with draft-preserving navigation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class LineHistory(Protocol):
    """Interface for the history a console field navigates."""

    def prev_line(self, current: str) -> str:
        """Return the entry before the current one, or *current* if none."""
        ...

    def next_line(self, current: str) -> str:
        """Return the entry after the current one, or the saved draft."""
        ...

    def add(self, line: str) -> None:
        """Record a submitted line."""
        ...


class History:
    """Previously submitted lines, oldest first.

    Navigation starts past the newest entry. The first step back saves the
    line being composed, and stepping forward past the newest entry gives it
    back.
    """

    def __init__(self, max_size: int = 100) -> None:
        self._lines: list[str] = []
        self._max_size = max_size
        self._index: int = 0
        self._unfinished: str = ""

    @property
    def entries(self) -> Sequence[str]:
        return tuple(self._lines)

    @property
    def browsing(self) -> bool:
        return self._index < len(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def prev_line(self, current: str) -> str:
        if self._index == 0:
            return current
        if not self.browsing:
            self._unfinished = current
        self._index -= 1
        return self._lines[self._index]

    def next_line(self, current: str) -> str:
        if not self.browsing:
            return current
        self._index += 1
        if self._index == len(self._lines):
            draft = self._unfinished
            self._unfinished = ""
            return draft
        return self._lines[self._index]

    def add(self, line: str) -> None:
        # Don't add consecutive duplicates
        if not self._lines or self._lines[-1] != line:
            self._lines.append(line)
            if len(self._lines) > self._max_size:
                del self._lines[: len(self._lines) - self._max_size]
        self._index = len(self._lines)
        self._unfinished = ""
