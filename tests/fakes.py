"""Deterministic in-memory collaborators for exercising ``Field``.

Each fake satisfies one of the protocols ``Field`` depends on and records
the calls it receives so tests can assert on them.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from pi.console.commands import Args, CompletionItem, CompletionResult


class FakeBuffer:
    """Plain text + cursor, no length limit and no grapheme handling."""

    def __init__(self, text: str = "", cursor: int | None = None) -> None:
        self.text = text
        self.cursor = len(text) if cursor is None else cursor

    def get_text(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.text = text
        self.cursor = len(text)

    def insert(self, pos: int, text: str) -> None:
        self.text = self.text[:pos] + text + self.text[pos:]

    def delete_prev(self, count: int) -> None:
        count = min(count, self.cursor)
        self.text = self.text[: self.cursor - count] + self.text[self.cursor :]
        self.cursor -= count

    def clear(self) -> None:
        self.text = ""
        self.cursor = 0


class FakeHistory:
    """Records added lines and hands back scripted recall results."""

    def __init__(self, recall: Sequence[str] = ()) -> None:
        self.added: list[str] = []
        self.drafts: list[str] = []
        self._recall = list(recall)

    def prev_line(self, current: str) -> str:
        self.drafts.append(current)
        return self._recall.pop(0) if self._recall else current

    def next_line(self, current: str) -> str:
        self.drafts.append(current)
        return self._recall.pop(0) if self._recall else current

    def add(self, line: str) -> None:
        self.added.append(line)


class FakeDispatcher:
    def __init__(self) -> None:
        self.queued: list[tuple[str, bool]] = []

    def enqueue(self, text: str, parse_escapes: bool = True) -> None:
        self.queued.append((text, parse_escapes))


class FakeProvider:
    """Returns fixed candidates, optionally only for one argument index."""

    def __init__(
        self,
        candidates: Sequence[str | tuple[str, str]] = (),
        *,
        arg_num: int | None = None,
        by_arg: Callable[[Args, int], CompletionResult] | None = None,
    ) -> None:
        self._items = [
            CompletionItem(c) if isinstance(c, str) else CompletionItem(*c) for c in candidates
        ]
        self._arg_num = arg_num
        self._by_arg = by_arg
        self.calls: list[tuple[list[str], int]] = []

    def complete(self, args: Args, arg_num: int) -> CompletionResult:
        self.calls.append((args.args(), arg_num))
        if self._by_arg is not None:
            return self._by_arg(args, arg_num)
        if self._arg_num is not None and arg_num != self._arg_num:
            return []
        return list(self._items)
