"""Command language: tokenizing, separator splitting, escaping, dispatch and completion.

A command line holds one or more commands separated by ``;`` or newlines.
Each command is a whitespace-separated argument list where ``"..."`` quotes
an argument, a backslash escapes ``"`` and ``\\``, and ``//`` starts a
comment running to the end of the line.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Callable, Protocol

from pi.console.log import InteractionLog
from pi.console.utils import is_whitespace_char

logger = logging.getLogger(__name__)

COMMAND_SEPARATORS = frozenset({";", "\n"})
_ESCAPABLE = frozenset({'"', "\\"})


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


class Args:
    """Arguments of a single command, parsed from its text."""

    def __init__(self, text: str = "", *, escapes: bool = True) -> None:
        self._args: list[str] = _tokenize(text, escapes)

    @classmethod
    def from_list(cls, args: Sequence[str]) -> Args:
        result = cls()
        result._args = list(args)
        return result

    @property
    def argc(self) -> int:
        return len(self._args)

    def argv(self, index: int) -> str:
        """Return argument *index*, or an empty string if there is none."""
        if 0 <= index < len(self._args):
            return self._args[index]
        return ""

    def args(self, start: int = 0) -> list[str]:
        return self._args[start:]

    def __len__(self) -> int:
        return len(self._args)

    def __iter__(self) -> Iterator[str]:
        return iter(self._args)

    def __repr__(self) -> str:
        return f"Args({self._args!r})"


def _tokenize(text: str, escapes: bool) -> list[str]:
    tokens: list[str] = []
    i = 0
    n = len(text)

    while i < n:
        # Skip whitespace between tokens
        while i < n and is_whitespace_char(text[i]):
            i += 1
        if i >= n or text.startswith("//", i):
            break

        token: list[str] = []
        in_quotes = False
        while i < n:
            ch = text[i]
            if escapes and ch == "\\" and i + 1 < n and text[i + 1] in _ESCAPABLE:
                token.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_quotes = not in_quotes
                i += 1
                continue
            if not in_quotes and (is_whitespace_char(ch) or text.startswith("//", i)):
                break
            token.append(ch)
            i += 1

        tokens.append("".join(token))

    return tokens


# ---------------------------------------------------------------------------
# Separator splitting
# ---------------------------------------------------------------------------


def split_command(text: str, start: int = 0) -> int | None:
    """Find the end of the command starting at *start*.

    Returns the offset just past the first separator outside quotes and
    comments, or ``None`` if the command runs to the end of *text*.
    """
    i = start
    n = len(text)
    in_quotes = False

    while i < n:
        ch = text[i]
        if in_quotes:
            if ch == "\\" and i + 1 < n:
                i += 2
                continue
            if ch == '"':
                in_quotes = False
        elif ch == '"':
            in_quotes = True
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            return None if newline == -1 else newline + 1
        elif ch in COMMAND_SEPARATORS:
            return i + 1
        i += 1

    return None


def split_commands(text: str) -> list[str]:
    """Split *text* into its commands, separators removed."""
    commands: list[str] = []
    start = 0
    while True:
        end = split_command(text, start)
        if end is None:
            commands.append(text[start:])
            return commands
        commands.append(text[start : end - 1])
        start = end


def find_active_command(text: str) -> str:
    """Return the last command of *text*, the one a cursor at its end is in."""
    start = 0
    while (end := split_command(text, start)) is not None:
        start = end
    return text[start:]


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------


def escape(text: str) -> str:
    """Quote *text* so that it tokenizes back to exactly one argument."""
    if not text:
        return '""'

    needs_quotes = (
        any(is_whitespace_char(ch) or ch in COMMAND_SEPARATORS for ch in text)
        or "//" in text
    )
    escaped = "".join("\\" + ch if ch in _ESCAPABLE else ch for ch in text)
    return f'"{escaped}"' if needs_quotes else escaped


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True)
class CompletionItem:
    """A single completion candidate."""

    replacement: str
    description: str = ""


CompletionResult = list[CompletionItem]

ArgumentCompleter = Callable[[Args, int, str], CompletionResult]
CommandHandler = Callable[[Args], None]


class CompletionProvider(Protocol):
    def complete(self, args: Args, arg_num: int) -> CompletionResult:
        """Return candidates for argument *arg_num* of *args*."""
        ...


def filter_completion(prefix: str, candidates: Sequence[CompletionItem]) -> CompletionResult:
    """Keep the candidates whose replacement starts with *prefix*, ignoring case."""
    folded = prefix.casefold()
    return [c for c in candidates if c.replacement.casefold().startswith(folded)]


@dataclass
class Command:
    """A registered command with optional argument completion."""

    name: str
    handler: CommandHandler
    description: str = ""
    completer: ArgumentCompleter | None = None


class CommandRegistry:
    """Named commands, looked up case-insensitively.

    Also the default completion provider: argument 0 completes command
    names, later arguments are delegated to the command's completer.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def add(
        self,
        name: str,
        handler: CommandHandler,
        description: str = "",
        completer: ArgumentCompleter | None = None,
    ) -> Command:
        if not name or any(is_whitespace_char(ch) for ch in name):
            raise ValueError(f"Invalid command name: {name!r}")
        key = name.casefold()
        if key in self._commands:
            raise ValueError(f"Command {name} is already registered")
        command = Command(name=name, handler=handler, description=description, completer=completer)
        self._commands[key] = command
        return command

    def remove(self, name: str) -> None:
        self._commands.pop(name.casefold(), None)

    def get(self, name: str) -> Command | None:
        return self._commands.get(name.casefold())

    def __contains__(self, name: str) -> bool:
        return name.casefold() in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def complete(self, args: Args, arg_num: int) -> CompletionResult:
        prefix = args.argv(arg_num)

        if arg_num == 0:
            return filter_completion(
                prefix,
                [CompletionItem(c.name, c.description) for c in self._commands.values()],
            )

        command = self.get(args.argv(0))
        if command is None or command.completer is None:
            return []
        return command.completer(args, arg_num, prefix)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PendingCommand:
    text: str
    parse_escapes: bool = True


class CommandDispatcher(Protocol):
    def enqueue(self, text: str, parse_escapes: bool = True) -> None:
        """Buffer *text* for later execution, after everything already queued."""
        ...


class CommandBuffer:
    """FIFO queue of command text awaiting execution."""

    def __init__(self) -> None:
        self._queue: deque[PendingCommand] = deque()

    @property
    def pending(self) -> list[PendingCommand]:
        return list(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def enqueue(self, text: str, parse_escapes: bool = True) -> None:
        self._queue.append(PendingCommand(text=text, parse_escapes=parse_escapes))

    def execute(self, registry: CommandRegistry, log: InteractionLog) -> int:
        """Run every queued command in order; return how many commands ran.

        Commands queued while executing run in the same call.
        """
        executed = 0
        while self._queue:
            entry = self._queue.popleft()
            for text in split_commands(entry.text):
                args = Args(text, escapes=entry.parse_escapes)
                if args.argc == 0:
                    continue
                command = registry.get(args.argv(0))
                if command is None:
                    log.emit(f'Unknown command "{args.argv(0)}"')
                    continue
                logger.debug("Executing %r", args.args())
                command.handler(args)
                executed += 1
        return executed
