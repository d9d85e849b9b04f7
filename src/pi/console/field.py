"""Console field - the editable command line with history and tab completion.

The field owns one line of text and its cursor (through a ``TextBuffer``)
plus a ``LineHistory``. Submitted lines go to a ``CommandDispatcher``;
completion candidates come from a ``CompletionProvider`` and ambiguous
matches are listed on an ``InteractionLog``.
"""

from __future__ import annotations

import logging

from pi.console.buffer import LineBuffer, TextBuffer
from pi.console.commands import (
    Args,
    CommandBuffer,
    CommandDispatcher,
    CommandRegistry,
    CompletionItem,
    CompletionProvider,
    CompletionResult,
    escape,
    find_active_command,
)
from pi.console.config import FieldOptions
from pi.console.history import History, LineHistory
from pi.console.log import InteractionLog, LoggingInteractionLog
from pi.console.utils import (
    is_whitespace_char,
    longest_iprefix_size,
    longest_prefix_size,
    visible_width,
)

logger = logging.getLogger(__name__)

COMMAND_PREFIXES = ("/", "\\")


class Field:
    """A single console input line.

    Key handling is left to the host, which calls ``history_prev``,
    ``history_next``, ``run_command`` and ``auto_complete`` and edits the
    text through ``buffer``.
    """

    def __init__(
        self,
        options: FieldOptions | None = None,
        *,
        buffer: TextBuffer | None = None,
        history: LineHistory | None = None,
        dispatcher: CommandDispatcher | None = None,
        provider: CompletionProvider | None = None,
        log: InteractionLog | None = None,
    ) -> None:
        if options is None:
            options = FieldOptions()
        self._options = options

        self.buffer: TextBuffer = buffer if buffer is not None else LineBuffer(options.size)
        self.history: LineHistory = (
            history if history is not None else History(options.history_size)
        )
        self.dispatcher: CommandDispatcher = (
            dispatcher if dispatcher is not None else CommandBuffer()
        )
        self.provider: CompletionProvider = (
            provider if provider is not None else CommandRegistry()
        )
        self.log: InteractionLog = log if log is not None else LoggingInteractionLog()

    # -- Text access ----------------------------------------------------------

    def get_text(self) -> str:
        return self.buffer.get_text()

    def set_text(self, text: str) -> None:
        self.buffer.set_text(text)

    @property
    def cursor(self) -> int:
        return self.buffer.cursor

    # -- History --------------------------------------------------------------

    def history_prev(self) -> None:
        """Replace the line with the previous history entry."""
        self.buffer.set_text(self.history.prev_line(self.buffer.get_text()))

    def history_next(self) -> None:
        """Replace the line with the next history entry, or the saved draft."""
        self.buffer.set_text(self.history.next_line(self.buffer.get_text()))

    # -- Submission -----------------------------------------------------------

    def run_command(self, default_command: str | None = None) -> None:
        """Submit the line for execution and record it in history.

        A line starting with ``/`` or ``\\`` is a command line. Anything else
        is passed as a single argument to *default_command* when one is set,
        and run as a command line otherwise.
        """
        current = self.buffer.get_text()
        if not current:
            return

        if default_command is None:
            default_command = self._options.default_command

        if current[0] in COMMAND_PREFIXES:
            command_text = current[1:]
        elif not default_command:
            command_text = current
        else:
            command_text = f"{default_command} {escape(current)}"

        logger.debug("Submitting %r", command_text)
        self.dispatcher.enqueue(command_text, True)
        self.history.add(current)
        self.buffer.clear()

    # -- Completion -----------------------------------------------------------

    def auto_complete(self) -> CompletionResult:
        """Complete the argument under the cursor.

        The text shared by every candidate is spliced in. When more than one
        candidate remains they are listed on the interaction log. Returns the
        sorted, de-duplicated candidates (empty when nothing matched).
        """
        buf = self.buffer

        # Completion always works on a command line
        text = buf.get_text()
        if not text or text[0] not in COMMAND_PREFIXES:
            buf.insert(0, "/")
            if not buf.get_text().startswith("/"):
                logger.debug("Line is full, cannot complete")
                return []
            buf.cursor = buf.cursor + 1

        text = buf.get_text()
        cursor = buf.cursor

        # Only the last of several chained commands, up to the cursor, matters
        args = Args(find_active_command(text[1:cursor]))
        arg_num = args.argc - 1
        prefix = ""
        if args.argc == 0 or is_whitespace_char(text[cursor - 1]):
            arg_num += 1
        else:
            prefix = args.argv(arg_num)

        candidates = self._normalize(self.provider.complete(args, arg_num))
        if not candidates:
            logger.debug("No completion for argument %d of %r", arg_num, args.args())
            return candidates

        first = candidates[0].replacement
        prefix_size = len(first)
        max_width = 0
        for candidate in candidates:
            prefix_size = min(prefix_size, longest_iprefix_size(candidate.replacement, first))
            max_width = max(max_width, visible_width(candidate.replacement))

        completed = first[:prefix_size]

        # Let the user keep typing after a unique match, except inside paths
        if (
            len(candidates) == 1
            and not is_whitespace_char(text[cursor : cursor + 1])
            and not completed.endswith("/")
        ):
            completed += " "

        buf.delete_prev(len(prefix))
        pos = buf.cursor
        length = len(buf.get_text())
        buf.insert(pos, completed)

        # A line too short for the completion is left as it was
        if len(buf.get_text()) - length != len(completed):
            logger.debug("Line is full, cannot insert %r", completed)
            buf.set_text(text)
            buf.cursor = cursor
            return []
        buf.cursor = pos + len(completed)

        if len(candidates) >= 2:
            self._show_candidates(candidates, arg_num, prefix_size, max_width)

        return candidates

    @staticmethod
    def _normalize(candidates: CompletionResult) -> CompletionResult:
        unique: CompletionResult = []
        for candidate in sorted(candidates):
            if not unique or unique[-1].replacement != candidate.replacement:
                unique.append(candidate)
        return unique

    def _show_candidates(
        self,
        candidates: CompletionResult,
        arg_num: int,
        prefix_size: int,
        max_width: int,
    ) -> None:
        indent = " " * self._options.candidate_indent
        self.log.emit(f"{self._options.completion_marker}{self.buffer.get_text()}")

        def show(candidate: CompletionItem) -> None:
            filler = " " * (max_width - visible_width(candidate.replacement))
            line = f"{indent}{candidate.replacement}{filler} {candidate.description}"
            self.log.emit(line if candidate.description else line.rstrip())

        # Argument values are listed as they are
        if arg_num > 1:
            for candidate in candidates:
                show(candidate)
            return

        # Command names sharing a namespace beyond the common prefix are
        # collapsed into one line. Candidates are sorted, so each namespace
        # is a contiguous run starting at i and ending at last.
        i = 0
        while i < len(candidates):
            name = candidates[i].replacement
            ns_len = 0
            j = i + 1
            while j < len(candidates):
                common = longest_prefix_size(name, candidates[j].replacement)
                ns = name.rfind(".", 0, common + 1)
                if ns == -1 or ns == common or ns < prefix_size:
                    break
                ns_len = ns
                j += 1

            last = j - 1
            if last == i:
                show(candidates[i])
            else:
                self.log.emit(f"{indent}{name[:ns_len]}.{{x{last - i + 1}}}")
            i = last + 1
