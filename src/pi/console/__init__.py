"""pi-console: Editable console command line with history and tab completion."""

# Line buffer
from pi.console.buffer import LineBuffer, TextBuffer

# Command language
from pi.console.commands import (
    Args,
    Command,
    CommandBuffer,
    CommandDispatcher,
    CommandRegistry,
    CompletionItem,
    CompletionProvider,
    CompletionResult,
    PendingCommand,
    escape,
    filter_completion,
    find_active_command,
    split_command,
    split_commands,
)

# Options
from pi.console.config import FieldOptions

# Console field
from pi.console.field import Field

# History
from pi.console.history import History, LineHistory

# Interaction output
from pi.console.log import InteractionLog, ListInteractionLog, LoggingInteractionLog

# Utilities
from pi.console.utils import (
    is_whitespace_char,
    longest_iprefix_size,
    longest_prefix_size,
    visible_width,
)

__all__ = [
    # Line buffer
    "LineBuffer",
    "TextBuffer",
    # Command language
    "Args",
    "Command",
    "CommandBuffer",
    "CommandDispatcher",
    "CommandRegistry",
    "CompletionItem",
    "CompletionProvider",
    "CompletionResult",
    "PendingCommand",
    "escape",
    "filter_completion",
    "find_active_command",
    "split_command",
    "split_commands",
    # Options
    "FieldOptions",
    # Console field
    "Field",
    # History
    "History",
    "LineHistory",
    # Interaction output
    "InteractionLog",
    "ListInteractionLog",
    "LoggingInteractionLog",
    # Utilities
    "is_whitespace_char",
    "longest_iprefix_size",
    "longest_prefix_size",
    "visible_width",
]
