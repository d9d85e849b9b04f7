"""Options for a console field."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FieldOptions:
    """Controls line length, history and completion output of a Field."""

    size: int | None = None
    history_size: int = 100
    default_command: str = ""
    completion_marker: str = "-> "
    candidate_indent: int = 3
