"""Interaction log - where the console prints messages meant for the user."""

from __future__ import annotations

import logging
from typing import Protocol

interaction_logger = logging.getLogger("pi.console.interaction")


class InteractionLog(Protocol):
    def emit(self, line: str) -> None:
        """Print one formatted line to the user."""
        ...


class LoggingInteractionLog:
    """Sends interaction lines to the ``pi.console.interaction`` logger.

    Lines are logged at INFO, which Python's last-resort handler does not
    show. Hosts using this sink must configure a handler and level for the
    logger, e.g. ``logging.basicConfig(level=logging.INFO)``.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or interaction_logger

    def emit(self, line: str) -> None:
        self._logger.info(line)


class ListInteractionLog:
    """Collects interaction lines in memory, for hosts that render them later."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def emit(self, line: str) -> None:
        self.lines.append(line)

    def clear(self) -> None:
        self.lines.clear()
