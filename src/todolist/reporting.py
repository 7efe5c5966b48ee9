from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Reporter(Protocol):
    def show_message(self, text: str, is_error: bool) -> None: ...


class LoggingReporter:
    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def show_message(self, text: str, is_error: bool) -> None:
        if is_error:
            self.log.error(text)
        else:
            self.log.info(text)


class CollectingReporter:
    """Keeps every message in memory, newest last."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, bool]] = []

    def show_message(self, text: str, is_error: bool) -> None:
        self.messages.append((text, is_error))

    @property
    def errors(self) -> list[str]:
        return [text for text, is_error in self.messages if is_error]
