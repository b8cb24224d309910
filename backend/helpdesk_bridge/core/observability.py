from __future__ import annotations

import logging
from typing import Any, Protocol

MAX_CONTEXT_TEXT = 200
TRUNCATED_FIELDS = ("message", "response")


class ErrorReporter(Protocol):
    """Sink for operational failures that must not reach the caller."""

    def notify(self, event: str, /, **context: Any) -> None:
        """Record a failure together with correlating context."""


class LoggingErrorReporter:
    """Report failures as structured error log records."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("helpdesk_bridge.errors")

    def notify(self, event: str, /, **context: Any) -> None:
        cleaned = {key: truncate_context(key, value) for key, value in context.items()}
        details = " ".join(f"{key}={value}" for key, value in cleaned.items())
        self._logger.error("%s %s", event, details, extra={"context": cleaned})


def truncate_context(key: str, value: Any) -> Any:
    """Clamp free-text context values so reports stay small."""

    if key in TRUNCATED_FIELDS and isinstance(value, str) and len(value) > MAX_CONTEXT_TEXT:
        return value[:MAX_CONTEXT_TEXT] + "..."
    return value
