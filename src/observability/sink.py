"""
Error reporting side channel.

The query layer hands every failure to an `ErrorSink` before re-raising
it.  Sinks are fire-and-forget: their return value is ignored and they
must never raise.
"""
from __future__ import annotations

from typing import Any, Protocol

from src.core.logging import get_logger
from src.core.utils import stable_json



class ErrorSink(Protocol):
    def capture_exception(
        self,
        error: BaseException,
        tags: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None: ...


class LoggingErrorSink:
    """Reports errors to the application log at ERROR level."""

    def __init__(self, logger_name: str = __name__):
        self._logger = get_logger(logger_name)

    def capture_exception(
        self,
        error: BaseException,
        tags: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        tag_text = " ".join(f"{k}={v}" for k, v in sorted((tags or {}).items()))
        try:
            extra_text = stable_json(extra or {})
        except (TypeError, ValueError):
            extra_text = repr(extra)
        self._logger.error(
            "Captured %s | %s | extra=%s",
            type(error).__name__, tag_text, extra_text,
            exc_info=(type(error), error, error.__traceback__),
        )
