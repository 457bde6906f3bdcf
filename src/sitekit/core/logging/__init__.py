"""Structured logging setup.

Configures structlog once for the process. Every component then obtains its
logger with ``structlog.get_logger()`` and logs snake_case events with
key/value details, e.g. ``logger.error("cache_write_failed", file_path=path)``.
"""

import logging
from collections.abc import Iterable, MutableMapping
from typing import Any

import structlog

from sitekit.core.constants import DEFAULT_REDACT_PATHS, REDACTED_PLACEHOLDER


class RedactProcessor:
    """structlog processor that masks values at dotted key paths.

    ``"headers.Authorization"`` masks ``event_dict["headers"]["Authorization"]``.
    Nested mappings are copied before masking so caller data is untouched.
    """

    def __init__(self, paths: Iterable[str]) -> None:
        self.paths = [tuple(path.split(".")) for path in paths]

    def __call__(
        self, _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        for path in self.paths:
            self._redact(event_dict, path)
        return event_dict

    def _redact(self, data: MutableMapping[str, Any], path: tuple[str, ...]) -> None:
        head, *rest = path
        if head not in data:
            return
        if not rest:
            data[head] = REDACTED_PLACEHOLDER
            return
        child = data[head]
        if isinstance(child, MutableMapping):
            child = dict(child)
            data[head] = child
            self._redact(child, tuple(rest))


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    redact: Iterable[str] | None = None,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum log level name (DEBUG, INFO, WARNING, ERROR)
        json_output: Render JSON lines instead of the console format
        redact: Dotted key paths to mask; defaults to the Authorization header
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            RedactProcessor(DEFAULT_REDACT_PATHS if redact is None else redact),
            (
                structlog.processors.JSONRenderer()
                if json_output
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = [
    "RedactProcessor",
    "configure_logging",
]
