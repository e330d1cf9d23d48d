"""
Structured logging for paperchat.

Modules log through structlog with event-style names ("turn_started",
"tool_executed") and keyword context. While a turn runs, the chat id and
model are bound as context variables, so every event emitted by the turn,
its tools and its collaborators carries them without passing them along.

The chat itself owns stdout; log lines go to stderr and, when a log file
is configured, as JSON into a rotating file.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from ..core.config import ChatConfig

DATA_URL_PREVIEW = 48


def _shorten(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("data:") and len(value) > DATA_URL_PREVIEW:
        return f"{value[:DATA_URL_PREVIEW]}...<{len(value)} chars>"
    if isinstance(value, list):
        return [_shorten(item) for item in value]
    if isinstance(value, dict):
        return {key: _shorten(item) for key, item in value.items()}
    return value


def shorten_data_urls(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Processor that keeps base64 image attachments out of log lines."""
    return {key: _shorten(value) for key, value in event_dict.items()}


@contextmanager
def turn_context(chat_id: str, model: str) -> Iterator[None]:
    """Bind the chat id and model to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(chat_id=chat_id, model=model):
        yield


def setup_file_logging(
    log_file: Path, max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5
) -> RotatingFileHandler:
    """
    Rotating handler that writes one JSON object per event.

    Creates the log directory if needed.
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    return handler


def setup_logging(config: "ChatConfig | None" = None) -> None:
    """
    Configure structlog for the chat.

    Without a log file events are rendered straight to stderr. With one,
    they are routed through the stdlib root logger so the same event lands
    in the file as JSON and on stderr for the console.
    """
    if config is None:
        from ..core.config import get_config

        config = get_config()

    level = getattr(logging, config.log_level.value, logging.INFO)
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        shorten_data_urls,
    ]

    if config.log_file is None:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)
        processors = shared_processors + [structlog.dev.ConsoleRenderer()]
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.dev.ConsoleRenderer(colors=False),
                ],
            )
        )

        root_logger = logging.getLogger()
        root_logger.addHandler(
            setup_file_logging(config.log_file, config.log_max_bytes, config.log_backup_count)
        )
        root_logger.addHandler(console_handler)
        root_logger.setLevel(level)

        logger_factory = structlog.stdlib.LoggerFactory()  # type: ignore[assignment]
        processors = shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter]

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
