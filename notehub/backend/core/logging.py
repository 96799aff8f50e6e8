"""
Structured logging for notehub.

setup_logging() runs once, from the app factory or from run.py. Every other
module asks get_logger(__name__) for a structlog logger and never configures
handlers itself. Settings live in config/settings/logging.yaml; arguments to
setup_logging win over the file.

Besides structlog's timestamp, level, logger and event, notehub records carry:
    note_id     - note touched by a store operation
    operation   - store operation that failed (create_note, advance_review, ...)
    request_id  - X-Request-ID of the HTTP request being served
    source      - "web" for the browser client, "api" for other HTTP callers,
                  "cli" for run.py

The console renders JSON or coloured text. The optional file handler always
writes JSON lines, rotated by size.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from notehub.backend.core.config import find_project_root, load_yaml_config

# Chatty third-party loggers held at WARNING whatever the configured level
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "multipart")

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """Read logging.yaml once per process."""
    global _logging_config
    if _logging_config is None:
        _logging_config = load_yaml_config("logging.yaml")
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def _pre_chain() -> list[Processor]:
    """Processors shared by structlog loggers and plain stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _jsonl_handler(file_config: dict[str, Any], pre_chain: list[Processor]) -> logging.Handler:
    log_path = _resolve_log_path(file_config["path"])
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config["max_bytes"],
        backupCount=file_config["backup_count"],
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer(), pre_chain))
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Route structlog and stdlib logging through the root logger's handlers.

    Args:
        level: Log level name (DEBUG, INFO, ...). Overrides logging.yaml.
        format_type: Console output, 'json' or 'console'. Overrides logging.yaml.
        enable_console: Write to stdout. Overrides logging.yaml.
        enable_file_logging: Write the JSONL file. Overrides logging.yaml.

    Raises:
        AttributeError: If level is not a logging level name
    """
    config = _load_logging_config()
    handlers = config["handlers"]

    if level is None:
        level = config["level"]
    if format_type is None:
        format_type = config["format"]
    if enable_console is None:
        enable_console = handlers["console"]["enabled"]
    if enable_file_logging is None:
        enable_file_logging = handlers["file"]["enabled"]

    log_level = getattr(logging, level.upper())
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    if enable_console:
        if format_type == "console":
            renderer: Processor = structlog.dev.ConsoleRenderer(colors=True)
        else:
            renderer = structlog.processors.JSONRenderer()
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(_formatter(renderer, pre_chain))
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        root_logger.addHandler(_jsonl_handler(handlers["file"], pre_chain))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log with an explicit source field.

    HTTP requests get their source from the request middleware. Code running
    outside a request, such as run.py, names its source here.

    Raises:
        AttributeError: If level is not a logger method
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
