"""Structured logging configuration using structlog."""

import logging
import logging.handlers
import re
import sys
from pathlib import Path
from typing import Any, MutableMapping

import structlog
from structlog.types import Processor

# Event keys whose values identify a person and never reach the log verbatim
CONTACT_KEYS = frozenset({"address", "email", "phone_number", "push_token", "to"})

_SIZE_PATTERN = re.compile(r"^(\d+)\s*(B|KB|MB|GB)?$")
_SIZE_UNITS = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}


def mask_contact(value: Any) -> Any:
    """Keep just enough of an address to tell recipients apart."""
    if not isinstance(value, str) or not value:
        return value
    if "@" in value:
        local, _, domain = value.partition("@")
        return f"{local[:1]}***@{domain}"
    return f"***{value[-4:]}" if len(value) > 4 else "***"


def mask_contact_details(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking recipient addresses."""
    for key in CONTACT_KEYS.intersection(event_dict):
        event_dict[key] = mask_contact(event_dict[key])
    return event_dict


def setup_logging(
    level: str = "INFO",
    format_type: str = "structured",
    file_enabled: bool = True,
    file_path: str = "data/herald.log",
    max_file_size: str = "10MB",
    backup_count: int = 5,
) -> None:
    """
    Set up application logging with structlog.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'structured' for JSON in files, 'plain' for console text
        file_enabled: Also write to a rotating log file
        file_path: Path to log file
        max_file_size: Rotation size such as "10MB"
        backup_count: Number of rotated files to keep
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    structlog.configure(
        processors=_processors(_renderer(format_type, file_enabled)),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if file_enabled:
        handler = logging.handlers.RotatingFileHandler(
            filename=_ensure_parent(file_path),
            maxBytes=parse_file_size(max_file_size),
            backupCount=backup_count,
        )
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logging.getLogger().addHandler(handler)


def _processors(renderer: Processor) -> list[Processor]:
    return [
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        mask_contact_details,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def _renderer(format_type: str, file_enabled: bool) -> Processor:
    if format_type == "structured" and file_enabled:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=format_type == "plain")


def _ensure_parent(file_path: str) -> Path:
    log_file = Path(file_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return log_file


def parse_file_size(size: str) -> int:
    """Parse "512KB" / "10MB" / "1024" into bytes."""
    match = _SIZE_PATTERN.match(size.strip().upper())
    if match is None:
        raise ValueError(f"Invalid file size: {size!r}")
    number, unit = match.groups()
    return int(number) * _SIZE_UNITS[unit or "B"]


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, named after the calling module by convention."""
    return structlog.get_logger(name)


def log_audit_event(event: str, user_id: Any = None, **context: Any) -> None:
    """
    Record an alert lifecycle change on the ``audit`` logger.

    Args:
        event: What happened, e.g. "alert_sent"
        user_id: User responsible for the change, if known
        **context: Alert id, counts and other details
    """
    get_logger("audit").info("Audit event", audit_event=event, user_id=user_id, **context)
