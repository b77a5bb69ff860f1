import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import structlog

REVIEW_LOGGER_NAME = "review_activity"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
MB = 1024 * 1024


def _rotating_handler(
    path: Path, level: int, fmt: str, max_mb: int, backups: int
) -> logging.handlers.RotatingFileHandler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_mb * MB, backupCount=backups, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def setup_logging(
    log_level: str = "INFO", log_to_file: bool = True, logs_dir: Path = Path("logs")
) -> None:
    """Configure stdlib logging and structlog for the service.

    Console output always; with ``log_to_file`` three rotating files are
    added under ``logs_dir``: app.log (INFO+), errors.log (ERROR+) and
    review_activity.log (one JSON line per save, completion or delay).

    Args:
        log_level: Root level name; unknown names fall back to INFO
        log_to_file: Also write rotating log files
        logs_dir: Directory for the log files
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    renderer = structlog.processors.JSONRenderer() if log_to_file else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.set_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    if not log_to_file:
        return

    logs_dir.mkdir(parents=True, exist_ok=True)
    root.addHandler(_rotating_handler(logs_dir / "app.log", logging.INFO, FILE_FORMAT, 10, 5))
    root.addHandler(_rotating_handler(logs_dir / "errors.log", logging.ERROR, FILE_FORMAT, 5, 10))

    review_logger = logging.getLogger(REVIEW_LOGGER_NAME)
    for handler in list(review_logger.handlers):
        review_logger.removeHandler(handler)
        handler.close()
    review_logger.addHandler(
        _rotating_handler(logs_dir / "review_activity.log", logging.INFO, "%(message)s", 10, 10)
    )


def get_review_logger() -> structlog.stdlib.BoundLogger:
    """Structured logger for review activity."""
    return structlog.get_logger(REVIEW_LOGGER_NAME)


def log_review_activity(
    action: str,
    details: Dict[str, Any],
    logger: Optional[structlog.stdlib.BoundLogger] = None,
) -> None:
    """Record one review-related action with its context.

    Args:
        action: procedure_saved, review_completed or review_delayed
        details: Action-specific fields
        logger: Logger to use (the review logger if not provided)
    """
    logger = logger or get_review_logger()
    logger.info(
        f"Review activity: {action}",
        action=action,
        logged_at=datetime.now(timezone.utc).isoformat(),
        **details,
    )
