import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

import structlog


def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = False,
    logs_dir: Union[str, Path] = "logs",
) -> None:
    """Set up logging configuration for deltanote.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to rotating files in addition to console
        logs_dir: Directory for the log files
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.set_exc_info,
            # JSON for file logs, readable lines for the console
            (
                structlog.processors.JSONRenderer()
                if log_to_file
                else structlog.dev.ConsoleRenderer(colors=False)
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stderr keeps stdout free for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    if log_to_file:
        logs_path = Path(logs_dir)
        logs_path.mkdir(parents=True, exist_ok=True)

        app_handler = logging.handlers.RotatingFileHandler(
            logs_path / "deltanote.log", maxBytes=5 * 1024 * 1024, backupCount=5  # 5MB
        )
        app_handler.setLevel(logging.INFO)
        app_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
            )
        )
        root_logger.addHandler(app_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            logs_path / "errors.log", maxBytes=5 * 1024 * 1024, backupCount=10  # 5MB
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s - %(exc_info)s"
            )
        )
        root_logger.addHandler(error_handler)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (defaults to "deltanote")

    Returns:
        Structured logger routed through the standard library handlers
    """
    return structlog.get_logger(name or "deltanote")


def log_delta_event(
    event: str, details: Dict[str, Any], logger: Optional[structlog.BoundLogger] = None
) -> None:
    """Log a scheduling event (tagging, resurfacing, completion) with context.

    Args:
        event: Short event name, e.g. "resurface"
        details: Event-specific details (document, line, interval, due date)
        logger: Logger to use (creates one if not provided)
    """
    if logger is None:
        logger = get_logger("deltanote.schedule")

    logger.info(f"Delta {event}", event_type=event, **details)
