"""Structured logging setup for the WWDC scraper."""

import logging
import structlog
from pathlib import Path
from typing import Dict, Any, Optional, TextIO


def setup_logging(verbose: bool = False, log_file: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> None:
    """Setup structured logging configuration.

    Args:
        verbose: Emit debug-level progress (every fetch and skip)
        log_file: Optional path of a file receiving a copy of the log
        stream: Console stream, stderr by default
    """
    handlers = [logging.StreamHandler(stream)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(message)s',
        handlers=handlers,
        force=True
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_api_request(url: str, method: str = "GET", response_time: float = None,
                    status_code: int = None) -> Dict[str, Any]:
    """Create structured log data for HTTP requests."""
    log_data = {
        "url": url,
        "method": method,
    }

    if response_time is not None:
        log_data["response_time"] = round(response_time, 3)
    if status_code is not None:
        log_data["status_code"] = status_code

    return log_data


def log_skip(unit: str, reason: str, **context) -> Dict[str, Any]:
    """Create structured log data for a skipped unit of work."""
    return {
        "unit": unit,
        "reason": reason,
        **context
    }
