"""Centralized logging service using loguru."""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger

from research_chat.config import settings

# Loggers of the server and the HTTP clients behind Exa, OpenAI and Supabase.
NOISY_LOGGERS = (
    "uvicorn.error",
    "uvicorn.access",
    "httpx",
    "httpcore",
    "openai._base_client",
)

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def configure_logging(log_dir: str, level: str, noisy_level: str) -> Path:
    """Install the console and daily file sinks; returns the log directory."""
    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper(), colorize=True)
    logger.add(
        path / "research_chat_{time:YYYY-MM-DD}.log",
        format=FILE_FORMAT,
        level="DEBUG",
        rotation="00:00",
        retention="7 days",
        compression="zip",
    )

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level.upper())
    return path


LOG_DIR = configure_logging(settings.log_dir, settings.app_log_level, settings.noisy_log_level)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def log_llm_call(
    model: str,
    caller: str,
    input_tokens: int = 0,
    output_tokens: int = 0,
    duration_ms: int = 0,
    status: str = "success",
    error: Optional[str] = None,
) -> None:
    """Log a chat-completions call."""
    call_data = {
        "timestamp": _now(),
        "model": model,
        "caller": caller,
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": input_tokens + output_tokens,
        "duration_ms": duration_ms,
        "status": status,
        "error": error,
    }
    if error:
        logger.error(f"LLM_CALL_FAILED: {call_data}")
    else:
        logger.info(f"LLM_CALL: {call_data}")


def log_search_call(
    query: str,
    results_count: int = 0,
    duration_ms: int = 0,
    autoprompt: Optional[str] = None,
    error: Optional[str] = None,
) -> None:
    """Log a search provider call."""
    search_data = {
        "timestamp": _now(),
        "query": query[:100],
        "results_count": results_count,
        "duration_ms": duration_ms,
        "autoprompt": autoprompt,
        "error": error,
    }
    if error:
        logger.error(f"SEARCH_CALL_FAILED: {search_data}")
    else:
        logger.info(f"SEARCH_CALL: {search_data}")


def log_db_operation(
    operation: str,
    table: str,
    status: str,
    details: Optional[str] = None,
    error: Optional[str] = None,
) -> None:
    """Log a database operation."""
    op_data = {
        "timestamp": _now(),
        "operation": operation,
        "table": table,
        "status": status,
        "details": details,
        "error": error,
    }
    if error:
        logger.error(f"DB_OPERATION_FAILED: {op_data}")
    else:
        logger.info(f"DB_OPERATION: {op_data}")


def log_event(
    event_type: str,
    message: str,
    **kwargs,
) -> None:
    """Log a generic event."""
    event_data = {
        "timestamp": _now(),
        "event_type": event_type,
        "message": message,
        **kwargs,
    }
    logger.info(f"EVENT: {event_data}")
