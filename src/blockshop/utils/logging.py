"""Structured logging setup for Blockshop."""

import structlog
from pathlib import Path
from typing import Any
import os


def configure_logging() -> None:
    """
    Configure structlog for JSON logging to ~/.cache/blockshop/logs/blockshop.log.

    Log level can be controlled via BLOCKSHOP_LOG_LEVEL environment variable:
    - Set to "DEBUG" to see rewrite prompts, raw LLM lines and no-op edits
    - Defaults to "INFO" if not set

    Log levels:
    - DEBUG: LLM request payloads, raw response lines, ignored block references
    - INFO: User actions, view toggles, store rebuilds, rewrite summaries
    - WARNING: Malformed input, rejected rewrites, retry attempts
    - ERROR: Rewrite failures, HTTP errors

    Example:
        # Enable debug logging
        export BLOCKSHOP_LOG_LEVEL=DEBUG
        blockshop edit notes.txt

        # View logs with jq for readability:
        tail -f ~/.cache/blockshop/logs/blockshop.log | jq .
    """
    log_dir = Path.home() / ".cache" / "blockshop" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "blockshop.log"

    log_level = os.environ.get("BLOCKSHOP_LOG_LEVEL", "INFO").upper()

    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    if log_level not in valid_levels:
        log_level = "INFO"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a")),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("block_edited", block_id="block-0", kind="paragraph")
    """
    return structlog.get_logger(name)
