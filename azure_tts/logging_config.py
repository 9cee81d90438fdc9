# ABOUTME: Structured logging configuration for the Azure TTS client with stream ID tracking
# ABOUTME: Provides JSON or console logging through structlog and stream-scoped log context

import logging
import sys
from contextlib import contextmanager
from typing import Optional

import structlog


def configure_logging(
    log_level: str = "info",
    log_file: Optional[str] = None,
    enable_json: bool = True
) -> None:
    """
    Configure structured logging for the Azure TTS client.

    Both structlog loggers and standard library loggers (the ones the client
    modules use) are rendered through the same processor chain.

    Args:
        log_level: Logging level (debug, info, warning, error, critical)
        log_file: Optional file path for log output (defaults to stdout)
        enable_json: Whether to use JSON formatting (default True)
    """
    # Convert log level string to logging constant
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Clear any existing configuration
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        timestamper,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if enable_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    # Set up handler first
    if log_file:
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stdout)

    handler.setLevel(numeric_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    # Configure standard library logging
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def stream_id_context(stream_id: str):
    """
    Context manager binding a stream identifier to every log line emitted inside it.

    Args:
        stream_id: Identifier of the audio stream being produced
    """
    tokens = structlog.contextvars.bind_contextvars(stream_id=stream_id)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
