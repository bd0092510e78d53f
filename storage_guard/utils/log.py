import logging
import sys

import structlog
from structlog.stdlib import LoggerFactory

RENDERERS = ("console", "json")


def configure_logging(log_level: str = "INFO", renderer: str = "console") -> None:
    """Configure structured logging"""
    # Check if already configured
    if structlog.is_configured():
        return

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper(), logging.INFO),
        stream=sys.stderr,  # Keep stdout for reports
        force=True,
    )

    if renderer == "json":
        final_processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            final_processor,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logger = structlog.get_logger()
    logger.debug("Logging configured", log_level=log_level, renderer=renderer)
