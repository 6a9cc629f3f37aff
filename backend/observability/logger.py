"""
Logger configuration.

Configures stdout logging once per Lambda cold start. CloudWatch collects
stdout, so a single stream handler is all a function needs.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Configure Python logging with ISO timestamp and structured format.

    The Lambda runtime installs its own root handler; it is replaced so
    records are not emitted twice. Safe to call on every invocation.

    Args:
        level: Root logger level name
    """
    global _configured
    if _configured:
        return

    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    # Reduce noise from verbose third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)

    _configured = True
