"""
Observability module.

Provides stdout logging configuration and header redaction for request logs.
"""

from backend.observability.log_utils import redact_headers
from backend.observability.logger import configure_logging

__all__ = ["configure_logging", "redact_headers"]
