"""
Observability module.

Provides structured logging, correlation ID tracking and request
logging middleware.
"""

from user_portal.observability.correlation import get_correlation_id, set_correlation_id
from user_portal.observability.logger import configure_logging
from user_portal.observability.log_utils import log_with_context, redact

__all__ = ["configure_logging", "log_with_context", "redact", "get_correlation_id", "set_correlation_id"]
