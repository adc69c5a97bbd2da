"""
Observability module: structured logging and request IDs.

Usage:
    from habitline.observability import configure_logging, get_logger, RequestContext

    configure_logging()
    logger = get_logger(__name__)

    with RequestContext() as ctx:
        logger.info("Dropped habit", extra={"offset": 83})
"""

from .context import RequestContext, generate_request_id, get_request_id, set_request_id
from .logging import CorrelationIdMiddleware, HumanFormatter, JSONFormatter, configure_logging, get_logger

__all__ = [
    "CorrelationIdMiddleware",
    "HumanFormatter",
    "JSONFormatter",
    "RequestContext",
    "configure_logging",
    "generate_request_id",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
