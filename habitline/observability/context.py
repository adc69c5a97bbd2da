"""
Request context: a contextvar carrying the current request ID.
"""

import contextvars
import uuid

_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def get_request_id() -> str | None:
    return _request_id_var.get()


def set_request_id(request_id: str) -> contextvars.Token:
    """Set the request ID in context. Returns token for reset."""
    return _request_id_var.set(request_id)


def generate_request_id() -> str:
    return f"req-{uuid.uuid4().hex[:16]}"


class RequestContext:
    """
    Scope a request ID over a block; every log line inside carries it.

    Usage:
        with RequestContext() as ctx:
            logger.info("Dropped habit")

        with RequestContext(request_id="req-abc123"):
            ...
    """

    def __init__(self, request_id: str | None = None):
        self.request_id = request_id or generate_request_id()
        self._token: contextvars.Token | None = None

    def __enter__(self) -> "RequestContext":
        self._token = set_request_id(self.request_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _request_id_var.reset(self._token)
            self._token = None
