"""
Request correlation for log records.

Every request gets an id (taken from X-Request-ID or generated) and, when
the caller sends one, the acting user id. Both live in context variables so
that a cascade several calls deep logs them without passing them around.
"""

import uuid
from contextvars import ContextVar
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.constants import ACTOR_HEADER

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
actor_id_var: ContextVar[Optional[str]] = ContextVar("actor_id", default=None)


def get_request_id() -> str:
    return request_id_var.get()


def get_actor() -> Optional[str]:
    """Raw actor header of the current request, unvalidated."""
    return actor_id_var.get()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Binds the request id and actor to the request context.

    The request id is echoed back in the response headers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        request_token = request_id_var.set(request_id)
        actor_token = actor_id_var.set(request.headers.get(ACTOR_HEADER))
        try:
            response = await call_next(request)
        finally:
            actor_id_var.reset(actor_token)
            request_id_var.reset(request_token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class CorrelationIdFilter:
    """Copies the request id and actor onto every log record."""

    def filter(self, record) -> bool:
        record.request_id = request_id_var.get() or "-"
        record.actor = actor_id_var.get() or "-"
        return True
