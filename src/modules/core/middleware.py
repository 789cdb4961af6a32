import re
import time
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

logger = structlog.get_logger()


def resolve_request_id(raw: Optional[str]) -> str:
    """Return *raw* when it is a safe token, a fresh UUID4 otherwise."""
    if raw and _REQUEST_ID_RE.match(raw):
        return raw
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Tag every request with a correlation id.

    The id comes from the ``X-Request-ID`` header when the caller sends a
    usable one (letters, digits, ``.``, ``_``, ``-``; at most 64 chars).
    It is bound into structlog's contextvars, together with the tenant once
    the view resolves the caller's membership, and echoed back in the
    response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = resolve_request_id(request.META.get("HTTP_X_REQUEST_ID"))
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        started = time.monotonic()
        logger.info("request_started", method=request.method, path=request.path)

        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = cid
        return response
