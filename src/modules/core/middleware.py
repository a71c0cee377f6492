import re
import time
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"
# Client supplied ids are echoed into logs, so only accept plain tokens.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

logger = structlog.get_logger()


class CorrelationIdMiddleware:
    """Tag every log line of a request with one correlation id.

    The id comes from the ``X-Request-ID`` header when it is a plain token,
    otherwise a new UUID4 is generated.  It is bound into structlog's
    context variables for the duration of the request and echoed back in
    the response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        cid = incoming if _VALID_REQUEST_ID.match(incoming) else str(uuid.uuid4())
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        started = time.perf_counter()
        logger.info("http.request.started", method=request.method, path=request.path)

        response = self.get_response(request)

        logger.info(
            "http.request.finished",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = cid
        return response
