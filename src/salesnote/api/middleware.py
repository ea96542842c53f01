"""Middleware for request ids and HTTP error logging."""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from salesnote.core.logging import request_id_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class HTTPErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to tag requests with an id and ensure all HTTP errors are logged.

    - 4xx responses: logged at WARN level
    - 5xx responses: logged at ERROR level
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_context.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_context.reset(token)

        duration_ms = (time.time() - start_time) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        log_extra = {
            "http_status": response.status_code,
            "method": request.method,
            "path": request.url.path,
            "request_id": request_id,
            "duration_ms": duration_ms,
        }
        if 400 <= response.status_code < 500:
            logger.warning("Client error response", extra=log_extra)
        elif response.status_code >= 500:
            logger.error("Server error response", extra=log_extra)

        return response
