"""Custom Middleware"""

import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def request_log_context(request: Request) -> dict:
    """Correlation id plus, once the caller is authenticated, their role and branch."""
    context = {"correlation_id": getattr(request.state, "request_id", None)}
    actor = getattr(request.state, "actor", None)
    if actor is not None:
        context["actor_role"] = actor.role.value
        context["actor_branch_id"] = str(actor.branch_id) if actor.branch_id else None
        context["user_id"] = str(actor.user_id) if actor.user_id else None
    return context


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to each request, reusing the caller's if sent"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Log request processing time"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.6f}"

        logger.info(
            f"{request.method} {request.url.path}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query": str(request.url.query) or None,
                "status_code": response.status_code,
                "process_time": process_time,
                **request_log_context(request),
            }
        )

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to responses"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        # Ledger data must never be cached by intermediaries
        response.headers["Cache-Control"] = "no-store"

        return response
