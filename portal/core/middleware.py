"""
HTTP middleware.
"""

import time
import uuid

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from portal.core.logging import caller_identity, get_logger, request_id

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Stamps each request with a correlation id and the calling identity."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        request_token = request_id.set(correlation_id)
        identity_token = caller_identity.set(request.headers.get("X-Caller-Identity"))
        start_time = time.time()
        try:
            response = await call_next(request)
        finally:
            caller_identity.reset(identity_token)
            request_id.reset(request_token)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time": round(process_time, 4),
            },
        )

        response.headers["X-Request-ID"] = correlation_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


def register_middlewares(app: FastAPI) -> None:
    app.add_middleware(RequestContextMiddleware)
