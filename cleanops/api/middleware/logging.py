"""
Request/Response logging middleware.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response

from cleanops.config.logging import get_logger
from cleanops.infrastructure.monitoring.metrics import record_api_request

logger = get_logger(__name__)


class LoggingMiddleware:
    """Request/Response logging middleware for FastAPI."""

    def __init__(self, app: FastAPI):
        self.app = app
        self.add_logging_middleware()

    def add_logging_middleware(self) -> None:
        """Add request/response logging middleware."""

        @self.app.middleware("http")
        async def logging_middleware(request: Request, call_next: Callable) -> Response:
            request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

            # Every log line emitted while handling the request carries these
            structlog.contextvars.clear_contextvars()
            structlog.contextvars.bind_contextvars(
                request_id=request_id,
                actor_id=request.headers.get("x-actor-id"),
            )

            start_time = time.time()

            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=str(request.query_params),
                client_host=request.client.host if request.client else None,
            )

            request.state.request_id = request_id

            try:
                response = await call_next(request)

                process_time = time.time() - start_time
                route = request.scope.get("route")
                record_api_request(
                    request.method,
                    route.path if route else request.url.path,
                    response.status_code,
                    process_time,
                )

                logger.info(
                    "Request completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    process_time=f"{process_time:.4f}s",
                )

                response.headers["X-Request-ID"] = request_id
                response.headers["X-Process-Time"] = f"{process_time:.4f}"

                return response

            except Exception as e:
                process_time = time.time() - start_time

                logger.error(
                    "Request failed",
                    method=request.method,
                    path=request.url.path,
                    error=str(e),
                    process_time=f"{process_time:.4f}s",
                )

                raise
            finally:
                structlog.contextvars.clear_contextvars()
