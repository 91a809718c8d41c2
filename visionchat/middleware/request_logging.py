"""
Request logging middleware.
Logs HTTP requests and responses for monitoring and debugging.
"""
import json
import logging
import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    def __init__(self, app, ignore_paths: tuple = ()):
        super().__init__(app)
        self.ignore_paths = ignore_paths or (
            "/api/health",
            "/docs",
            "/openapi.json",
            "/redoc",
            "/favicon.ico",
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip logging for ignored paths
        if request.url.path in self.ignore_paths:
            return await call_next(request)

        start_time = time.time()

        request_log = {
            "type": "request",
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client_ip": self._get_client_ip(request),
            "user_agent": request.headers.get("user-agent"),
            "timestamp": start_time,
        }

        # Conversation text stays out of the logs; only its size is recorded
        if request.method == "POST":
            turns = await self._count_turns(request)
            if turns is not None:
                request_log["turns"] = turns

        logger.info(json.dumps(request_log))

        response = await call_next(request)

        # For streamed replies this is time to first byte, not total duration
        process_time = time.time() - start_time

        response_log = {
            "type": "response",
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": round(process_time * 1000, 2),
            "client_ip": self._get_client_ip(request),
            "timestamp": time.time(),
        }

        if response.status_code >= 500:
            logger.error(json.dumps(response_log))
        elif response.status_code >= 400:
            logger.warning(json.dumps(response_log))
        else:
            logger.info(json.dumps(response_log))

        response.headers["X-Process-Time"] = str(process_time)

        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address from request."""
        # Check for forwarded headers (when behind proxy)
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"

    async def _count_turns(self, request: Request) -> Optional[int]:
        """
        Number of turns in a bot request body.
        Returns None if the body cannot be read or has no message list.
        """
        try:
            if hasattr(request.state, "body"):
                body_bytes = request.state.body
            else:
                # Cache for the error handler
                body_bytes = await request.body()
                request.state.body = body_bytes

            if not body_bytes:
                return None

            body_data = json.loads(body_bytes.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            # Don't fail request if body parsing fails
            return None

        if isinstance(body_data, dict) and isinstance(body_data.get("messages"), list):
            return len(body_data["messages"])

        return None
