"""
Error handling middleware.
Centralizes error handling and response formatting for the bot API.
"""
import json
import logging
import traceback
from typing import Callable, Optional

from fastapi import Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from visionchat.config.settings import get_settings

logger = logging.getLogger(__name__)


async def _get_request_body(request: Request) -> Optional[dict]:
    """
    Safely extract request body for error logging.
    """
    try:
        if hasattr(request.state, "body"):
            body_bytes = request.state.body
        else:
            body_bytes = await request.body()
            request.state.body = body_bytes

        if not body_bytes:
            return None

        return json.loads(body_bytes.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return None


def _bad_request(errors: list) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Bad Request",
            "message": "Request body must be JSON of the form {\"messages\": [string, ...]}",
            "details": jsonable_encoder(errors),
        },
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unparseable or ill-shaped request bodies as 400 instead of 422."""
    logger.warning(
        "Request validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": jsonable_encoder(exc.errors()),
        },
    )
    return _bad_request(exc.errors())


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for centralized error handling and logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
            return response

        except ValidationError as e:
            body = await _get_request_body(request)

            logger.warning(
                "Validation error",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "errors": e.errors(include_context=False),
                    "request_body": body,
                },
            )
            return _bad_request(e.errors(include_context=False))

        except Exception as e:
            body = await _get_request_body(request)

            tb_str = traceback.format_exc()
            is_production = get_settings().is_production

            logger.error(
                "Unhandled error",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "request_body": body,
                    "traceback": tb_str if not is_production else None,
                },
                exc_info=True,
            )

            # Don't expose internal errors in production
            if is_production:
                message = "An internal error occurred. Please try again later."
            else:
                message = f"{type(e).__name__}: {str(e)}"

            response_content = {
                "error": "Internal Server Error",
                "message": message,
            }

            if not is_production:
                response_content["details"] = {"traceback": tb_str}

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=response_content,
            )
