"""
API middleware: request logging and unified error responses.

Every error leaves the API as:
{
    "error": {"code": "ERROR_CODE", "message": "Human-readable message"},
    "status": 409
}
"""

import logging
import time
from typing import Callable

from aiohttp import web

from boneled.exceptions import (
    BoneLedError,
    DeviceNotFoundError,
    TransitionInProgressError,
    TransitionNotAllowedError,
)

logger = logging.getLogger(__name__)

# Most specific first
_ERROR_STATUS: list[tuple[type[BoneLedError], str, int]] = [
    (DeviceNotFoundError, "DEVICE_NOT_FOUND", 404),
    (TransitionNotAllowedError, "TRANSITION_NOT_ALLOWED", 409),
    (TransitionInProgressError, "TRANSITION_IN_PROGRESS", 409),
]


def create_error_response(code: str, message: str, status: int = 400) -> web.Response:
    """Create standardized error response."""
    return web.json_response(
        {"error": {"code": code, "message": message}, "status": status},
        status=status,
    )


@web.middleware
async def request_logging_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """Log method, path, status and timing of every request."""
    start_time = time.perf_counter()
    response = await handler(request)
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info("%s %s -> %d (%.1f ms)", request.method, request.path, response.status, elapsed_ms)
    return response


@web.middleware
async def error_handling_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """Catch errors and format them as JSON responses."""
    try:
        return await handler(request)
    except web.HTTPException as e:
        return create_error_response(
            e.reason.upper().replace(" ", "_") if e.reason else "HTTP_ERROR",
            e.text or str(e),
            status=e.status,
        )
    except BoneLedError as e:
        for error_type, code, status in _ERROR_STATUS:
            if isinstance(e, error_type):
                logger.warning("%s %s: %s", request.method, request.path, e.technical_message)
                return create_error_response(code, e.user_message, status=status)

        logger.error("%s %s failed: %s", request.method, request.path, e.technical_message)
        return create_error_response("SERVER_ERROR", e.user_message, status=500)
    except Exception as e:
        logger.exception("Unexpected error handling %s %s", request.method, request.path)
        return create_error_response(
            "INTERNAL_ERROR", f"An unexpected error occurred ({type(e).__name__})", status=500
        )
