"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PlayerFinderError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code

    def to_payload(self) -> dict:
        return {"error": str(self)}


class ClientError(PlayerFinderError):
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(PlayerFinderError):
    def __init__(self, message: str):
        super().__init__(message, status_code=404)

    def to_payload(self) -> dict:
        return {"success": False, "error": str(self)}


class RateLimitedError(PlayerFinderError):
    def __init__(self, retry_after: int | None = None):
        super().__init__("Rate limit exceeded", status_code=429)
        self.retry_after = retry_after


class UpstreamError(PlayerFinderError):
    """A Roblox API call failed: network error, non-2xx status or bad payload."""

    def __init__(self, details: str):
        super().__init__(details, status_code=500)

    def to_payload(self) -> dict:
        return {"error": "Internal server error", "details": str(self)}


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(PlayerFinderError)
    async def handle_player_finder_error(request: Request, exc: PlayerFinderError):
        headers = None
        if isinstance(exc, RateLimitedError):
            logger.warning("Rate limit exceeded on %s", request.url.path)
            if exc.retry_after is not None:
                headers = {"Retry-After": str(exc.retry_after)}
        elif isinstance(exc, UpstreamError):
            logger.error("Error in %s: %s", request.url.path, exc)
        return JSONResponse(exc.to_payload(), status_code=exc.status_code, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_request: Request, exc: RequestValidationError):
        return JSONResponse(
            {"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error in %s: %s", request.url.path, exc)
        return JSONResponse(
            {"error": "Internal server error", "details": str(exc)},
            status_code=500,
        )
