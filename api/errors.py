"""
Translate domain errors into JSON responses.

Full detail is logged server-side; response bodies stay generic.
"""
import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from oauth import FlipSideAuthError, NotAuthenticatedError
from spotify.errors import SpotifyApiError

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"error": error}
    body.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=body)


def summarize_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe location/message pairs"""
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in errors
    ]


async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError) -> JSONResponse:
    return error_response(401, "Not authenticated")


async def auth_error_handler(request: Request, exc: FlipSideAuthError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} authentication failed: {exc}")
    return error_response(401, "Authentication failed")


async def spotify_error_handler(request: Request, exc: SpotifyApiError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return error_response(500, exc.failure_message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} rejected invalid input")
    return error_response(400, "Invalid request", details=summarize_validation_errors(exc.errors()))


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers; the most specific exception class wins"""
    app.add_exception_handler(NotAuthenticatedError, not_authenticated_handler)
    app.add_exception_handler(FlipSideAuthError, auth_error_handler)
    app.add_exception_handler(SpotifyApiError, spotify_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
