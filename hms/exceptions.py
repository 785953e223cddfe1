"""
Global exception handlers for the FastAPI application.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from .auth.exceptions import AuthException, ViewNotFoundException

# Set up logging
logger = logging.getLogger(__name__)

def auth_error_response(exc: AuthException) -> JSONResponse:
    """
    Render an authentication error in the portal's ``{success, message}`` shape.

    Args:
        exc: The exception instance

    Returns:
        JSONResponse: Error body with the exception's status code
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=exc.headers,
    )


async def auth_exception_handler(request: Request, exc: AuthException):
    """
    Handler for authentication and registration exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: ``{"success": false, "message": ...}``
    """
    logger.info(f"Auth error on {request.url.path}: {exc.status_code} {exc.detail}")
    return auth_error_response(exc)


async def not_found_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for framework HTTP errors such as unrouted paths.

    A 404 is answered like ViewNotFoundException so every missing page has
    the same body; other statuses keep FastAPI's default rendering.
    """
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.info(f"No route for {request.url.path}")
        return auth_error_response(ViewNotFoundException())
    return await http_exception_handler(request, exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Args:
        request: The request that caused the exception
        exc: The validation exception instance

    Returns:
        JSONResponse: Standardized error response with validation details
    """
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "errors": jsonable_encoder(exc.errors())
        }
    )


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AuthException, auth_exception_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
