"""
Custom middleware for the FastAPI application.
"""
import time
import logging
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.types import ASGIApp
import uuid

from ..config import settings
from ..database import get_db
from ..auth.repository import login_session_exists
from ..auth.exceptions import UnauthenticatedException, ForbiddenException
from ..exceptions import auth_error_response
from .permissions import AccessPolicy, Decision, DEFAULT_POLICY

# Set up logging
logger = logging.getLogger(__name__)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every portal request with a request id, status and duration.
    """
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and log information.

        Args:
            request: The incoming request
            call_next: The next middleware or endpoint handler

        Returns:
            Response: The response from the next handler
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        # Log request details
        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request {request_id} started: {request.method} {request.url.path} from {client_host}")

        # Record request start time
        start_time = time.time()

        # Process the request
        try:
            response = await call_next(request)

            # Calculate processing time
            process_time = time.time() - start_time

            # Add custom headers
            response.headers["X-Process-Time"] = str(process_time)
            response.headers["X-Request-ID"] = request_id

            # Log response details
            logger.info(
                f"Request {request_id} completed: {request.method} {request.url.path} "
                f"- Status: {response.status_code} - Duration: {process_time:.4f}s"
            )

            return response
        except Exception as e:
            # Log exception details
            process_time = time.time() - start_time
            logger.error(
                f"Request {request_id} failed: {request.method} {request.url.path} "
                f"- Error: {str(e)} - Duration: {process_time:.4f}s"
            )
            raise


class AuthorizationMiddleware(BaseHTTPMiddleware):
    """
    Applies the access policy to every request before it reaches a route.

    Must sit inside SessionMiddleware so the session is already decoded.
    A role claim only counts while its login (``sid``) is still on record;
    a session whose login has ended is cleared and treated as anonymous.
    """
    def __init__(self, app: ASGIApp, policy: AccessPolicy = DEFAULT_POLICY):
        super().__init__(app)
        self.policy = policy

    def _login_is_live(self, request: Request) -> bool:
        # Same provider the routes resolve, so test overrides apply here too
        provider = request.app.dependency_overrides.get(get_db, get_db)
        db_gen = provider()
        db = next(db_gen)
        try:
            return login_session_exists(db, request.session.get("sid"))
        finally:
            db_gen.close()

    async def dispatch(self, request: Request, call_next):
        role_claim = request.session.get("role") if "session" in request.scope else None
        if role_claim is not None and not self._login_is_live(request):
            logger.info(f"Ended login presented for user {request.session.get('user_id')}")
            request.session.clear()
            role_claim = None

        decision = self.policy.evaluate(request.url.path, role_claim)

        if decision == Decision.UNAUTHENTICATED:
            logger.info(f"Unauthenticated request to {request.url.path}")
            return auth_error_response(UnauthenticatedException())
        if decision == Decision.FORBIDDEN:
            logger.warning(f"Role {role_claim} denied access to {request.url.path}")
            return auth_error_response(ForbiddenException())

        return await call_next(request)


class FrameOptionsMiddleware(BaseHTTPMiddleware):
    """
    Allows the portal's pages to be framed only by pages from the same origin.
    """
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        return response


def setup_middlewares(app, policy: AccessPolicy = DEFAULT_POLICY):
    """
    Set up all custom middlewares for the application.

    Starlette wraps middlewares in reverse order of registration, so the
    last one added here sees the request first.

    Args:
        app: FastAPI application instance
        policy: Access policy enforced on every request
    """
    app.add_middleware(AuthorizationMiddleware, policy=policy)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.session_https_only,
    )
    app.add_middleware(FrameOptionsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
