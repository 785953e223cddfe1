"""
Authentication routes: form login, logout and registration.
"""
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session
from typing import Optional
from urllib.parse import urlencode
import logging

from ..config import settings
from ..database import get_db
from ..core.permissions import landing_path_for
from .schemas import RegistrationRequest, AuthResult
from .service import register_user, authenticate_user
from .repository import create_login_session, delete_login_session
from .exceptions import (
    AuthException,
    EmailAlreadyExistsException,
    InvalidRoleException,
    ValidationFailedException,
)

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(tags=["Authentication"])

# Error codes appended to /register when the HTML form submission fails
REGISTER_ERROR_CODES = {
    EmailAlreadyExistsException: "email_exists",
    InvalidRoleException: "invalid_role",
    ValidationFailedException: "invalid_input",
}

# ============================================================================
# LOGIN / LOGOUT
# ============================================================================

@router.post("/perform_login", summary="Form Login")
async def login_route(
    request: Request,
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    db: Session = Depends(get_db)
):
    """
    Form login endpoint.

    Accepts the login name as ``email`` or, as classic login forms send it,
    ``username``.

    Returns:
        RedirectResponse: 302 to the landing path for the user's role

    Raises:
        InvalidCredentialsException: Unknown email or wrong password (401)
        PersistenceFailureException: The login could not be recorded (500)
    """
    user = await authenticate_user(db, email or username, password)
    sid = create_login_session(db, user, settings.session_max_age)

    # Fresh session on every login so no state survives from an earlier user
    request.session.clear()
    request.session.update({
        "sid": sid,
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
    })

    return RedirectResponse(landing_path_for(user.role), status_code=status.HTTP_302_FOUND)

@router.get("/logout", summary="Logout")
async def logout_route(request: Request, db: Session = Depends(get_db)):
    """
    End the session and return to the landing page.

    The login's ``sid`` row is deleted, so a copy of the old cookie is no
    longer accepted. Clearing the session makes SessionMiddleware expire
    the cookie.
    """
    if request.session:
        logger.info(f"Logout: User {request.session.get('user_id')}")
        delete_login_session(db, request.session.get("sid"))
    request.session.clear()
    return RedirectResponse("/", status_code=status.HTTP_302_FOUND)

# ============================================================================
# REGISTRATION
# ============================================================================

@router.api_route(
    "/api/register",
    methods=["GET", "POST"],
    response_model=AuthResult,
    summary="Register User (JSON)",
)
async def api_register_route(request: Request, db: Session = Depends(get_db)):
    """
    Registration endpoint for script and XHR clients.

    Reads ``email``, ``password``, ``role`` and optional ``name`` from the
    query string and, on POST, from the form body; form values take
    precedence.

    Returns:
        JSONResponse: ``{"success": bool, "message": str}``; 400 for duplicate
        email or bad input, 500 when the store fails
    """
    params = dict(request.query_params)
    if request.method == "POST":
        form = await request.form()
        params.update({key: value for key, value in form.items() if isinstance(value, str)})

    data = RegistrationRequest.model_validate(params)
    await register_user(
        db=db,
        email=data.email,
        password=data.password,
        role=data.role,
        full_name=data.full_name,
    )
    return AuthResult(success=True, message="Registration successful")

@router.post("/register", summary="Register User (HTML form)")
async def form_register_route(
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    db: Session = Depends(get_db)
):
    """
    Registration endpoint for the HTML registration page.

    Uses the same service as ``/api/register`` but answers with redirects:
    ``/?registered`` on success, ``/register?error=<code>`` on failure.
    """
    try:
        await register_user(db=db, email=email, password=password, role=role, full_name=name)
    except AuthException as e:
        code = REGISTER_ERROR_CODES.get(type(e), "server_error")
        return RedirectResponse(
            f"/register?{urlencode({'error': code})}", status_code=status.HTTP_302_FOUND
        )

    return RedirectResponse("/?registered", status_code=status.HTTP_302_FOUND)
