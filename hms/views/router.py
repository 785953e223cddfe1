"""
Page routes: landing page, registration page and role dashboards.

Pages are static HTML files under ``pages/``; a view id such as
``admin/admin-dashboard`` names the file ``pages/admin/admin-dashboard.html``.
"""
from pathlib import Path
from types import MappingProxyType
from typing import Mapping
import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from ..auth.models import UserRole
from ..auth.exceptions import ViewNotFoundException
from ..core.permissions import ROLE_PREFIXES

logger = logging.getLogger(__name__)

PAGES_DIR = Path(__file__).resolve().parent / "pages"

LANDING_VIEW = "index"
REGISTER_VIEW = "forms/register"

DASHBOARD_VIEWS: Mapping[UserRole, str] = MappingProxyType({
    UserRole.ADMIN: "admin/admin-dashboard",
    UserRole.DOCTOR: "doctor/doctor-index",
    UserRole.PATIENT: "patient/patient-index",
    UserRole.STAFF: "staff/staff-index",
    UserRole.PHARMACY: "pharmacy/pharmacy-index",
})

_VIEWS_BY_PREFIX: Mapping[str, str] = MappingProxyType(
    {ROLE_PREFIXES[role]: view for role, view in DASHBOARD_VIEWS.items()}
)

router = APIRouter(tags=["Views"])


def resolve_dashboard_view(prefix: str) -> str:
    """
    Look up the dashboard view for a role-scoped URL prefix.

    Args:
        prefix: First path segment, e.g. ``admin``

    Returns:
        str: View id

    Raises:
        ViewNotFoundException: If no dashboard is registered for the prefix
    """
    try:
        return _VIEWS_BY_PREFIX[prefix]
    except KeyError:
        raise ViewNotFoundException()


def render_view(view_id: str) -> FileResponse:
    path = PAGES_DIR / f"{view_id}.html"
    if not path.is_file():
        logger.error(f"View {view_id} is registered but {path} is missing")
        raise ViewNotFoundException()
    return FileResponse(path, media_type="text/html")


@router.get("/", include_in_schema=False)
@router.get("/index", include_in_schema=False)
@router.get("/login", include_in_schema=False)
async def landing_page():
    return render_view(LANDING_VIEW)


@router.get("/register", include_in_schema=False)
async def register_page():
    return render_view(REGISTER_VIEW)


@router.get("/{prefix}/dashboard", include_in_schema=False)
async def dashboard_page(prefix: str):
    """Serve the dashboard for the role owning ``prefix``."""
    return render_view(resolve_dashboard_view(prefix))
