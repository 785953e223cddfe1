"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from fastapi import FastAPI
import logging
from .auth.router import router as auth_router
from .views.router import router as views_router
from .database import SessionLocal, init_db
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares
from .core.bootstrap import bootstrap_admin_if_needed

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
init_db()

# Bootstrap admin creation
logger.info("🚀 Starting Hospital Management System...")
db = SessionLocal()
try:
    bootstrap_admin_if_needed(db)
except Exception as e:
    logger.error(f"❌ Bootstrap process failed: {str(e)}")
finally:
    db.close()

# Create FastAPI application
app = FastAPI(
    title="Hospital Management System",
    description="Role-based portal for admins, doctors, patients, staff and pharmacy",
    version="1.0.0"
)

# Register exception handlers
register_exception_handlers(app)

# Session, access control, CORS and logging middleware
setup_middlewares(app)

# Include routers
app.include_router(auth_router)
app.include_router(views_router)

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy"}
