"""
FastAPI Application Entry Point

Food Menu Storefront - restaurant ordering with an admin back-office.
Storage backend (SQL / JSON file) and notification provider (Mock /
Telegram) are selected by configuration.

Endpoints:
    - /api/restaurants, /api/categories, /api/products: catalog
    - /api/carts: server-side cart and checkout
    - /api/orders: orders and Excel export
    - /api/settings: site settings and Telegram test
    - /api/auth: admin login / logout
    - /api/statistics/dashboard: dashboard aggregates
    - GET /dashboard: admin dashboard UI
    - GET /health: system health check

Version: 1.0.0
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import redis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from foodmenu.core.config import get_settings, setup_logging
from foodmenu.routers import (
    auth,
    carts,
    categories,
    orders,
    products,
    restaurants,
    settings as settings_router,
    statistics,
)
from foodmenu.routers.deps import NotifierDep, StorageDep
from foodmenu.schemas import ErrorResponse, HealthResponse
from foodmenu.seed import seed_defaults
from foodmenu.services.notifications import get_notification_service
from foodmenu.storage import get_storage

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

# Template configuration
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Storage: {settings.storage_backend.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    # Initialize storage
    storage = get_storage()
    await storage.init()
    await seed_defaults(storage)
    logger.info(f"✅ Storage initialized ({storage.backend_name})")

    # Log service configuration
    notification_service = get_notification_service()
    logger.info(f"✅ Notification Service: {notification_service.provider_name}")

    # Validate production config
    if settings.use_real_services:
        problems = settings.validate_production_config()
        if problems:
            logger.warning(f"⚠️ Insecure production config: {problems}")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await storage.close()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Restaurant ordering storefront: catalog, cart, checkout and an "
        "admin back-office with Telegram order notifications."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(restaurants.router, prefix="/api/restaurants", tags=["Restaurants"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(carts.router, prefix="/api/carts", tags=["Carts"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(settings_router.router, prefix="/api/settings", tags=["Settings"])
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(statistics.router, prefix="/api/statistics", tags=["Statistics"])


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍔 Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "dashboard": "/dashboard",
        "health": "/health",
    }


def _ping_redis() -> None:
    r = redis.Redis.from_url(settings.redis_url, socket_timeout=2, socket_connect_timeout=2)
    try:
        r.ping()
    finally:
        r.close()


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(storage: StorageDep, notifier: NotifierDep) -> HealthResponse:
    """Verify all system components are operational."""

    # Check storage
    storage_status = "healthy" if await storage.ping() else "unhealthy"

    # Check Redis
    redis_status = "healthy"
    try:
        await asyncio.to_thread(_ping_redis)
    except Exception as e:
        redis_status = f"unhealthy: {str(e)}"
        logger.error(f"Redis health check failed: {e}")

    # Check notification service
    notification_status = "healthy" if await notifier.health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [storage_status, redis_status, notification_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        storage=storage_status,
        storage_backend=storage.backend_name,
        redis=redis_status,
        notification_service=notification_status,
        timestamp=datetime.now(timezone.utc),
    )


# =============================================================================
# DASHBOARD
# =============================================================================

@app.get(
    "/dashboard",
    response_class=HTMLResponse,
    tags=["Dashboard"],
)
async def dashboard_page(request: Request) -> HTMLResponse:
    """Serve the admin dashboard UI."""
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"app_name": settings.app_name, "currency": settings.currency_symbol},
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    body = ErrorResponse(
        error="Internal Server Error",
        detail=str(exc) if settings.debug else "An unexpected error occurred",
    )
    return JSONResponse(status_code=500, content=body.model_dump())
