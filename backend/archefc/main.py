from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from archefc import __version__
from archefc.api.routers import auth, fff, players, teams
from archefc.core.config import settings
from archefc.database import SessionLocal, init_db
from archefc.exceptions import (
    AppException,
    handle_app_exception,
    handle_generic_exception,
    handle_http_exception,
    handle_request_validation_error,
)
from archefc.services.fff import (
    backend_team_config_loader,
    build_fff_service,
    database_team_config_loader,
)

logging.basicConfig(
    level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def team_config_loader():
    """Team configurations come from our own database unless told to use the REST API."""
    if settings.TEAM_CONFIG_SOURCE == "backend":
        return backend_team_config_loader(settings.backend_url)
    return database_team_config_loader(SessionLocal)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    app.state.fff_service = build_fff_service(settings, team_config_loader())
    logger.info(f"Arche FC API started in {settings.MODE} mode")
    try:
        yield
    finally:
        await app.state.fff_service.close()
        logger.info("Arche FC API stopped")


app = FastAPI(
    title="Arche FC API",
    description="Club management API with FFF standings and match data",
    version=__version__,
    lifespan=lifespan,
)

# =============================================================================
# CENTRALIZED ERROR HANDLING
# =============================================================================

@app.exception_handler(AppException)
async def app_exception_handler(request, exc: AppException):
    """Handle application-specific exceptions."""
    return handle_app_exception(exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    """Handle HTTP errors (unknown routes, wrong methods) with the standard format."""
    return handle_http_exception(exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Handle body/query validation failures."""
    return handle_request_validation_error(exc)


@app.exception_handler(Exception)
async def generic_exception_handler(request, exc: Exception):
    """Handle all other exceptions and convert to standardized format."""
    return handle_generic_exception(exc)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (auth, players, teams, fff):
    app.include_router(module.router, prefix="/api")


@app.get("/")
async def root():
    return {
        "message": "Arche FC API",
        "version": __version__,
        "status": "operational",
    }


@app.get("/health")
async def health_check():
    fff_service = getattr(app.state, "fff_service", None)
    queue = fff_service.client.queue if fff_service else None
    return {
        "status": "healthy",
        "mode": settings.MODE,
        "fff_cache_entries": len(fff_service.cache) if fff_service else 0,
        "fff_requests_active": queue.active_count if queue else 0,
        "fff_requests_pending": queue.pending_count if queue else 0,
    }
