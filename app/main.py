# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Catalog API.
# It configures the FastAPI application with middleware, routers, handlers
# and the static mount that serves uploaded photos.
#
# Usage:
#   python -m app.main
#   catalog-api
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

import uvicorn

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import Settings, settings
from app.exceptions import (
    CatalogException,
    catalog_exception_handler,
    validation_exception_handler,
)
from app.routers import catalog, health
from core.services.catalog_service import CatalogService
from core.services.photo_store import PhotoStore
from core.services.shirt_repository import ShirtRepository
from lib.supabase_client import SupabaseClientError, connect

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_catalog_service(config: Settings) -> CatalogService:
    """
    Connect to the record store and prepare the photo store.

    Raises:
        SupabaseClientError: If the record store can't be reached
        PhotoStorageError: If the uploads directory can't be created
    """
    client = connect(config.SUPABASE_URL, config.SUPABASE_SERVICE_KEY, config.SHIRTS_TABLE)

    photo_store = PhotoStore(config.uploads_path, url_path=config.UPLOADS_URL_PATH)
    photo_store.ensure_directory()

    return CatalogService(ShirtRepository(client, table=config.SHIRTS_TABLE), photo_store)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup connects to the record store. A store that can't be reached
    aborts startup instead of serving without a backing store.
    """
    logger.info(f"Starting Catalog API in {settings.ENVIRONMENT} mode")

    if getattr(app.state, "catalog_service", None) is None:
        try:
            app.state.catalog_service = build_catalog_service(settings)
        except (SupabaseClientError, CatalogException) as e:
            logger.critical(f"Startup failed, record store or uploads unavailable: {e}")
            raise

    logger.info(f"Serving photos from {settings.uploads_path} at {settings.UPLOADS_URL_PATH}")

    yield

    logger.info("Shutting down Catalog API")


# Create FastAPI application
app = FastAPI(
    title="Catalog API",
    description="""
## Shirt Catalog API

Manage a catalog of shirts (brand, size, price) with an optional photo each.

### Quick Start

```bash
# Create a shirt with a photo
curl -X POST http://localhost:8000/catalog \\
  -F "brand=Adidas" -F "size=M" -F "price=24999" -F "photo=@front.png"

# List everything, or one page at a time
curl http://localhost:8000/catalog
curl "http://localhost:8000/catalog?offset=0&limit=10"
```
""",
    version=health.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Catalog",
            "description": "Create, read, update and delete shirts",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=settings.is_production,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(CatalogException)
async def handle_catalog_exception(request: Request, exc: CatalogException):
    """Handle custom catalog exceptions."""
    return await catalog_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle malformed requests."""
    logger.debug(f"Request validation failed: {exc.errors()}")
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Root banner and health check endpoints
app.include_router(
    health.router,
    tags=["Health"]
)

# Shirt catalog endpoints
app.include_router(
    catalog.router,
    prefix="/catalog",
    tags=["Catalog"]
)

# Uploaded photos
app.mount(
    settings.UPLOADS_URL_PATH,
    StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False),
    name="uploads",
)


# =============================================================================
# Server Entry Point
# =============================================================================

def run() -> None:
    """Serve the app on API_HOST:API_PORT."""
    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
