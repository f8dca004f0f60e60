# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Family Registry API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import FamilyRegistryException, registry_exception_handler
from app.routers import health, households, members, worship, dashboard, divisions
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    logger.info(f"Starting Family Registry API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down Family Registry API")


app = FastAPI(
    title="Family Registry API",
    description="""
## Quản lý gia đình - Family Registry API

Keeps a registry of households (hộ gia đình) and their members for a temple
or community office, with the traditional zodiac data printed on member
rosters.

### Features

- **Households**: create with a head of household in one step, search,
  filter by province/ward, transfer headship
- **Members**: living and deceased members, head-first ordering, name search
  across households
- **Worship history**: death anniversaries and shared ceremonies
- **Rosters**: nominal age, can chi, ruling star, hạn, Diêm Vương and Tam Tai
  per member, as JSON or CSV

### Quick Start

```bash
# 1. Sign in
curl -X POST http://localhost:8000/api/v1/auth/signin \\
  -H "Content-Type: application/json" \\
  -d '{"email": "admin@example.com", "password": "secret123"}'

# 2. List households
curl http://localhost:8000/api/v1/households \\
  -H "Authorization: Bearer <access_token>"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Sign in and verify Supabase JWT tokens",
        },
        {
            "name": "Households",
            "description": "Create, search and manage households",
        },
        {
            "name": "Members",
            "description": "Family members of a household",
        },
        {
            "name": "Worship",
            "description": "Worship history and scheduled ceremonies",
        },
        {
            "name": "Dashboard",
            "description": "Summary statistics",
        },
        {
            "name": "Divisions",
            "description": "Vietnamese provinces and wards",
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

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(FamilyRegistryException)
async def handle_registry_exception(request: Request, exc: FamilyRegistryException):
    """Handle custom registry exceptions."""
    return await registry_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Đã xảy ra lỗi không mong muốn",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints (router carries the /auth prefix)
app.include_router(
    auth_routes.router,
    prefix="/api/v1",
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Household endpoints
app.include_router(
    households.router,
    prefix="/api/v1/households",
    tags=["Households"]
)

# Member endpoints (nested under households and standalone)
app.include_router(
    members.router,
    prefix="/api/v1",
    tags=["Members"]
)

# Worship history endpoints
app.include_router(
    worship.router,
    prefix="/api/v1",
    tags=["Worship"]
)

# Dashboard endpoints
app.include_router(
    dashboard.router,
    prefix="/api/v1/dashboard",
    tags=["Dashboard"]
)

# Province/ward reference data
app.include_router(
    divisions.router,
    prefix="/api/v1/divisions",
    tags=["Divisions"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Family Registry API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
