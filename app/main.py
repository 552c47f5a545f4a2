# app/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import (
    visitors, bus_entries, authorities, notifications, reports, users, sheets, health,
)
from app.database import create_tables
from app.config import settings
from app.services.exceptions import GateEntryError
from app.services.photo_service import PHOTO_URL_PREFIX
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Campus Gate Entry API",
    description="Visitor registration, authority approvals and bus entry tracking for the college gate.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the gate front end to call the API) ─────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the front-end origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Health check, docs and uploaded photos stay open.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        path = request.url.path
        if path in open_paths or path.startswith(PHOTO_URL_PREFIX) or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Workflow Errors ──────────────────────────────────────────────────────────
@app.exception_handler(GateEntryError)
async def gate_entry_error_handler(request: Request, exc: GateEntryError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(visitors.router,      prefix="/api/v1", tags=["Visitors"])
app.include_router(bus_entries.router,   prefix="/api/v1", tags=["Bus Entries"])
app.include_router(authorities.router,   prefix="/api/v1", tags=["Authorities"])
app.include_router(notifications.router, prefix="/api/v1", tags=["Notifications"])
app.include_router(reports.router,       prefix="/api/v1", tags=["Reports & Exports"])
app.include_router(users.router,         prefix="/api/v1", tags=["Users"])
app.include_router(sheets.router,        prefix="/api/v1", tags=["Google Sheets"])
app.include_router(health.router,        prefix="/api/v1", tags=["Health"])

# Locally stored visitor photos (unused when Supabase Storage is configured)
app.mount(PHOTO_URL_PREFIX, StaticFiles(directory=settings.PHOTO_DIR), name="photos")


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Gate Entry backend starting up...")
    create_tables()
    logger.info("Database tables ready")
    logger.info(f"Photo storage: {'supabase' if settings.use_supabase_storage else settings.PHOTO_DIR}")
    logger.info(f"Strict visitor transitions: {settings.STRICT_VISITOR_TRANSITIONS}")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Gate Entry backend shutting down...")
