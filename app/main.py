# app/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, all routers, and the
startup hook that seeds zones, runs the first recompute and starts the periodic one.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import (
    zones, res_scores, air_quality, alerts, action_reports, community_reports, health,
)
from app.database import create_tables, SessionLocal
from app.config import settings
from app.services.orchestrator import build_orchestrator
from app.services.zone_service import seed_sample_zones
from app.utils.logger import get_logger
import time
import asyncio

logger = get_logger(__name__)

app = FastAPI(
    title="Environmental Resilience Monitor API",
    description="Per-zone Environmental Resilience Scores (RES) and threshold alerts.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the dashboard to call the API) ──────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth for write endpoints.
    Reads stay open for the public dashboard.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/health", "/docs", "/redoc", "/openapi.json"}
        if request.method == "GET" or request.url.path in open_paths or not settings.API_KEY:
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


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(zones.router,             prefix="/api", tags=["🗺️  Zones"])
app.include_router(res_scores.router,        prefix="/api", tags=["📈 RES Scores"])
app.include_router(air_quality.router,       prefix="/api", tags=["🌫️  Air Quality"])
app.include_router(alerts.router,            prefix="/api", tags=["🔔 Alerts"])
app.include_router(action_reports.router,    prefix="/api", tags=["🛠️  Action Reports"])
app.include_router(community_reports.router, prefix="/api", tags=["🏘️  Community Reports"])
app.include_router(health.router,            prefix="/api", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Resilience Monitor starting up...")
    create_tables()
    logger.info("✅ Database tables ready")

    if settings.SEED_SAMPLE_ZONES:
        db = SessionLocal()
        try:
            seed_sample_zones(db)
        finally:
            db.close()

    orchestrator = build_orchestrator()
    app.state.orchestrator = orchestrator
    await orchestrator.recompute_all()

    app.state.recompute_task = asyncio.create_task(
        orchestrator.run_periodic(settings.RECOMPUTE_INTERVAL_SECONDS), name="res-periodic"
    )
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Resilience Monitor shutting down...")
    task = getattr(app.state, "recompute_task", None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    orchestrator = getattr(app.state, "orchestrator", None)
    if orchestrator:
        await orchestrator.aclose()
