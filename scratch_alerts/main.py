"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scratch_alerts.api import api_router
from scratch_alerts.core.config import settings
from scratch_alerts.core.exceptions import NotificationError
from scratch_alerts.database import init_db
from scratch_alerts.schemas.notification import ErrorResponse
from scratch_alerts.scheduler import shutdown_scheduler, start_scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    print("🚀 Starting Scratch Alerts API...")

    print("📊 Initializing database...")
    init_db()

    if settings.SCHEDULER_ENABLED:
        start_scheduler()
    else:
        print("⏸️  Scheduler disabled")

    print("✅ Application started successfully!")

    yield

    # Shutdown
    print("🛑 Shutting down...")
    shutdown_scheduler()
    print("👋 Application stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.exception_handler(NotificationError)
async def notification_error_handler(request: Request, exc: NotificationError) -> JSONResponse:
    """Report delivery errors as ``{"success": false, "error": ...}``."""
    print(f"💥 Erro ao enviar notificação WhatsApp: {exc.message}")
    body = ErrorResponse(error=exc.message, response_status=getattr(exc, "status_code", None))
    return JSONResponse(status_code=exc.http_status, content=body.model_dump(exclude_none=True))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    print(f"💥 Erro crítico: {exc}")
    body = ErrorResponse(error=str(exc) or "Internal error")
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint - Health check."""
    return {
        "message": "Welcome to Scratch Alerts API",
        "status": "running",
        "version": settings.VERSION,
        "description": settings.DESCRIPTION,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
