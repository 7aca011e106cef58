"""
WeatherNow - Announcement server
FastAPI application serving the admin announcement API to kiosks
"""
import sys
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from weathernow_server import __version__
from weathernow_server.api.routes import announcements
from weathernow_server.api.routes.announcements_schemas import HealthResponse
from weathernow_server.services.admin_gate import ADMIN_HEADER, AdminGate
from weathernow_server.services.api_rate_limiter import create_limiter, setup_rate_limiter
from weathernow_server.services.message_store import MessageStore
from weathernow_server.utils.config import Settings, get_settings


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed announcement requests as 400 instead of 422."""
    errors = exc.errors()
    logger.info(f"⚠️ Rejected {request.method} {request.url.path}: {len(errors)} validation error(s)")
    return JSONResponse(
        status_code=400,
        content={"detail": [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in errors]},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    app_settings: Settings = app.state.settings
    logger.info("🚀 WeatherNow announcement server starting...")
    logger.info(f"✅ Message store ready (next id {app.state.message_store.next_id})")
    logger.info(f"🌐 CORS origins: {app_settings.cors_origins_list}")
    if app_settings.uses_default_admin_password:
        logger.warning("⚠️  Using the default admin password - set ADMIN_PASSWORD for any real deployment!")

    yield

    logger.info(f"👋 Shutting down, dropping {len(app.state.message_store)} in-memory announcement(s)")


def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[MessageStore] = None,
    gate: Optional[AdminGate] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the environment-loaded settings)
        store: Message store to serve; a fresh one is created when omitted
        gate: Admin gate; built from ``app_settings.admin_password`` when omitted
    """
    app_settings = app_settings or get_settings()
    configure_logging(app_settings.log_level)

    app = FastAPI(
        title="WeatherNow Announcements",
        description="Admin announcements for WeatherNow kiosks",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.message_store = store if store is not None else MessageStore()
    app.state.admin_gate = gate if gate is not None else AdminGate(app_settings.admin_password)
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", ADMIN_HEADER],
    )
    limiter = create_limiter(app_settings)
    setup_rate_limiter(app, limiter, app_settings)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(announcements.build_router(limiter, app_settings), prefix="/api", tags=["Announcements"])

    @app.get("/api/health", response_model=HealthResponse)
    async def health(request: Request):
        """Health check"""
        return HealthResponse(uptime=round(time.monotonic() - request.app.state.started_at, 3))

    return app


app = create_app()


def run():
    """Entry point for console script"""
    import uvicorn

    app_settings = get_settings()
    uvicorn.run(
        "weathernow_server.main:app",
        host=app_settings.host,
        port=app_settings.port,
        log_level=app_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
