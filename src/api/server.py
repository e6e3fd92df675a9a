#!/usr/bin/env python
"""FastAPI server for the newsdesk editorial assistant."""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

# Add src directory to Python path for imports
src_dir = Path(__file__).parent.parent
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.dependencies import build_services
from api.errors import register_exception_handlers
from api.routers import content, feedback
from api.routers.content import THUMBNAILS_ROUTE
from api.schemas import HealthResponse, RootResponse
from utils.config import AppConfig, load_config, validate_config
from utils.logging import request_scope

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the application from an explicit configuration.

    Args:
        config: Settings to wire into every service; loaded from the environment when omitted

    Returns:
        Configured FastAPI app
    """
    if config is None:
        config = load_config()

    for problem in validate_config(config):
        logger.warning(f"Configuration: {problem}")

    services = build_services(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Newsdesk API ready: model={config.gemini_model}, "
            f"API key configured={bool(config.gemini_api_key)}, "
            f"feedback store={'notion' if config.notion_configured else 'local only'}"
        )
        yield
        services.close()

    app = FastAPI(title="Newsdesk API", version=API_VERSION, lifespan=lifespan)
    app.state.services = services

    # CORS for the browser client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        with request_scope(request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    register_exception_handlers(app)

    @app.get("/", response_model=RootResponse)
    async def root() -> RootResponse:
        """Root endpoint."""
        return RootResponse(message="Newsdesk API", version=API_VERSION)

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    app.include_router(content.router)
    app.include_router(feedback.router)

    # Extracted frames stay on disk and are served from here
    thumbnails_dir = Path(config.thumbnails_dir)
    thumbnails_dir.mkdir(parents=True, exist_ok=True)
    app.mount(THUMBNAILS_ROUTE, StaticFiles(directory=str(thumbnails_dir)), name="thumbnails")

    return app
