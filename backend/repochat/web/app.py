"""Main FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware

from ..config import load_config
from .dependencies import Services, build_services
from .routes import ask, repos

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "services", None) is None:
        cfg = load_config()
        configure_logging(cfg["log_level"])
        app.state.services = build_services(cfg)
        logger.info("Clients initialised")
    yield


def create_app(services: Optional[Services] = None) -> FastAPI:
    """Build the app. ``services`` replaces the clients built from configuration."""
    app = FastAPI(title="repochat", lifespan=lifespan)
    if services is not None:
        app.state.services = services

    # Setup CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Source-Documents"],
    )

    api_router = APIRouter(prefix="/api")
    api_router.include_router(repos.router)
    api_router.include_router(ask.router)
    app.include_router(api_router)
    return app


app = create_app()
