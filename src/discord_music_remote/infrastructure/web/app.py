"""ASGI application: the FastAPI API, the static control page and Socket.IO on one port."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .errors import register_exception_handlers
from .routes import api_router, health_router

if TYPE_CHECKING:
    from ...config.container import Container

STATIC_DIR = Path(__file__).resolve().parent / "static"


def build_api(container: Container) -> FastAPI:
    """The HTTP half of the app. Tests drive this directly."""
    api = FastAPI(title="Discord Music Remote", docs_url=None, redoc_url=None)
    api.state.container = container

    api.add_middleware(
        CORSMiddleware,
        allow_origins=list(container.settings.web.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(api)

    api.include_router(health_router)
    api.include_router(api_router)
    # Mounted last so /api and /health win over file lookups.
    api.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
    return api


def create_app(container: Container) -> socketio.ASGIApp:
    server = container.socket_server
    container.realtime_hub.register(server)
    return socketio.ASGIApp(server, other_asgi_app=build_api(container))
