from typing import Iterable

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import router as base_router
from app.core.config import settings
from app.core.telemetry import setup_telemetry


def create_app(routers: Iterable[APIRouter] = ()) -> FastAPI:
    """
    JSON bodies are parsed by FastAPI per route; CORS is permissive by default
    (settings.cors_origins). The health router is always mounted.
    """
    app = FastAPI(title="Marketplace API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_telemetry(app)
    app.include_router(base_router)
    for router in routers:
        app.include_router(router)
    return app


app = create_app()
