"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deckframe.api.log_config import setup_logger
from deckframe.api.routes import router
from deckframe.api.settings import Config


def create_app() -> FastAPI:
    setup_logger()
    Config.validate()

    app = FastAPI(
        title="Deck Framing Engine",
        description="Rule-based deck framing synthesis: ledger, beams, posts, joists, blocking",
        version="0.1.0",
    )

    # The drawing front end runs on its own dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    return app


app = create_app()
