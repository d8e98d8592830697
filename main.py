from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from listing_alerts.config import get_settings
from listing_alerts.infrastructure.database import engine, initialize_database
from listing_alerts.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the notification tables on startup and release connections on shutdown."""

    initialize_database()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="Listing Alerts", lifespan=lifespan)

    # The marketplace web client calls the API from its own origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[get_settings().client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
