from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from franchise_notifications.config import get_settings
from franchise_notifications.infrastructure.database import engine, initialize_database
from franchise_notifications.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Crée les tables au démarrage et libère les connexions à l'arrêt."""

    initialize_database()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Crée et configure l'application FastAPI principale."""

    app = FastAPI(title="Franchise Notifications", lifespan=lifespan)

    settings = get_settings()
    if settings.app_base_url:
        # Autorise le front-end public à appeler l'API.
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[settings.app_base_url.rstrip("/")],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_routes(app)
    return app


app = create_app()
