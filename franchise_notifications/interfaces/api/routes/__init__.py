from fastapi import FastAPI

from .notifications import router as notifications_router
from .notifications import test_email_router


def register_routes(app: FastAPI) -> None:
    """Enregistre tous les routeurs de l'API dans l'application FastAPI."""

    app.include_router(test_email_router)
    app.include_router(notifications_router)
