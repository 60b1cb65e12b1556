# routes.py
from fastapi import FastAPI
from controller.autohide_controller import autohide_router
from controller.metric_controller import metric_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(autohide_router)
    app.include_router(metric_router)
