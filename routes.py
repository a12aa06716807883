# routes.py
from fastapi import FastAPI
from controller.ai_controller import ai_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(ai_router)
