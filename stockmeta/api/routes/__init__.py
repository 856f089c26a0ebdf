"""API route registrations."""
from fastapi import APIRouter

from stockmeta.api.routes import generation, sessions


api_router = APIRouter()
api_router.include_router(generation.router)
api_router.include_router(sessions.router)

__all__ = ["api_router"]
