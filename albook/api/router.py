"""Top-level API router."""
from fastapi import APIRouter

from albook.api.endpoints import dashboard, exercises


api_router = APIRouter()
api_router.include_router(dashboard.router)
api_router.include_router(exercises.router)
