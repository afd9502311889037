"""API routers for the port map service."""

from app.routers.assistant import router as assistant_router
from app.routers.layers import router as layers_router

__all__ = ["assistant_router", "layers_router"]
