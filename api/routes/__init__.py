"""API route handlers organized by domain."""

from .ai import router as ai_router
from .health import router as health_router
from .notes import router as notes_router
from .preferences import router as preferences_router

__all__ = ["ai_router", "health_router", "notes_router", "preferences_router"]
