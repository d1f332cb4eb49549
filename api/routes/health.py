"""Health check and root endpoints."""

import structlog
from fastapi import APIRouter, Depends

from ..dependencies import get_note_store
from ..services import NoteStore

# Initialize logger
logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint."""
    logger.info("root_endpoint_accessed")
    return {"message": "Welcome to SmartNote API"}


@router.get("/health")
async def health(store: NoteStore = Depends(get_note_store)):
    """Health check; reports degraded when recent changes could not be saved."""
    logger.debug("health_check_requested")
    return {
        "status": "healthy" if store.last_persist_error is None else "degraded",
        "service": "smartnote-api",
        "notes": len(store.notes),
        "persistenceError": store.last_persist_error,
        "unsavedBlobs": sorted(store.persist_errors),
    }
