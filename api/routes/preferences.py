"""Display preference endpoints."""

import structlog
from fastapi import APIRouter, Depends

from ..dependencies import get_note_store
from ..models import Preferences, PreferencesUpdate
from ..services import NoteStore

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=Preferences)
async def get_preferences(store: NoteStore = Depends(get_note_store)):
    """Current view mode and active language."""
    return store.preferences


@router.put("", response_model=Preferences)
async def update_preferences(
    update: PreferencesUpdate, store: NoteStore = Depends(get_note_store)
):
    """Change the view mode and/or the active language."""
    if update.active_language is not None:
        store.set_active_language(update.active_language)
    if update.view_mode is not None:
        store.set_view_mode(update.view_mode)
    return store.preferences
