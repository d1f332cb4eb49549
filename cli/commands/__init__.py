"""CLI command handlers."""

from .chat import ChatSession
from .notes import (
    create_note,
    delete_note,
    dictate_note,
    edit_note,
    list_notes,
    summarize_note,
    toggle_pin,
    translate_note,
)
from .preferences import set_language, set_view_mode, show_preferences

__all__ = [
    # Chat
    "ChatSession",
    # Notes commands
    "create_note",
    "delete_note",
    "dictate_note",
    "edit_note",
    "list_notes",
    # Preference commands
    "set_language",
    "set_view_mode",
    "show_preferences",
    "summarize_note",
    "toggle_pin",
    "translate_note",
]
