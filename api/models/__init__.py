"""Pydantic models for notes, preferences and the AI assistant."""

from .chat import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    SummarizeRequest,
    SummarizeResponse,
    TranslateRequest,
    TranslateResponse,
)
from .notes import (
    COLOR_PALETTE,
    DEFAULT_COLOR,
    MIN_SUMMARY_LENGTH,
    ContentTable,
    Language,
    Note,
    NoteContent,
    NoteCreate,
    NoteListResponse,
    NoteUpdate,
    NoteView,
    Preferences,
    PreferencesUpdate,
    TranslateNoteRequest,
    ViewMode,
)

__all__ = [
    "COLOR_PALETTE",
    "DEFAULT_COLOR",
    "MIN_SUMMARY_LENGTH",
    # Chat models
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    # Notes models
    "ContentTable",
    "Language",
    "Note",
    "NoteContent",
    "NoteCreate",
    "NoteListResponse",
    "NoteUpdate",
    "NoteView",
    "Preferences",
    "PreferencesUpdate",
    "SummarizeRequest",
    "SummarizeResponse",
    "TranslateNoteRequest",
    "TranslateRequest",
    "TranslateResponse",
    "ViewMode",
]
