"""Request and response models for the AI assistant endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .notes import CamelModel, Language


class SummarizeRequest(CamelModel):
    """Request model for summarizing note text."""

    note: str = Field(..., min_length=1)


class SummarizeResponse(CamelModel):
    """Response model carrying a generated summary."""

    summary: str


class TranslateRequest(CamelModel):
    """Request model for translating a note title and body."""

    title: str
    body: str
    target_language: Language


class TranslateResponse(CamelModel):
    """Response model for a translated title and body."""

    translated_title: str
    translated_body: str


class ChatMessage(CamelModel):
    """One turn of the assistant conversation."""

    role: Literal["user", "model"]
    text: str


class ChatRequest(CamelModel):
    """Request model for the chat endpoint, carrying the full conversation so far."""

    history: list[ChatMessage] = Field(..., min_length=1)


class ChatResponse(CamelModel):
    """Response model for the chat endpoint."""

    response: str
