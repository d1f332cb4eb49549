"""FastAPI dependencies resolving the services created at startup."""

from fastapi import Request

from .services import AIGateway, NoteStore


def get_note_store(request: Request) -> NoteStore:
    """Get the note store owned by the running application."""
    return request.app.state.note_store


def get_ai_gateway(request: Request) -> AIGateway:
    """Get the AI gateway configured at startup."""
    return request.app.state.ai_gateway
