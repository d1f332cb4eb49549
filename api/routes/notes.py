"""Notes endpoints."""

import structlog
from fastapi import APIRouter, Depends

from ..dependencies import get_ai_gateway, get_note_store
from ..exceptions import NotFoundError, ValidationError
from ..models import (
    Language,
    Note,
    NoteContent,
    NoteCreate,
    NoteListResponse,
    NoteUpdate,
    SummarizeResponse,
    TranslateNoteRequest,
)
from ..observability import get_tracer
from ..services import AIGateway, NoteStore, project_notes

# Initialize logger
logger = structlog.get_logger(__name__)

# Get tracer
tracer = get_tracer(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def _require_note(store: NoteStore, note_id: str) -> Note:
    note = store.get(note_id)
    if note is None:
        logger.warning("note_not_found", note_id=note_id)
        raise NotFoundError()
    return note


def _source_language(note: Note, requested: Language | None, active: Language) -> Language:
    """Language to read from: the requested one, else the active one, else the first present."""
    if requested is not None:
        if not note.content.has(requested):
            raise ValidationError(f"Note has no {requested.display_name} content to translate")
        return requested
    if note.content.has(active):
        return active
    return note.content.languages()[0]


@router.get("", response_model=NoteListResponse)
async def list_notes(
    q: str = "",
    language: Language | None = None,
    store: NoteStore = Depends(get_note_store),
):
    """
    List notes for display.

    Only notes with content in the requested language (the active language by
    default) are included, filtered by ``q`` against title and body, pinned
    notes first and then most recently updated.
    """
    with tracer.start_as_current_span("list_notes") as span:
        language = language or store.active_language

        span.set_attribute("query.language", language.value)
        span.set_attribute("query.has_search", bool(q.strip()))

        views = list(project_notes(store.notes, q, language))

        span.set_attribute("notes.count", len(views))
        logger.info("notes_listed", language=language.value, count=len(views))

        return NoteListResponse(notes=views, total=len(views), language=language, query=q)


@router.post("", response_model=Note, status_code=201)
async def create_note(note: NoteCreate, store: NoteStore = Depends(get_note_store)):
    """Create a note holding the given title and body in the active language."""
    with tracer.start_as_current_span("create_note") as span:
        created = store.create(
            NoteContent(title=note.title, body=note.body),
            color=note.color,
            is_pinned=note.is_pinned,
        )
        span.set_attribute("note.id", created.id)
        return created


@router.get("/{note_id}", response_model=Note)
async def get_note(note_id: str, store: NoteStore = Depends(get_note_store)):
    """Retrieve a note with all of its language variants."""
    with tracer.start_as_current_span("get_note") as span:
        span.set_attribute("note.id", note_id)
        return _require_note(store, note_id)


@router.put("/{note_id}", response_model=Note)
async def update_note(
    note_id: str, note_update: NoteUpdate, store: NoteStore = Depends(get_note_store)
):
    """
    Save edits to a note.

    Replaces the active-language title and body; other language variants are
    left untouched. Color and pin state change only when provided.
    """
    with tracer.start_as_current_span("update_note") as span:
        span.set_attribute("note.id", note_id)

        updated = store.update(
            note_id,
            NoteContent(title=note_update.title, body=note_update.body),
            color=note_update.color,
            is_pinned=note_update.is_pinned,
        )
        if updated is None:
            raise NotFoundError()
        return updated


@router.delete("/{note_id}", status_code=204)
async def delete_note(note_id: str, store: NoteStore = Depends(get_note_store)):
    """Delete a note. Deleting a note that does not exist succeeds as well."""
    with tracer.start_as_current_span("delete_note") as span:
        span.set_attribute("note.id", note_id)
        span.set_attribute("note.deleted", store.delete(note_id))
        return


@router.post("/{note_id}/pin", response_model=Note)
async def toggle_pin(note_id: str, store: NoteStore = Depends(get_note_store)):
    """Pin or unpin a note."""
    with tracer.start_as_current_span("toggle_pin") as span:
        span.set_attribute("note.id", note_id)

        updated = store.toggle_pin(note_id)
        if updated is None:
            raise NotFoundError()
        return updated


@router.post("/{note_id}/translate", response_model=Note)
async def translate_note(
    note_id: str,
    request: TranslateNoteRequest,
    store: NoteStore = Depends(get_note_store),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    """
    Add a machine translation of a note.

    Languages the note already has are never overwritten; asking for one
    returns the note as it is without calling the model. If the note is
    deleted while the translation is in flight the result is discarded.
    """
    with tracer.start_as_current_span("translate_note") as span:
        target = request.target_language

        span.set_attribute("note.id", note_id)
        span.set_attribute("translation.target", target.value)

        note = _require_note(store, note_id)
        if note.content.has(target):
            logger.info("translation_skipped_existing", note_id=note_id, language=target.value)
            return note

        source_language = _source_language(note, request.source_language, store.active_language)
        source = note.content.get(source_language)
        span.set_attribute("translation.source", source_language.value)

        translated = await gateway.translate(source.title, source.body, target)

        merged = store.merge_translation(note_id, target, translated)
        if merged is None:
            raise NotFoundError("Note was deleted before the translation finished")
        return merged


@router.post("/{note_id}/summarize", response_model=SummarizeResponse)
async def summarize_note(
    note_id: str,
    store: NoteStore = Depends(get_note_store),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    """Summarize the active-language body of a note. The note itself is not changed."""
    with tracer.start_as_current_span("summarize_note") as span:
        span.set_attribute("note.id", note_id)

        note = _require_note(store, note_id)
        language = _source_language(note, None, store.active_language)

        summary = await gateway.summarize(note.content.get(language).body)

        logger.info("note_summarized", note_id=note_id, language=language.value)
        return SummarizeResponse(summary=summary)
