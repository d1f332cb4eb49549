"""FastAPI application for SmartNote."""

import os
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from connectors.openai import OpenAIModel

from .exceptions import BlobStoreError, SmartNoteError
from .models import Language
from .observability import initialize_observability
from .routes import ai_router, health_router, notes_router, preferences_router
from .services import NOTES_KEY, PREFERENCES_KEY, AIGateway, FileBlobStore, NoteStore

# Initialize logger
logger = structlog.get_logger(__name__)


def build_note_store() -> NoteStore:
    """Create the note store from environment settings and load saved state."""
    data_dir = os.getenv("SMARTNOTE_DATA_DIR", str(Path.home() / ".smartnote"))
    default_language = Language(os.getenv("SMARTNOTE_DEFAULT_LANGUAGE", Language.GU.value))

    logger.info("note_store_opening", data_dir=data_dir, default_language=default_language.value)

    store = NoteStore(FileBlobStore(data_dir), default_language=default_language)
    store.rehydrate()
    return store


def build_ai_gateway() -> AIGateway:
    """Create the AI gateway from environment settings."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        logger.warning("openai_api_key_missing", effect="ai features unavailable")

    return AIGateway(
        api_key=api_key,
        model=os.getenv("SMARTNOTE_OPENAI_MODEL", OpenAIModel.GPT_4O_MINI.value),
        timeout=float(os.getenv("SMARTNOTE_OPENAI_TIMEOUT", "60")),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    # Startup
    logger.info("api_starting")

    initialize_observability()

    app.state.note_store = build_note_store()
    app.state.ai_gateway = build_ai_gateway()
    logger.info("api_started", notes=len(app.state.note_store.notes))

    yield

    # Shutdown
    logger.info("api_shutting_down")
    store: NoteStore = app.state.note_store
    # Last chance to write changes an earlier autosave could not
    retries = {NOTES_KEY: store.persist, PREFERENCES_KEY: store.persist_preferences}
    for key in list(store.persist_errors):
        try:
            retries[key]()
        except BlobStoreError as e:
            logger.error("final_persist_failed", key=key, error=e.message, notes=len(store.notes))
    logger.info("api_shutdown_complete")


async def smartnote_error_handler(request: Request, exc: SmartNoteError) -> JSONResponse:
    """Convert application exceptions to JSON error responses."""
    log_fields = {
        "code": exc.code,
        "message": exc.message,
        "status": exc.status_code,
        "path": request.url.path,
        "method": request.method,
    }
    if exc.status_code >= 500:
        logger.error("request_failed", **log_fields)
    else:
        logger.warning("request_rejected", **log_fields)

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


app = FastAPI(
    title="SmartNote API",
    description="Personal multi-language notes with AI summaries, translation and chat",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(SmartNoteError, smartnote_error_handler)

# Instrument FastAPI with OpenTelemetry
FastAPIInstrumentor.instrument_app(app)

# Include routers
app.include_router(health_router)
app.include_router(notes_router)
app.include_router(preferences_router)
app.include_router(ai_router)
