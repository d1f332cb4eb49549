"""Note state, projection, persistence and AI assistant services."""

from .ai_gateway import AIGateway
from .blob_store import BlobStore, FileBlobStore, InMemoryBlobStore
from .note_store import NOTES_KEY, PREFERENCES_KEY, NoteStore, seed_notes
from .projection import NoteProjection, project_notes
from .transcript import DraftBody, TranscriptFragment, TranscriptSource, dictate

__all__ = [
    "NOTES_KEY",
    "PREFERENCES_KEY",
    "AIGateway",
    "BlobStore",
    "DraftBody",
    "FileBlobStore",
    "InMemoryBlobStore",
    "NoteProjection",
    "NoteStore",
    "TranscriptFragment",
    "TranscriptSource",
    "dictate",
    "project_notes",
    "seed_notes",
]
