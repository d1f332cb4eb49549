"""Authoritative in-memory note collection with blob-store persistence.

All mutations are synchronous: on a single event loop no two operations can
interleave, and the only awaits in a request happen around the AI calls that
feed results back in through ``merge_translation``.

Notes are frozen models. Every mutation replaces the stored note with an
updated copy, so any note handed to a caller is a snapshot that later
mutations do not change.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import BlobStoreError, ValidationError
from ..models import DEFAULT_COLOR, ContentTable, Language, Note, NoteContent, Preferences
from ..observability import get_app_metrics
from .blob_store import BlobStore

logger = structlog.get_logger(__name__)

NOTES_KEY = "notes"
PREFERENCES_KEY = "preferences"

_notes_adapter = TypeAdapter(list[Note])


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_note_id() -> str:
    return str(uuid.uuid4())


def seed_notes() -> list[Note]:
    """Example notes shown when nothing has been persisted yet."""
    return [
        Note(
            id="1",
            content=ContentTable(
                gu=NoteContent(
                    title="મારો પહેલો વિચાર",
                    body=(
                        "આ ગુજરાતીમાં મારી પ્રથમ નોંધ છે. હું મારી નોટ-ટેકીંગ એપ્લિકેશન બનાવવા માટે"
                        " ઉત્સાહિત છું. આ એક ખૂબ જ સુંદર અને ઉપયોગી એપ્લિકેશન બનશે."
                    ),
                )
            ),
            color="#B2E4A8",
            is_pinned=True,
            created_at=datetime(2023, 10, 26, 10, 0, tzinfo=UTC),
            updated_at=datetime(2023, 10, 26, 10, 0, tzinfo=UTC),
        ),
        Note(
            id="2",
            content=ContentTable(
                gu=NoteContent(
                    title="ખરીદીની યાદી",
                    body="- દૂધ\n- બ્રેડ\n- ઈંડા\n- શાકભાજી\n- ફળો",
                )
            ),
            color="#A8B778",
            is_pinned=False,
            created_at=datetime(2023, 10, 25, 15, 30, tzinfo=UTC),
            updated_at=datetime(2023, 10, 25, 15, 30, tzinfo=UTC),
        ),
        Note(
            id="3",
            content=ContentTable(
                gu=NoteContent(
                    title="પ્રોજેક્ટ માટેના વિચારો",
                    body=(
                        "AI સુવિધા માટે જેમિની API નો ઉપયોગ કરો. વપરાશકર્તાની નોંધોના સારાંશ માટે એક"
                        " ફંક્શન બનાવો. ગ્રીડ અને લિસ્ટ વ્યુ માટે ટોગલ ઉમેરો. ડાર્ક મોડ પણ ઉમેરો."
                    ),
                )
            ),
            color="#F0F8F0",
            is_pinned=False,
            created_at=datetime(2023, 10, 24, 9, 0, tzinfo=UTC),
            updated_at=datetime(2023, 10, 24, 9, 0, tzinfo=UTC),
        ),
    ]


class NoteStore:
    """Owns the note collection and the user's display preferences.

    Operations that target a missing note id are no-ops: ``delete`` returns
    ``False`` and ``update``, ``toggle_pin`` and ``merge_translation`` return
    ``None`` without touching the collection.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        id_factory: Callable[[], str] = new_note_id,
        clock: Callable[[], datetime] = utcnow,
        default_language: Language = Language.GU,
    ):
        self.blob_store = blob_store
        self.id_factory = id_factory
        self.clock = clock
        self.default_language = Language(default_language)
        self._notes: list[Note] = []
        self.preferences = Preferences(active_language=self.default_language)
        # Unsaved-write errors keyed by blob key; cleared when that key is written again
        self.persist_errors: dict[str, str] = {}

    @property
    def notes(self) -> tuple[Note, ...]:
        """Snapshot of the collection in storage order."""
        return tuple(self._notes)

    @property
    def last_persist_error(self) -> str | None:
        """Most recent unsaved-write error across notes and preferences, if any."""
        return next(reversed(self.persist_errors.values()), None)

    @property
    def active_language(self) -> Language:
        return self.preferences.active_language

    def get(self, note_id: str) -> Note | None:
        index = self._index_of(note_id)
        return None if index is None else self._notes[index]

    def _index_of(self, note_id: str) -> int | None:
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                return index
        return None

    def _now(self) -> datetime:
        now = self.clock()
        if now.tzinfo is None:
            # Naive clock readings are UTC, as for stored timestamps
            return now.replace(tzinfo=UTC)
        return now

    def _touch_time(self, note: Note) -> datetime:
        # updated_at never precedes created_at, even if the clock moved backwards
        return max(self._now(), note.created_at)

    def create(
        self, content: NoteContent, color: str = DEFAULT_COLOR, is_pinned: bool = False
    ) -> Note:
        """Create a note holding ``content`` under the active language."""
        note_id = self.id_factory()
        if self._index_of(note_id) is not None:
            raise ValidationError(f"Note id {note_id!r} is already in use")

        now = self._now()
        note = Note(
            id=note_id,
            content=ContentTable.single(self.active_language, content),
            color=color,
            is_pinned=is_pinned,
            created_at=now,
            updated_at=now,
        )
        self._notes.insert(0, note)

        get_app_metrics().notes_created.add(1)
        logger.info("note_created", note_id=note_id, language=self.active_language.value)

        self._autosave()
        return note

    def update(
        self,
        note_id: str,
        content: NoteContent,
        color: str | None = None,
        is_pinned: bool | None = None,
    ) -> Note | None:
        """Replace the active-language content of a note, leaving other languages alone."""
        index = self._index_of(note_id)
        if index is None:
            logger.warning("note_update_missing", note_id=note_id)
            return None

        note = self._notes[index]
        changes = {
            "content": note.content.with_entry(self.active_language, content),
            "updated_at": self._touch_time(note),
        }
        if color is not None:
            changes["color"] = color
        if is_pinned is not None:
            changes["is_pinned"] = is_pinned

        updated = note.model_copy(update=changes)
        self._notes[index] = updated

        logger.info(
            "note_updated",
            note_id=note_id,
            language=self.active_language.value,
            fields=sorted(changes),
        )

        self._autosave()
        return updated

    def save(
        self,
        content: NoteContent,
        color: str | None = None,
        is_pinned: bool | None = None,
        note_id: str | None = None,
    ) -> Note | None:
        """Editor save: update when ``note_id`` is given, create otherwise."""
        if note_id:
            return self.update(note_id, content, color=color, is_pinned=is_pinned)
        return self.create(
            content,
            color=color if color is not None else DEFAULT_COLOR,
            is_pinned=bool(is_pinned),
        )

    def delete(self, note_id: str) -> bool:
        """Remove a note. Returns False when there was nothing to delete."""
        index = self._index_of(note_id)
        if index is None:
            logger.debug("note_delete_missing", note_id=note_id)
            return False

        del self._notes[index]

        get_app_metrics().notes_deleted.add(1)
        logger.info("note_deleted", note_id=note_id)

        self._autosave()
        return True

    def toggle_pin(self, note_id: str) -> Note | None:
        """Flip the pinned flag. Pinning is metadata and keeps ``updated_at``."""
        index = self._index_of(note_id)
        if index is None:
            logger.warning("note_pin_missing", note_id=note_id)
            return None

        note = self._notes[index]
        updated = note.model_copy(update={"is_pinned": not note.is_pinned})
        self._notes[index] = updated

        logger.info("note_pin_toggled", note_id=note_id, is_pinned=updated.is_pinned)

        self._autosave()
        return updated

    def merge_translation(
        self, note_id: str, language: Language, content: NoteContent
    ) -> Note | None:
        """Add a translated variant unless the note already has that language.

        The first write for a language wins: an existing slot is never
        overwritten, so a late translation result cannot clobber text the user
        wrote in the meantime.
        """
        language = Language(language)
        index = self._index_of(note_id)
        if index is None:
            logger.info("translation_discarded", note_id=note_id, language=language.value)
            return None

        note = self._notes[index]
        if note.content.has(language):
            logger.info("translation_already_present", note_id=note_id, language=language.value)
            return note

        updated = note.model_copy(
            update={
                "content": note.content.with_entry(language, content),
                "updated_at": self._touch_time(note),
            }
        )
        self._notes[index] = updated

        logger.info("translation_merged", note_id=note_id, language=language.value)

        self._autosave()
        return updated

    def set_active_language(self, language: Language) -> Preferences:
        self.preferences = self.preferences.model_copy(
            update={"active_language": Language(language)}
        )
        logger.info("active_language_changed", language=self.active_language.value)
        self._save_preferences()
        return self.preferences

    def set_view_mode(self, mode: str) -> Preferences:
        if mode not in ("grid", "list"):
            raise ValidationError(f"Unknown view mode: {mode!r}")
        self.preferences = self.preferences.model_copy(update={"view_mode": mode})
        logger.info("view_mode_changed", view_mode=mode)
        self._save_preferences()
        return self.preferences

    def persist(self) -> None:
        """Write the whole collection to the blob store.

        Raises:
            BlobStoreError: If the blob store rejects the write
        """
        self.blob_store.set(NOTES_KEY, _notes_adapter.dump_json(self._notes, by_alias=True))
        self.persist_errors.pop(NOTES_KEY, None)
        logger.debug("notes_persisted", count=len(self._notes))

    def persist_preferences(self) -> None:
        """Write the display preferences to the blob store.

        Raises:
            BlobStoreError: If the blob store rejects the write
        """
        self.blob_store.set(
            PREFERENCES_KEY, self.preferences.model_dump_json(by_alias=True).encode()
        )
        self.persist_errors.pop(PREFERENCES_KEY, None)
        logger.debug("preferences_persisted")

    def _record_persist_error(self, key: str, error: BlobStoreError) -> None:
        # Re-insert so last_persist_error reports the latest failure
        self.persist_errors.pop(key, None)
        self.persist_errors[key] = error.message
        get_app_metrics().persistence_failures.add(1, {"key": key})

    def _autosave(self) -> None:
        try:
            self.persist()
        except BlobStoreError as e:
            # The in-memory change stays live; the failure is surfaced via health
            self._record_persist_error(NOTES_KEY, e)
            logger.error("notes_autosave_failed", error=e.message, count=len(self._notes))

    def _save_preferences(self) -> None:
        try:
            self.persist_preferences()
        except BlobStoreError as e:
            self._record_persist_error(PREFERENCES_KEY, e)
            logger.error("preferences_save_failed", error=e.message)

    def rehydrate(self) -> None:
        """Load notes and preferences, falling back to seeds and defaults."""
        self._notes = self._load_notes()
        self.preferences = self._load_preferences()
        logger.info(
            "note_store_rehydrated",
            count=len(self._notes),
            active_language=self.active_language.value,
            view_mode=self.preferences.view_mode,
        )

    def _load_notes(self) -> list[Note]:
        raw = self.blob_store.get(NOTES_KEY)
        if raw is None:
            logger.info("notes_blob_missing", fallback="seed")
            return seed_notes()

        try:
            notes = _notes_adapter.validate_json(raw)
        except PydanticValidationError as e:
            logger.warning("notes_blob_malformed", fallback="seed", error_count=e.error_count())
            return seed_notes()

        ids = [note.id for note in notes]
        if len(set(ids)) != len(ids):
            logger.warning("notes_blob_duplicate_ids", fallback="seed")
            return seed_notes()

        return notes

    def _load_preferences(self) -> Preferences:
        raw = self.blob_store.get(PREFERENCES_KEY)
        if raw is None:
            return Preferences(active_language=self.default_language)

        try:
            return Preferences.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning("preferences_blob_malformed", error_count=e.error_count())
            return Preferences(active_language=self.default_language)
