"""Notes-related Pydantic models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer, model_validator
from pydantic.alias_generators import to_camel

ViewMode = Literal["grid", "list"]

COLOR_PALETTE = [
    "#F0F8F0",
    "#B2E4A8",
    "#A8B778",
    "#F3E5AB",
    "#FFDDC1",
    "#FFC0CB",
    "#C1D1FF",
    "#B2F7E8",
]
DEFAULT_COLOR = COLOR_PALETTE[0]

# Bodies shorter than this are not worth summarizing
MIN_SUMMARY_LENGTH = 50


class Language(str, Enum):
    """Supported note languages."""

    GU = "gu"
    HI = "hi"
    EN = "en"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def locale(self) -> str:
        """Speech recognition locale for this language."""
        return _LOCALES[self]


_DISPLAY_NAMES = {Language.GU: "Gujarati", Language.HI: "Hindi", Language.EN: "English"}
_LOCALES = {Language.GU: "gu-IN", Language.HI: "hi-IN", Language.EN: "en-US"}


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, matching the stored blob format."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoteContent(CamelModel):
    """Title and body of a note in one language."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str


class ContentTable(BaseModel):
    """Per-language content of a note, one optional slot per supported language."""

    model_config = ConfigDict(frozen=True)

    gu: NoteContent | None = None
    hi: NoteContent | None = None
    en: NoteContent | None = None

    @model_validator(mode="after")
    def _require_one_language(self) -> ContentTable:
        if not self.languages():
            raise ValueError("note content must hold at least one language")
        return self

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler):
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}

    @classmethod
    def single(cls, language: Language, content: NoteContent) -> ContentTable:
        return cls(**{Language(language).value: content})

    def get(self, language: Language) -> NoteContent | None:
        return getattr(self, Language(language).value)

    def has(self, language: Language) -> bool:
        return self.get(language) is not None

    def languages(self) -> list[Language]:
        """Languages with content, in enum order."""
        return [language for language in Language if getattr(self, language.value) is not None]

    def with_entry(self, language: Language, content: NoteContent) -> ContentTable:
        return self.model_copy(update={Language(language).value: content})


class Note(CamelModel):
    """A note with one or more language variants."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: ContentTable
    color: str = DEFAULT_COLOR
    is_pinned: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _check_timestamps(self) -> Note:
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt must not precede createdAt")
        return self


class Preferences(CamelModel):
    """User display preferences, persisted separately from notes."""

    view_mode: ViewMode = "grid"
    active_language: Language = Language.GU


class NoteCreate(CamelModel):
    """Request model for creating a note in the active language."""

    title: str = Field(..., min_length=1, max_length=100)
    body: str = Field(..., min_length=1)
    color: str = DEFAULT_COLOR
    is_pinned: bool = False


class NoteUpdate(CamelModel):
    """Request model for saving edits to the active-language content of a note."""

    title: str = Field(..., min_length=1, max_length=100)
    body: str = Field(..., min_length=1)
    color: str | None = None
    is_pinned: bool | None = None


class NoteView(CamelModel):
    """Display-ready projection of a note in one language."""

    model_config = ConfigDict(frozen=True)

    id: str
    language: Language
    title: str
    body: str
    color: str
    is_pinned: bool
    created_at: datetime
    updated_at: datetime
    available_languages: list[Language]
    text_color: Literal["black", "white"]
    can_summarize: bool


class NoteListResponse(CamelModel):
    """Response model for the projected note list."""

    notes: list[NoteView]
    total: int
    language: Language
    query: str = ""


class TranslateNoteRequest(CamelModel):
    """Request model for translating a stored note."""

    target_language: Language
    source_language: Language | None = None


class PreferencesUpdate(CamelModel):
    """Request model for changing preferences; omitted fields are left as they are."""

    view_mode: ViewMode | None = None
    active_language: Language | None = None
