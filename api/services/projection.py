"""Filtered, sorted, language-projected note views for display."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..models import MIN_SUMMARY_LENGTH, Language, Note, NoteView


def text_color_for(color: str) -> str:
    """Pick black or white text for a hex background color by its luminance."""
    if not color or len(color) < 7:
        return "black"

    hex_value = color[1:7] if color.startswith("#") else color[:6]
    try:
        r = int(hex_value[0:2], 16)
        g = int(hex_value[2:4], 16)
        b = int(hex_value[4:6], 16)
    except ValueError:
        return "black"

    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "black" if luminance > 0.6 else "white"


def matches_query(note: Note, query: str, language: Language) -> bool:
    """Case-insensitive substring match against the note's title or body in ``language``.

    The query is matched as typed, surrounding whitespace included; only an
    empty query matches every note.
    """
    content = note.content.get(language)
    if content is None:
        return False

    needle = query.casefold()
    if not needle:
        return True
    return needle in content.title.casefold() or needle in content.body.casefold()


def sort_for_display(notes: Iterable[Note]) -> list[Note]:
    """Pinned notes first, then most recently updated; ties keep their given order."""
    # Two stable passes: recency first, then the pin group on top of it
    by_recency = sorted(notes, key=lambda note: note.updated_at, reverse=True)
    return sorted(by_recency, key=lambda note: not note.is_pinned)


def to_view(note: Note, language: Language) -> NoteView:
    content = note.content.get(language)
    return NoteView(
        id=note.id,
        language=language,
        title=content.title,
        body=content.body,
        color=note.color,
        is_pinned=note.is_pinned,
        created_at=note.created_at,
        updated_at=note.updated_at,
        available_languages=note.content.languages(),
        text_color=text_color_for(note.color),
        can_summarize=len(content.body) >= MIN_SUMMARY_LENGTH,
    )


class NoteProjection:
    """Restartable view over a snapshot of notes.

    Nothing is computed until iteration, and every iteration recomputes the
    filter and sort from the snapshot captured at construction.
    """

    def __init__(self, notes: Iterable[Note], search_query: str, language: Language):
        self._notes = tuple(notes)
        self.search_query = search_query or ""
        self.language = Language(language)

    def __iter__(self) -> Iterator[NoteView]:
        visible = (
            note for note in self._notes if matches_query(note, self.search_query, self.language)
        )
        for note in sort_for_display(visible):
            yield to_view(note, self.language)

    def ids(self) -> list[str]:
        return [view.id for view in self]


def project_notes(
    notes: Iterable[Note], search_query: str = "", language: Language = Language.GU
) -> NoteProjection:
    """Project ``notes`` for display in ``language``, filtered by ``search_query``."""
    return NoteProjection(notes, search_query, language)
