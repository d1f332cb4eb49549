"""Applying speech transcript fragments to a note body being drafted."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

import structlog

from ..models import Language

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TranscriptFragment:
    """A piece of recognized speech.

    Interim fragments are provisional guesses that a later fragment replaces;
    final fragments are settled text.
    """

    text: str
    is_final: bool


class TranscriptSource(Protocol):
    """Producer of transcript fragments for a recognition locale."""

    def fragments(self, locale: str) -> AsyncIterator[TranscriptFragment]: ...


class DraftBody:
    """Body text under composition, fed by typed text and transcript fragments."""

    def __init__(self, initial: str = ""):
        self.committed = initial
        self.preview = ""
        self.fragments_applied = 0

    @property
    def text(self) -> str:
        """What the editor shows: committed text plus the current interim preview."""
        return self.committed + self.preview

    def apply(self, fragment: TranscriptFragment) -> None:
        if fragment.is_final:
            self.committed += fragment.text
            self.preview = ""
            self.fragments_applied += 1
        else:
            self.preview = fragment.text

    def commit(self) -> str:
        """Drop any unfinished preview and return the settled body."""
        self.preview = ""
        return self.committed


async def dictate(source: TranscriptSource, draft: DraftBody, language: Language) -> DraftBody:
    """Feed every fragment ``source`` emits for ``language`` into ``draft``."""
    locale = Language(language).locale
    logger.info("dictation_started", locale=locale)

    async for fragment in source.fragments(locale):
        draft.apply(fragment)

    logger.info("dictation_finished", locale=locale, fragments=draft.fragments_applied)
    return draft
