"""Microphone dictation through the SpeechRecognition library.

Each phrase captured from the default microphone is sent to the Google Web
Speech API and emitted as a final transcript fragment. The library does not
expose interim hypotheses, so this source never produces interim fragments.
"""

import asyncio
from collections.abc import AsyncIterator

import speech_recognition as sr
import structlog

from api.exceptions import ServiceError, UnsupportedCapabilityError
from api.services.transcript import TranscriptFragment

logger = structlog.get_logger(__name__)

RETRY_LIMIT = 2


class SpeechRecognitionSource:
    """Transcript source reading phrases from the default microphone.

    Dictation ends after ``silence_timeout`` seconds without speech, after
    ``max_phrases`` phrases, or when ``stop()`` is called.
    """

    def __init__(
        self,
        recognizer: sr.Recognizer | None = None,
        microphone_factory=None,
        silence_timeout: float = 5.0,
        phrase_time_limit: float = 15.0,
        max_phrases: int | None = None,
    ):
        self.recognizer = recognizer or sr.Recognizer()
        self.microphone_factory = microphone_factory or sr.Microphone
        self.silence_timeout = silence_timeout
        self.phrase_time_limit = phrase_time_limit
        self.max_phrases = max_phrases
        self._stopped = False

    def stop(self) -> None:
        self._stopped = True

    def _open_microphone(self):
        try:
            return self.microphone_factory()
        except (AttributeError, OSError) as e:
            # AttributeError: PyAudio missing; OSError: no input device
            logger.warning("microphone_unavailable", error=str(e))
            raise UnsupportedCapabilityError(f"Speech recognition is not available: {e}") from e

    async def fragments(self, locale: str) -> AsyncIterator[TranscriptFragment]:
        microphone = self._open_microphone()
        self._stopped = False

        try:
            with microphone as source:
                async for fragment in self._recognize(source, locale):
                    yield fragment
        except OSError as e:
            logger.warning("microphone_failed", error=str(e))
            raise UnsupportedCapabilityError(f"Microphone could not be used: {e}") from e

    async def _recognize(self, source, locale: str) -> AsyncIterator[TranscriptFragment]:
        await asyncio.to_thread(self.recognizer.adjust_for_ambient_noise, source, 0.5)

        phrases = 0
        while not self._stopped:
            try:
                audio = await asyncio.to_thread(
                    self.recognizer.listen,
                    source,
                    timeout=self.silence_timeout,
                    phrase_time_limit=self.phrase_time_limit,
                )
            except sr.WaitTimeoutError:
                logger.info("dictation_silence_timeout", phrases=phrases)
                return

            text = await self._transcribe(audio, locale)
            if not text:
                continue

            # Separate consecutive phrases with a space
            yield TranscriptFragment(text=f" {text}" if phrases else text, is_final=True)
            phrases += 1

            if self.max_phrases is not None and phrases >= self.max_phrases:
                return

    async def _transcribe(self, audio, locale: str) -> str:
        for attempt in range(1, RETRY_LIMIT + 1):
            try:
                text = await asyncio.to_thread(
                    self.recognizer.recognize_google, audio, language=locale
                )
                return text.strip()
            except sr.UnknownValueError:
                logger.debug("speech_not_understood", locale=locale)
                return ""
            except sr.RequestError as e:
                if attempt < RETRY_LIMIT:
                    logger.warning("speech_request_retry", attempt=attempt, error=str(e))
                    await asyncio.sleep(0.25)
                    continue
                logger.error("speech_request_failed", attempts=attempt, error=str(e))
                raise ServiceError(f"Speech recognition service failed: {e}") from e
        return ""
