"""Text-to-speech readout over an injected platform speech engine.

Playback is globally singular: starting a new utterance stops the current one.
Each ``speak`` call reports exactly one outcome (ended, error or stopped) to its
completion callback, whichever happens first.
"""

import logging
import re
import threading
from collections.abc import Callable
from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel

from src.core.config import constants
from src.services.capabilities import Capability, Unavailable, is_available


logger = logging.getLogger(__name__)

THAI_SCRIPT = re.compile(r"[\u0e00-\u0e7f]")
LANG_THAI = "th-TH"
LANG_ENGLISH = "en-US"


class Voice(BaseModel):
    """Voice offered by the platform engine."""

    name: str
    lang: str


class Utterance(BaseModel):
    """Fully configured request handed to the engine."""

    text: str
    lang: str
    voice: Voice | None = None
    rate: float = constants.SPEECH_RATE
    pitch: float = constants.SPEECH_PITCH
    volume: float = constants.SPEECH_VOLUME


class SpeechOutcome(StrEnum):
    ENDED = "ended"
    ERROR = "error"
    STOPPED = "stopped"


class SpeechEngine(Protocol):
    """Platform speech API (browser speechSynthesis, OS voices, ...)."""

    def voices(self) -> list[Voice]: ...

    def speak(
        self,
        utterance: Utterance,
        *,
        on_end: Callable[[], None],
        on_error: Callable[[Exception], None],
    ) -> None: ...

    def cancel(self) -> None: ...

    @property
    def is_speaking(self) -> bool: ...

    @property
    def is_pending(self) -> bool: ...


CompletionCallback = Callable[[SpeechOutcome], None]


def detect_language(text: str) -> str:
    """Thai script anywhere in the text selects Thai, otherwise English."""
    return LANG_THAI if THAI_SCRIPT.search(text) else LANG_ENGLISH


def _normalize_lang(lang: str) -> str:
    return lang.lower().replace("_", "-")


def select_voice(voices: list[Voice], language: str) -> Voice | None:
    """Pick the best voice for a language tag such as ``th-TH``.

    Voices whose language starts with the same primary subtag qualify; a known
    vendor voice wins over the first qualifying one.
    """
    prefix = _normalize_lang(language).split("-")[0]
    suitable = [v for v in voices if _normalize_lang(v.lang).startswith(prefix)]
    if not suitable:
        return None

    preferred = next(
        (v for v in suitable if any(vendor in v.name for vendor in constants.PREFERRED_VOICE_VENDORS)),
        None,
    )
    return preferred or suitable[0]


class _Playback:
    """Completion guard for one speak call."""

    def __init__(self, on_complete: CompletionCallback | None) -> None:
        self._on_complete = on_complete
        self._lock = threading.Lock()
        self.outcome: SpeechOutcome | None = None

    def finish(self, outcome: SpeechOutcome) -> bool:
        with self._lock:
            if self.outcome is not None:
                return False
            self.outcome = outcome
        if self._on_complete is not None:
            self._on_complete(outcome)
        return True


class SpeechService:
    """Reads text aloud, one utterance at a time."""

    def __init__(self, capability: Capability[SpeechEngine] | None = None) -> None:
        self._capability = capability or Unavailable()
        self._current: _Playback | None = None

    @property
    def available(self) -> bool:
        return is_available(self._capability)

    @property
    def is_active(self) -> bool:
        return self._current is not None

    def speak(self, text: str, on_complete: CompletionCallback | None = None) -> None:
        """Stop whatever is playing, then start reading ``text``."""
        self.stop()

        playback = _Playback(on_complete)
        if not is_available(self._capability):
            logger.warning("Speech engine unavailable", extra={"reason": self._capability.reason})
            playback.finish(SpeechOutcome.ERROR)
            return

        engine = self._capability.handle
        language = detect_language(text)
        voice = select_voice(engine.voices(), language)
        if voice is None:
            logger.warning("No voice found for language %s, using system default", language)

        utterance = Utterance(text=text, lang=language, voice=voice)
        self._current = playback

        def on_end() -> None:
            self._finish(playback, SpeechOutcome.ENDED)

        def on_error(error: Exception) -> None:
            logger.error("Speech playback error", extra={"error": str(error)})
            self._finish(playback, SpeechOutcome.ERROR)

        try:
            engine.speak(utterance, on_end=on_end, on_error=on_error)
        except Exception as e:
            on_error(e)

    def stop(self) -> None:
        """Interrupt the current utterance and drop queued speech; the callback fires with STOPPED."""
        playback, self._current = self._current, None
        if playback is not None:
            playback.finish(SpeechOutcome.STOPPED)

        if is_available(self._capability):
            engine = self._capability.handle
            if engine.is_speaking or engine.is_pending:
                engine.cancel()

    def _finish(self, playback: _Playback, outcome: SpeechOutcome) -> None:
        if self._current is playback:
            self._current = None
        playback.finish(outcome)
