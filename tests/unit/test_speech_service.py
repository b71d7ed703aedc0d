"""Tests for text-to-speech readout."""

import pytest

from src.services.capabilities import Available, Unavailable
from src.services.speech_service import (
    LANG_ENGLISH,
    LANG_THAI,
    SpeechOutcome,
    SpeechService,
    Voice,
    detect_language,
    select_voice,
)
from tests.unit.mocks import FakeSpeechEngine


@pytest.mark.unit
class TestLanguageAndVoice:
    def test_thai_script_detected(self):
        assert detect_language("รดน้ำต้นไม้หน้าบ้าน") == LANG_THAI

    def test_mixed_text_with_thai_is_thai(self):
        assert detect_language("Task: ตัดหญ้า") == LANG_THAI

    def test_default_english(self):
        assert detect_language("Water plants") == LANG_ENGLISH

    def test_prefers_vendor_voice(self):
        voices = [
            Voice(name="Kanya", lang="th-TH"),
            Voice(name="Microsoft Premwadee", lang="th_TH"),
            Voice(name="Samantha", lang="en-US"),
        ]

        assert select_voice(voices, LANG_THAI).name == "Microsoft Premwadee"

    def test_falls_back_to_first_match(self):
        voices = [Voice(name="Samantha", lang="en-US"), Voice(name="Daniel", lang="en-GB")]

        assert select_voice(voices, LANG_ENGLISH).name == "Samantha"

    def test_no_match(self):
        assert select_voice([Voice(name="Samantha", lang="en-US")], LANG_THAI) is None


@pytest.mark.unit
class TestSpeechService:
    def test_natural_end_fires_once(self):
        engine = FakeSpeechEngine()
        service = SpeechService(Available(engine))
        outcomes = []

        service.speak("Water plants", outcomes.append)
        assert service.is_active
        engine.finish()
        service.stop()

        assert outcomes == [SpeechOutcome.ENDED]
        assert not service.is_active

    def test_utterance_configuration(self):
        engine = FakeSpeechEngine()
        service = SpeechService(Available(engine))

        service.speak("รดน้ำต้นไม้")

        utterance = engine.spoken[0]
        assert utterance.lang == LANG_THAI
        assert utterance.voice.name == "Kanya"
        assert utterance.rate == 1.0

    def test_stop_fires_stopped_and_cancels(self):
        engine = FakeSpeechEngine()
        service = SpeechService(Available(engine))
        outcomes = []

        service.speak("Water plants", outcomes.append)
        service.stop()
        engine.finish()

        assert outcomes == [SpeechOutcome.STOPPED]
        assert engine.cancel_count == 1

    def test_new_utterance_stops_previous(self):
        engine = FakeSpeechEngine()
        service = SpeechService(Available(engine))
        first, second = [], []

        service.speak("First", first.append)
        service.speak("Second", second.append)
        engine.finish()

        assert first == [SpeechOutcome.STOPPED]
        assert second == [SpeechOutcome.ENDED]

    def test_engine_error_fires_error_once(self):
        engine = FakeSpeechEngine()
        service = SpeechService(Available(engine))
        outcomes = []

        service.speak("Water plants", outcomes.append)
        engine.fail(RuntimeError("synthesis-failed"))
        service.stop()

        assert outcomes == [SpeechOutcome.ERROR]

    def test_engine_raising_on_speak(self):
        service = SpeechService(Available(FakeSpeechEngine(fail_on_speak=True)))
        outcomes = []

        service.speak("Water plants", outcomes.append)

        assert outcomes == [SpeechOutcome.ERROR]
        assert not service.is_active

    def test_unavailable_engine_completes_with_error(self):
        service = SpeechService(Unavailable("no audio"))
        outcomes = []

        service.speak("Water plants", outcomes.append)

        assert outcomes == [SpeechOutcome.ERROR]
        assert service.available is False

    def test_stop_without_playback_is_noop(self):
        engine = FakeSpeechEngine()
        service = SpeechService(Available(engine))

        service.stop()

        assert engine.cancel_count == 0

    def test_stop_cancels_queued_speech(self):
        engine = FakeSpeechEngine()
        engine.pending = True
        service = SpeechService(Available(engine))

        service.stop()

        assert engine.cancel_count == 1
        assert engine.is_pending is False
