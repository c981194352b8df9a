"""Tests for the listening session lifecycle."""

import json
import unittest

from speaklang.analysis.client import LanguageAnalysisClient
from speaklang.capture.recognition import MicrophonePermissionError, TranscriptionAdapter
from speaklang.models.config import DiarizationConfig
from speaklang.pipeline.listen import ListeningSession

from tests.fakes import FakeGenerator, FakeTap, ScriptedEngine, high_voice_frame, low_voice_frame


def make_session(tap, *runs, generator=None) -> ListeningSession:
    adapter = TranscriptionAdapter(ScriptedEngine(*runs), poll_seconds=0.01)
    client = None
    if generator is not None:
        client = LanguageAnalysisClient(generator, sleep=lambda s: None)
    return ListeningSession(tap, adapter, config=DiarizationConfig(), analysis_client=client)


class TestListeningSession(unittest.TestCase):

    def test_two_voices_two_speakers(self):
        tap = FakeTap(low_voice_frame(), high_voice_frame(), switch_ms=2000)
        session = make_session(tap, [
            ("partial", "hello", 600),
            ("final", "hello there", 1000),
            ("final", "hola amigo", 3500),
            ("end", True),
        ])

        transcript = session.run()

        self.assertEqual(
            [(s.speaker, s.text) for s in transcript.segments],
            [("Speaker-1", "hello there"), ("Speaker-2", "hola amigo")],
        )
        self.assertEqual(transcript.speakers, ["Speaker-1", "Speaker-2"])
        self.assertEqual(session.status, "stopped")
        self.assertEqual(session.partial, "")
        self.assertTrue(tap.closed)

    def test_audio_sampled_on_fixed_interval_up_to_event(self):
        tap = FakeTap(low_voice_frame())
        session = make_session(tap, [("final", "hi", 450), ("end", True)])
        session.run()
        self.assertEqual(tap.reads, [0, 100, 200, 300, 400])

    def test_one_voice_one_speaker(self):
        tap = FakeTap(low_voice_frame())
        session = make_session(tap, [
            ("final", "one", 1000),
            ("final", "two", 1300),
            ("final", "three", 1700),
            ("end", True),
        ])
        transcript = session.run()
        self.assertEqual({s.speaker for s in transcript.segments}, {"Speaker-1"})

    def test_partial_callback_and_blank_finals(self):
        tap = FakeTap(low_voice_frame())
        session = make_session(tap, [
            ("partial", "wor", 100),
            ("final", "   ", 200),
            ("end", True),
        ])
        partials = []
        transcript = session.run(on_partial=partials.append)

        self.assertEqual(partials, ["wor"])
        self.assertEqual(transcript.segments, [])

    def test_permission_error_releases_tap(self):
        tap = FakeTap(low_voice_frame())
        session = make_session(tap, [("error", "not-allowed"), ("end", True)])

        with self.assertRaises(MicrophonePermissionError):
            session.run()
        self.assertTrue(tap.closed)
        self.assertEqual(session.status, "error")

    def test_callback_failure_marks_error_and_allows_rerun(self):
        tap = FakeTap(low_voice_frame())
        session = make_session(tap, [("final", "hi", 500), ("end", True)])

        def fail(segment):
            raise ValueError("display gone")

        with self.assertRaises(ValueError):
            session.run(on_segment=fail)
        self.assertEqual(session.status, "error")
        self.assertTrue(tap.closed)

        transcript = session.run()
        self.assertEqual(session.status, "stopped")
        self.assertEqual([s.text for s in transcript.segments], ["hi"])

    def test_each_run_starts_a_fresh_registry(self):
        script = [("final", "hi", 500), ("end", True)]
        session = make_session(FakeTap(high_voice_frame()), script)
        session.run()
        first_registry = session.diarization

        session.tap = FakeTap(low_voice_frame())
        transcript = session.run()

        self.assertIsNot(session.diarization, first_registry)
        self.assertEqual(transcript.segments[0].speaker, "Speaker-1")

    def test_analyze(self):
        gen = FakeGenerator(json.dumps({"overallEnglishPercentage": 50, "summary": "half"}))
        session = make_session(
            FakeTap(low_voice_frame()),
            [("final", "hello hola", 500), ("end", True)],
            generator=gen,
        )
        session.run()
        result = session.analyze()

        self.assertEqual(result.overall_english_percentage, 50)
        self.assertIs(session.analysis, result)
        self.assertEqual(session.status, "idle")
        self.assertIn("Speaker-1: hello hola", gen.prompts[0])

    def test_analyze_empty_transcript_skips_backend(self):
        gen = FakeGenerator("{}")
        session = make_session(FakeTap(low_voice_frame()), [("end", True)], generator=gen)
        session.run()

        result = session.analyze()

        self.assertEqual(result.status, "error")
        self.assertEqual(gen.calls, 0)

    def test_analyze_while_analyzing_is_refused(self):
        session = make_session(FakeTap(low_voice_frame()), [("end", True)], generator=FakeGenerator("{}"))
        session.status = "analyzing"
        with self.assertRaises(RuntimeError):
            session.analyze()


if __name__ == "__main__":
    unittest.main()
