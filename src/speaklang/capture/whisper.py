"""File-replay recognizer backed by faster-whisper."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable

from speaklang.utils.progress import log_step


class WhisperFileRecognizer:
    """Recognizes an audio file in a worker thread.

    Emits a partial for every word (cumulative text of the segment so far)
    and a final per Whisper segment, stamped with audio-timeline ms.
    Restarting resumes after the last emitted final.
    """

    def __init__(
        self,
        audio_path: Path | str,
        *,
        model_size: str = "small",
        device: str = "cpu",
        language: str | None = None,
    ) -> None:
        try:
            from faster_whisper import WhisperModel
        except ImportError:
            raise ImportError(
                "faster-whisper is required for file recognition. "
                "Install with: pip install speaklang[recognition]"
            )

        self._model_cls = WhisperModel
        self._model = None
        self.audio_path = Path(audio_path)
        self.model_size = model_size
        self.device = device
        self.language = language
        self._emitted_until_ms = -1.0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.join_timeout = 5.0

        self._partial_cb: Callable[[str, float], None] = lambda text, at_ms: None
        self._final_cb: Callable[[str, float], None] = lambda text, at_ms: None
        self._error_cb: Callable[[str, str], None] = lambda code, message="": None
        self._end_cb: Callable[[bool], None] = lambda exhausted=False: None

    def on_partial(self, callback: Callable[[str, float], None]) -> None:
        self._partial_cb = callback

    def on_final(self, callback: Callable[[str, float], None]) -> None:
        self._final_cb = callback

    def on_error(self, callback: Callable[[str, str], None]) -> None:
        self._error_cb = callback

    def on_end(self, callback: Callable[[bool], None]) -> None:
        self._end_cb = callback

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="whisper-recognizer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.join_timeout)

    def _run(self) -> None:
        try:
            if self._model is None:
                compute_type = "int8" if self.device == "cpu" else "float16"
                log_step("Recognition", f"Loading model: {self.model_size} ({self.device}, {compute_type})")
                self._model = self._model_cls(self.model_size, device=self.device, compute_type=compute_type)

            segments, _info = self._model.transcribe(
                str(self.audio_path),
                beam_size=5,
                word_timestamps=True,
                vad_filter=True,
                language=self.language,
            )

            for seg in segments:
                if self._stop.is_set():
                    self._end_cb(False)
                    return
                end_ms = seg.end * 1000.0
                if end_ms <= self._emitted_until_ms or not seg.text.strip():
                    continue

                spoken: list[str] = []
                for w in seg.words or []:
                    spoken.append(w.word.strip())
                    self._partial_cb(" ".join(spoken), w.end * 1000.0)

                self._final_cb(seg.text.strip(), end_ms)
                self._emitted_until_ms = end_ms
        except Exception as e:
            self._error_cb("engine-failure", str(e))
            return

        self._end_cb(True)
