"""Speech recognition adapter: engine callbacks → ordered event stream.

Engines report through four callbacks (partial, final, error, end). The
adapter funnels them into a bounded queue and runs a supervisory loop on
the consumer side, restarting the engine when it stops while the session
is still active.
"""

from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import Callable, Iterator, Protocol, Union

from speaklang.utils.progress import log_step, log_warning

NO_SPEECH = "no-speech"
PERMISSION_CODES = ("not-allowed", "service-not-allowed")


@dataclass(frozen=True)
class PartialText:
    """In-progress hypothesis, subject to revision."""

    text: str
    at_ms: float


@dataclass(frozen=True)
class FinalText:
    """Recognizer-confirmed text for a completed utterance."""

    text: str
    at_ms: float


@dataclass(frozen=True)
class RecognitionFailure:
    code: str
    message: str = ""


@dataclass(frozen=True)
class StreamEnded:
    # True when the input itself is finished (e.g. end of file)
    source_exhausted: bool = False


RecognitionEvent = Union[PartialText, FinalText, RecognitionFailure, StreamEnded]
TextEvent = Union[PartialText, FinalText]


class RecognitionError(RuntimeError):
    """Recognition failed; the listening session cannot continue."""

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message


class MicrophonePermissionError(RecognitionError):
    """Microphone access was denied; the user must grant it to continue."""


class RecognitionEngine(Protocol):
    """Continuous, interim-results recognizer."""

    def on_partial(self, callback: Callable[[str, float], None]) -> None: ...
    def on_final(self, callback: Callable[[str, float], None]) -> None: ...
    def on_error(self, callback: Callable[[str, str], None]) -> None: ...
    def on_end(self, callback: Callable[[bool], None]) -> None: ...
    def start(self) -> None: ...
    def stop(self) -> None: ...


class TranscriptionAdapter:
    """Supervises a RecognitionEngine and yields its text events in order."""

    def __init__(
        self,
        engine: RecognitionEngine,
        *,
        max_restarts: int = 5,
        queue_size: int = 256,
        poll_seconds: float = 0.25,
    ) -> None:
        self.engine = engine
        self.max_restarts = max_restarts
        self.poll_seconds = poll_seconds
        self.restarts = 0
        self._active = False
        self._queue: queue.Queue[RecognitionEvent] = queue.Queue(maxsize=queue_size)

        engine.on_partial(lambda text, at_ms: self._publish(PartialText(text, at_ms)))
        engine.on_final(lambda text, at_ms: self._publish(FinalText(text, at_ms)))
        engine.on_error(lambda code, message="": self._publish(RecognitionFailure(code, message)))
        engine.on_end(lambda exhausted=False: self._publish(StreamEnded(exhausted)))

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        self._drain()
        self._active = True
        self.restarts = 0
        self.engine.start()

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self.engine.stop()

    def events(self) -> Iterator[TextEvent]:
        """Yield partial/final events until the stream ends or stop() is called.

        Raises MicrophonePermissionError or RecognitionError on fatal failures.
        """
        while self._active:
            try:
                event = self._queue.get(timeout=self.poll_seconds)
            except queue.Empty:
                continue

            if isinstance(event, (PartialText, FinalText)):
                yield event
            elif isinstance(event, RecognitionFailure):
                self._handle_failure(event)
            elif isinstance(event, StreamEnded):
                if event.source_exhausted or not self._active:
                    self._active = False
                    return
                self._restart()

    def _publish(self, event: RecognitionEvent) -> None:
        """Enqueue from the engine thread; drop the event once nobody is consuming."""
        while True:
            try:
                self._queue.put(event, timeout=self.poll_seconds)
                return
            except queue.Full:
                if not self._active:
                    return

    def _drain(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return

    def _handle_failure(self, failure: RecognitionFailure) -> None:
        if failure.code == NO_SPEECH:
            log_step("Recognition", "No speech detected")
            return

        self._active = False
        self.engine.stop()
        if failure.code in PERMISSION_CODES:
            raise MicrophonePermissionError(
                failure.code,
                failure.message or "Microphone access denied. Allow microphone access and start again.",
            )
        raise RecognitionError(failure.code, failure.message)

    def _restart(self) -> None:
        if self.restarts >= self.max_restarts:
            self._active = False
            raise RecognitionError(
                "restart-limit",
                f"recognizer stopped {self.restarts + 1} times, giving up",
            )
        self.restarts += 1
        log_warning(f"Recognizer ended unexpectedly, restarting ({self.restarts}/{self.max_restarts})")
        try:
            self.engine.start()
        except Exception as e:
            self._active = False
            raise RecognitionError("restart-failed", str(e)) from e
