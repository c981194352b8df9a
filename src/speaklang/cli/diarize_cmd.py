"""speaklang diarize — replay a recording through the live pipeline."""

from __future__ import annotations

from pathlib import Path

import click

from speaklang.cli.options import config_option, load_config
from speaklang.utils.progress import log_error, log_step, show_analysis, show_transcript


@click.command()
@click.argument("audio", type=click.Path(exists=True))
@click.option("--analyze", "run_analysis", is_flag=True, help="Run language analysis afterwards")
@click.option("--output", "-o", default=None, type=click.Path(), help="Write the transcript as JSON")
@config_option
def diarize_cmd(
    audio: str,
    run_analysis: bool,
    output: str | None,
    config_path: str | None,
) -> None:
    """Transcribe AUDIO with speaker labels."""
    from speaklang.analysis.backend import AnthropicTextGenerator
    from speaklang.analysis.client import LanguageAnalysisClient
    from speaklang.capture.audio import FileAudioTap
    from speaklang.capture.recognition import RecognitionError, TranscriptionAdapter
    from speaklang.capture.whisper import WhisperFileRecognizer
    from speaklang.pipeline.listen import ListeningSession
    from speaklang.utils.env import load_api_key
    from speaklang.utils.io import write_json

    config = load_config(config_path)
    audio_path = Path(audio).resolve()
    rec = config.recognition

    analysis_client = None
    if run_analysis:
        generator = AnthropicTextGenerator(
            load_api_key(),
            model=config.analysis.llm_model,
            max_tokens=config.analysis.max_tokens,
        )
        analysis_client = LanguageAnalysisClient(
            generator,
            max_retries=config.analysis.max_retries,
            backoff_seconds=config.analysis.backoff_seconds,
        )

    try:
        engine = WhisperFileRecognizer(
            audio_path, model_size=rec.model_size, device=rec.device, language=rec.language
        )
        tap = FileAudioTap(audio_path, fft_size=config.diarization.fft_size)
    except (ImportError, RuntimeError) as e:
        log_error(str(e))
        raise SystemExit(1)

    adapter = TranscriptionAdapter(
        engine, max_restarts=rec.max_restarts, queue_size=rec.queue_size
    )
    session = ListeningSession(
        tap, adapter, config=config.diarization, analysis_client=analysis_client
    )

    log_step("Diarize", f"Replaying {audio_path.name} ({tap.duration_ms / 1000:.1f}s)")
    try:
        transcript = session.run(
            on_segment=lambda seg: log_step(seg.speaker, seg.text),
        )
    except RecognitionError as e:
        log_error(f"Diarization failed: {e}")
        raise SystemExit(1)
    except KeyboardInterrupt:
        session.stop()
        raise SystemExit(130)

    transcript.source = audio_path.name
    show_transcript(transcript.segments)

    if output:
        write_json(output, transcript.model_dump(mode="json"))

    if analysis_client is not None:
        result = session.analyze(
            on_status=lambda r: log_step("Analysis", r.message or r.status),
        )
        show_analysis(result)
        if result.is_error:
            raise SystemExit(1)
