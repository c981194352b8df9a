"""speaklang analyze — language breakdown for a saved transcript."""

from __future__ import annotations

from pathlib import Path

import click

from speaklang.cli.options import config_option, load_config
from speaklang.utils.progress import log_error, log_success, show_analysis


def _read_transcript(path: Path):
    """Transcript JSON (from `speaklang diarize --output`) or plain text."""
    from speaklang.models.transcript import Transcript
    from speaklang.utils.io import read_json

    if path.suffix.lower() == ".json":
        return Transcript(**read_json(path)).segments
    return path.read_text(encoding="utf-8")


@click.command()
@click.argument("transcript", required=False, type=click.Path(exists=True))
@click.option("--text", "-t", default=None, help="Analyze this text instead of a file")
@click.option(
    "--percent", "percent_only",
    is_flag=True,
    help="Only estimate the overall English percentage",
)
@click.option("--output", "-o", default=None, type=click.Path(), help="Write the result as JSON")
@config_option
def analyze_cmd(
    transcript: str | None,
    text: str | None,
    percent_only: bool,
    output: str | None,
    config_path: str | None,
) -> None:
    """Estimate how much of a transcript is English."""
    from speaklang.analysis.backend import AnthropicTextGenerator, BackendError
    from speaklang.analysis.client import LanguageAnalysisClient, format_transcript
    from speaklang.analysis.percent import PercentParseError, estimate_english_percent
    from speaklang.utils.env import load_api_key
    from speaklang.utils.io import write_json

    if transcript is None and text is None:
        log_error("Provide a TRANSCRIPT file or --text")
        raise SystemExit(1)

    config = load_config(config_path).analysis
    content = text if text is not None else _read_transcript(Path(transcript))
    generator = AnthropicTextGenerator(
        load_api_key(), model=config.llm_model, max_tokens=config.max_tokens
    )

    if percent_only:
        flat = format_transcript(content)
        if not flat:
            log_error("No transcript to analyze")
            raise SystemExit(1)
        try:
            percent = estimate_english_percent(generator, flat)
        except PercentParseError as e:
            log_error(f"{e}\nRaw response: {e.raw}")
            raise SystemExit(1)
        except BackendError as e:
            log_error(f"Analysis failed: {e}")
            raise SystemExit(1)
        log_success(f"English: {percent:.0f}%")
        if output:
            write_json(output, {"percent": percent})
        return

    client = LanguageAnalysisClient(
        generator,
        max_retries=config.max_retries,
        backoff_seconds=config.backoff_seconds,
    )
    result = client.analyze(content)
    show_analysis(result)

    if output:
        write_json(output, result.model_dump(mode="json", by_alias=True))
    if result.is_error:
        raise SystemExit(1)
