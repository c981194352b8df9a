"""Progress reporting utilities using Rich."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from speaklang.models.analysis import AnalysisResult
from speaklang.models.transcript import TranscriptSegment

console = Console(stderr=True)


def log(message: str, *, style: str = "bold") -> None:
    """Log a timestamped message."""
    ts = datetime.now().strftime("%H:%M:%S")
    console.print(f"[dim]\\[{ts}][/dim] {message}", style=style, highlight=False)


def log_step(step: str, message: str) -> None:
    """Log a processing step."""
    ts = datetime.now().strftime("%H:%M:%S")
    console.print(
        f"[dim]\\[{ts}][/dim] [bold cyan]{step}[/bold cyan] {message}",
        highlight=False,
    )


def log_success(message: str) -> None:
    """Log a success message."""
    log(f"[green]✓[/green] {message}", style="")


def log_warning(message: str) -> None:
    """Log a warning message."""
    log(f"[yellow]⚠[/yellow] {message}", style="")


def log_error(message: str) -> None:
    """Log an error message."""
    log(f"[red]✗[/red] {message}", style="")


def show_transcript(segments: list[TranscriptSegment], *, out: Console | None = None) -> None:
    """Print a speaker-labelled transcript table."""
    out = out or console
    table = Table(title="Transcript", show_lines=True)
    table.add_column("Time", style="dim")
    table.add_column("Speaker", style="bold cyan")
    table.add_column("Text")

    for seg in segments:
        table.add_row(seg.timestamp, seg.speaker, seg.text)

    out.print(table)


def show_analysis(result: AnalysisResult, *, out: Console | None = None) -> None:
    """Show an analysis result, or its error with the raw response."""
    out = out or console

    if result.is_error:
        body = f"[red]{result.message}[/red]"
        if result.raw_response:
            body += f"\n\n[dim]Raw response:[/dim]\n{result.raw_response}"
        out.print(Panel(body, title=f"[bold]Analysis failed ({result.status})[/bold]", border_style="red"))
        return

    table = Table(show_header=True, show_lines=True)
    table.add_column("Speaker", style="bold")
    table.add_column("Languages")
    table.add_column("English %", justify="right")
    table.add_column("Details")

    for sp in result.speakers:
        pct = "—" if sp.english_percentage is None else f"{sp.english_percentage:.0f}%"
        table.add_row(sp.speaker, ", ".join(sp.languages), pct, sp.details)

    overall = result.overall_english_percentage
    table.add_row(
        "[bold]Overall[/bold]",
        ", ".join(result.non_english_languages) or "—",
        "—" if overall is None else f"[bold]{overall:.0f}%[/bold]",
        result.summary,
    )

    out.print(Panel(table, title="[bold]Language Analysis[/bold]", border_style="green"))
