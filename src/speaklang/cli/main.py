"""Root CLI group for speaklang."""

from __future__ import annotations

import click

from speaklang import __version__


@click.group()
@click.version_option(version=__version__, prog_name="speaklang")
def cli() -> None:
    """speaklang — who spoke, and how much of it was English."""


# Import and register subcommands
from speaklang.cli.init_cmd import init_cmd  # noqa: E402
from speaklang.cli.serve_cmd import serve_cmd  # noqa: E402
from speaklang.cli.analyze_cmd import analyze_cmd  # noqa: E402
from speaklang.cli.diarize_cmd import diarize_cmd  # noqa: E402

cli.add_command(init_cmd, "init")
cli.add_command(serve_cmd, "serve")
cli.add_command(analyze_cmd, "analyze")
cli.add_command(diarize_cmd, "diarize")
