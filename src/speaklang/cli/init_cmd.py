"""speaklang init — write a default configuration file."""

from __future__ import annotations

from pathlib import Path

import click

from speaklang.models.config import AppConfig
from speaklang.utils.io import write_yaml
from speaklang.utils.progress import log_error, log_success


@click.command()
@click.option(
    "--output", "-o",
    default="speaklang.yaml",
    type=click.Path(),
    help="Where to write the config file",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_cmd(output: str, force: bool) -> None:
    """Write speaklang.yaml with every default spelled out."""
    path = Path(output).resolve()
    if path.exists() and not force:
        log_error(f"{path} already exists (use --force to overwrite)")
        raise SystemExit(1)

    write_yaml(path, AppConfig().model_dump(mode="json"))
    log_success(f"Config written: {path}")
