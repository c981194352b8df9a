"""Shared CLI options."""

from __future__ import annotations

from pathlib import Path

import click

from speaklang.models.config import AppConfig
from speaklang.utils.progress import log_error

config_option = click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(),
    help="Path to speaklang.yaml (defaults are used when omitted)",
)


def load_config(config_path: str | None) -> AppConfig:
    """Load the app config or exit with status 1."""
    if config_path is None:
        default = Path("speaklang.yaml")
        return AppConfig.load(default if default.exists() else None)

    path = Path(config_path).resolve()
    if not path.exists():
        log_error(f"Config not found: {path}")
        raise SystemExit(1)
    try:
        return AppConfig.load(path)
    except ValueError as e:
        log_error(f"Invalid config {path.name}: {e}")
        raise SystemExit(1)
