"""speaklang serve — run the analyze-language HTTP service."""

from __future__ import annotations

import click

from speaklang.cli.options import config_option, load_config
from speaklang.utils.progress import log


@click.command()
@config_option
@click.option("--host", default=None, help="Bind address (overrides config)")
@click.option("--port", default=None, type=int, help="Port (overrides config)")
def serve_cmd(config_path: str | None, host: str | None, port: int | None) -> None:
    """Serve POST /api/analyze-language."""
    import uvicorn

    from speaklang.server.app import create_app
    from speaklang.utils.env import load_api_key

    config = load_config(config_path).server
    if host:
        config.host = host
    if port:
        config.port = port

    app = create_app(config=config, api_key=load_api_key())
    log(f"Starting speaklang on {config.host}:{config.port} (model: {config.llm_model})")
    uvicorn.run(app, host=config.host, port=config.port)
