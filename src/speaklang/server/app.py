"""HTTP service exposing the English-percentage estimate."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from speaklang import __version__
from speaklang.analysis.backend import AnthropicTextGenerator, TextGenerator, UpstreamError
from speaklang.analysis.percent import PercentParseError, estimate_english_percent
from speaklang.models.config import ServerConfig
from speaklang.utils.progress import log_error, log_warning


def create_app(
    generator: TextGenerator | None = None,
    config: ServerConfig | None = None,
    *,
    api_key: str | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    ``generator`` defaults to the Anthropic backend using ``api_key``.
    """
    config = config or ServerConfig()
    if generator is None:
        generator = AnthropicTextGenerator(
            api_key, model=config.llm_model, max_tokens=config.max_tokens
        )

    app = FastAPI(title="speaklang", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.generator = generator

    @app.get("/api/health")
    def health() -> dict:
        return {
            "status": "ok",
            "model": generator.model,
            "has_api_key": getattr(generator, "has_credentials", True),
        }

    @app.post("/api/analyze-language")
    async def analyze_language(request: Request) -> JSONResponse:
        try:
            payload = await request.json()
        except ValueError:
            payload = None

        text = payload.get("text") if isinstance(payload, dict) else None
        if not isinstance(text, str) or not text:
            return JSONResponse({"error": "missing text"}, status_code=400)

        try:
            percent = await run_in_threadpool(estimate_english_percent, generator, text)
        except UpstreamError as e:
            log_warning(f"Upstream error ({e.status_code}): {e.body[:200]}")
            return JSONResponse({"error": "upstream_error", "details": e.body}, status_code=502)
        except PercentParseError as e:
            log_warning("Could not parse a percentage from the model response")
            return JSONResponse({"error": "could_not_parse", "raw": e.raw}, status_code=500)
        except Exception as e:
            log_error(f"analyze-language failed: {e}")
            return JSONResponse({"error": "server_error", "details": str(e)}, status_code=500)

        return JSONResponse({"percent": percent})

    return app
