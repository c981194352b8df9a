"""Text-generation backend port and the Anthropic adapter."""

from __future__ import annotations

from typing import Any, Protocol

from speaklang.utils.progress import log_warning

OVERLOAD_STATUS_CODES = (503, 529)
QUOTA_STATUS_CODES = (429,)


class BackendError(Exception):
    """Base class for text-generation backend failures."""


class MissingCredentialsError(BackendError):
    """No API key configured for the backend."""


class UpstreamError(BackendError):
    """Backend answered with a non-2xx status."""

    def __init__(self, status_code: int | None, body: str) -> None:
        super().__init__(f"upstream returned {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body


class BackendOverloadedError(UpstreamError):
    """Backend temporarily unable to serve; safe to retry."""


class QuotaExceededError(UpstreamError):
    """Usage quota or rate limit exhausted; do not retry."""


class TextGenerator(Protocol):
    """Generate text from a prompt."""

    model: str

    def generate(self, prompt: str, *, temperature: float | None = None) -> str: ...


class AnthropicTextGenerator:
    """TextGenerator over the Anthropic Messages API.

    The SDK client is created on first use so a missing key only fails the
    request that needs it.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = "claude-sonnet-4-6",
        max_tokens: int = 2048,
        client: Any = None,
        http_client: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self._client = client
        self._http_client = http_client

    @property
    def has_credentials(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        if not self.api_key:
            raise MissingCredentialsError("ANTHROPIC_API_KEY not set")

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic is required for language analysis. "
                "Install with: pip install anthropic"
            )

        # Retries are owned by LanguageAnalysisClient.
        kwargs: dict[str, Any] = {"api_key": self.api_key, "max_retries": 0}
        if self._http_client is not None:
            kwargs["http_client"] = self._http_client
        self._client = anthropic.Anthropic(**kwargs)
        return self._client

    def generate(self, prompt: str, *, temperature: float | None = None) -> str:
        import anthropic

        client = self._get_client()
        kwargs: dict[str, Any] = {}
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            message = client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
                **kwargs,
            )
        except anthropic.APIStatusError as e:
            raise _map_status_error(e.status_code, _response_text(e)) from e
        except (anthropic.APITimeoutError, anthropic.APIConnectionError) as e:
            log_warning(f"Backend unreachable: {e}")
            raise BackendOverloadedError(None, str(e)) from e

        return "".join(
            block.text for block in message.content if getattr(block, "type", "text") == "text"
        )


def _response_text(error: Any) -> str:
    response = getattr(error, "response", None)
    return getattr(response, "text", None) or str(error)


def _map_status_error(status_code: int, body: str) -> UpstreamError:
    if status_code in OVERLOAD_STATUS_CODES:
        return BackendOverloadedError(status_code, body)
    if status_code in QUOTA_STATUS_CODES:
        return QuotaExceededError(status_code, body)
    return UpstreamError(status_code, body)
