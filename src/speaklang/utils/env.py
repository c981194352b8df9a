"""Process environment — .env loading and the backend API key."""

from __future__ import annotations

import os

from dotenv import load_dotenv

from speaklang.utils.progress import log_warning

API_KEY_ENV = "ANTHROPIC_API_KEY"


def load_api_key() -> str | None:
    """Read the backend API key once at startup.

    A missing key is only a warning: requests fail downstream instead.
    """
    load_dotenv()
    api_key = os.environ.get(API_KEY_ENV) or None
    if not api_key:
        log_warning(
            f"{API_KEY_ENV} not set — analysis requests will fail until it is provided."
        )
    return api_key
