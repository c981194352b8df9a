"""Retry decorators using tenacity."""

from __future__ import annotations

import time
from typing import Callable

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)


def retry_on_overload(
    exception_types: type[BaseException] | tuple[type[BaseException], ...],
    *,
    max_retries: int = 3,
    step_seconds: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
    before_sleep: Callable[[RetryCallState], None] | None = None,
):
    """Retry decorator with linear backoff (step, 2*step, 3*step, ...).

    ``max_retries`` counts retries, so the wrapped call runs at most
    ``max_retries + 1`` times. The last exception is re-raised.
    """
    return retry(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_incrementing(start=step_seconds, increment=step_seconds),
        retry=retry_if_exception_type(exception_types),
        sleep=sleep,
        before_sleep=before_sleep,
        reraise=True,
    )
