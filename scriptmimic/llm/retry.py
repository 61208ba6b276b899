"""
Bounded retry around an invoker callable.

Only ProviderError is retried; a SchemaViolation means the model answered
and is reported at once.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable

from scriptmimic.errors import ProviderError
from scriptmimic.llm.openai_wrapper import call_llm

logger = logging.getLogger(__name__)

Invoker = Callable[..., Any]


def with_retry(
    invoke: Invoker,
    *,
    attempts: int = 3,
    base_delay: float = 1.0,
    factor: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> Invoker:
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    @functools.wraps(invoke)
    def wrapper(**kwargs: Any) -> Any:
        for attempt in range(1, attempts + 1):
            try:
                return invoke(**kwargs)
            except ProviderError as e:
                if attempt == attempts:
                    raise
                delay = base_delay * factor ** (attempt - 1)
                logger.warning(
                    "%s attempt %d/%d failed (%s); retrying in %.1fs",
                    kwargs.get("model", "model"), attempt, attempts, e, delay,
                )
                sleep(delay)

    return wrapper


def default_invoker(settings) -> Invoker:
    """``call_llm`` bound to the configured cost log, with bounded retry."""
    return with_retry(
        functools.partial(call_llm, cost_log=settings.cost_log),
        attempts=settings.max_attempts,
        base_delay=settings.retry_base_delay,
    )
