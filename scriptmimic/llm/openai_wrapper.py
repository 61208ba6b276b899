"""
Single choke point for talking to the model (openai-python ≥1.0).

``call_llm`` performs exactly one request.  With a ``schema`` it returns the
parsed, validated JSON value; without one it returns the raw text.  It never
retries; wrap it with ``scriptmimic.llm.retry.with_retry`` for that.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, List

import openai
from openai import OpenAI

from scriptmimic.errors import ProviderError
from scriptmimic.utils.validate import parse_structured, wire_schema

logger = logging.getLogger(__name__)

# ─── token price table (USD / 1K tokens) ──────────────────────────────────
_COST = {
    "gpt-4o-mini": 0.0005,
    "gpt-4o": 0.005,
    "gpt-4.1": 0.004,
    "gpt-4.1-mini": 0.001,
    "o4-mini": 0.002,
}
COST_LOG = Path.home() / ".scriptmimic_costs.csv"

_client: OpenAI | None = None


def get_client() -> OpenAI:
    """Client instance (reads OPENAI_API_KEY env var), built on first use."""
    global _client
    if _client is None:
        _client = OpenAI()
    return _client


def _log_cost(model: str, usage: Any, log_file: Path) -> None:
    if usage is None:
        return
    p, c = usage.prompt_tokens, usage.completion_tokens
    cost = (p + c) / 1000 * _COST.get(model, 0.0)
    try:
        if not log_file.exists():
            log_file.parent.mkdir(parents=True, exist_ok=True)
            log_file.write_text("ts,model,prompt_tokens,completion_tokens,cost\n", encoding="utf-8")
        with log_file.open("a", encoding="utf-8") as f:
            f.write(f"{int(time.time())},{model},{p},{c},{cost:.6f}\n")
    except OSError as e:
        logger.warning("Cost log %s not written: %s", log_file, e)
    logger.info("[LLM] %s  p=%d  c=%d  →  $%.4f", model, p, c, cost)


def _messages(prompt: str, system: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]


def call_llm(
    *,
    model: str,
    prompt: str,
    system: str,
    schema: Dict[str, Any] | None = None,
    temperature: float | None = None,
    reasoning_effort: str | None = None,
    max_tokens: int | None = None,
    client: Any = None,
    cost_log: Path | None = None,
) -> Any:
    """
    Execute one chat completion.

    Raises ProviderError for transport / quota / model-side failures and
    SchemaViolation when a declared schema is not met.
    """
    kwargs: Dict[str, Any] = {"model": model, "messages": _messages(prompt, system)}
    if schema is not None:
        kwargs["response_format"] = {
            "type": "json_schema",
            "json_schema": {
                "name": schema.get("title", "response"),
                "schema": wire_schema(schema),
                "strict": False,
            },
        }
    if temperature is not None:
        kwargs["temperature"] = temperature
    if reasoning_effort is not None:
        kwargs["reasoning_effort"] = reasoning_effort
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens

    logger.debug("calling %s (schema=%s)", model, schema.get("title") if schema else None)
    try:
        client = client or get_client()
        response = client.chat.completions.create(**kwargs)
    except openai.OpenAIError as e:
        raise ProviderError(f"{model} request failed: {e}") from e

    if not response.choices:
        raise ProviderError(f"{model} returned no choices")
    _log_cost(model, getattr(response, "usage", None), cost_log or COST_LOG)

    text = response.choices[0].message.content
    if schema is None:
        return text or ""
    return parse_structured(text, schema)
