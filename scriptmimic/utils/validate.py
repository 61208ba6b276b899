"""
Schema-validation helpers + light post-processing of model output.

Usage (inside other modules):
    from scriptmimic.utils.validate import load_schema, parse_structured
    schema = load_schema("style_dna")
    data = parse_structured(raw_text, schema)   # raises SchemaViolation on failure
"""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import jsonschema

from scriptmimic.errors import SchemaViolation

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parents[1] / "schemas"

_FENCED_RE = re.compile(r"```[a-zA-Z]*\s*(.*?)\s*```", re.S)


# ─── internal helpers ────────────────────────────────────────────────────
def _sanitise(raw: str) -> str:
    """Body of the first fenced block (if any), from its first brace on."""
    text = raw.strip()
    fenced = _FENCED_RE.search(text)
    if fenced and "{" in fenced.group(1):
        text = fenced.group(1)
    brace = text.find("{")
    return text[brace:] if brace != -1 else ""


def _maybe_unwrap(obj: Any, schema: Dict[str, Any]) -> Any:
    """
    Models sometimes wrap the real payload:

        {"style_dna": { ... }}

    Accept that pattern when the wrapper key is the schema's title and is
    not itself a declared property.  Otherwise return the object as-is.
    """
    title = schema.get("title")
    if (
        isinstance(obj, dict)
        and len(obj) == 1
        and title in obj
        and title not in schema.get("properties", {})
        and isinstance(obj[title], dict)
    ):
        return obj[title]
    return obj


# ─── public API ──────────────────────────────────────────────────────────
@lru_cache(maxsize=None)
def load_schema(name: str) -> Dict[str, Any]:
    text = (SCHEMA_DIR / f"{name}.schema.json").read_text(encoding="utf-8")
    return json.loads(text)


def wire_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of *schema* without the annotation keys the provider does not need."""
    return {k: v for k, v in schema.items() if k not in {"$schema", "title"}}


def parse_structured(raw: str | None, schema: Dict[str, Any]) -> Any:
    """
    Parse *raw* as JSON and check it against *schema* at every nesting level.

    Raises SchemaViolation (carrying the raw text) when the body is empty,
    is not JSON, or misses / mistypes any required field.
    """
    raw = raw or ""
    text = _sanitise(raw)
    if not text:
        raise SchemaViolation("empty response where JSON was expected", raw=raw)
    try:
        # trailing chatter after the closing brace is ignored
        data, _ = json.JSONDecoder().raw_decode(text)
    except json.JSONDecodeError as e:
        raise SchemaViolation(f"response is not valid JSON: {e}", raw=raw) from e

    data = _maybe_unwrap(data, schema)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        logger.error("Schema %s violated at %s: %s", schema.get("title", "?"), list(e.path), e.message)
        raise SchemaViolation(e.message, raw=raw, path=list(e.path)) from e
    return data
