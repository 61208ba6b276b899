"""
Runtime settings.

Layering (last wins): defaults → JSON config file (``--config``) →
``SCRIPTMIMIC_*`` environment variables (``.env`` is honoured).
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import dotenv
from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "SCRIPTMIMIC_"

ReasoningEffort = Literal["minimal", "low", "medium", "high"]


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    analysis_model: str = "gpt-4o"
    topic_model: str = "gpt-4o-mini"
    plan_model: str = "gpt-4o-mini"
    draft_model: str = "gpt-4o"
    draft_temperature: float = Field(0.8, ge=0, le=2)
    # only sent for the analysis and drafting stages
    reasoning_effort: Optional[ReasoningEffort] = None

    max_attempts: int = Field(3, ge=1)
    retry_base_delay: float = Field(1.0, ge=0)
    min_transcript_chars: int = Field(100, ge=0)

    store_dir: Path = Path("scriptmimic_data")
    cost_log: Path = Path.home() / ".scriptmimic_costs.csv"
    log_dir: Optional[Path] = None
    log_level: str = "INFO"


def _from_env() -> Dict[str, Any]:
    out = {}
    for name in Settings.model_fields:
        value = os.getenv(ENV_PREFIX + name.upper())
        if value is not None and value != "":
            out[name] = value
    return out


def load_settings(config_path: Path | None = None) -> Settings:
    dotenv.load_dotenv()
    values: Dict[str, Any] = {}
    if config_path:
        values.update(json.loads(Path(config_path).read_text(encoding="utf-8")))
    values.update(_from_env())
    return Settings(**values)
