# scriptmimic/models.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Annotated, List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Depth = Literal["low", "medium", "high"]
# at least one non-whitespace character
Text = Annotated[str, Field(min_length=1, pattern=r"\S")]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    """camelCase on the wire, snake_case in Python; values are frozen."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Linguistic(Record):
    sentence_rhythm: Text
    rhetorical_devices: Text
    emotion_level: Text
    formality: Text


class Vocabulary(Record):
    abstract_ratio: Text
    conflict_words_frequency: Text
    lexical_quirks: List[Text] = Field(..., min_length=1)


class Narrative(Record):
    hook_type: Text
    climax_placement: Text
    ending_style: Text
    pacing_pattern: Text


class Editorial(Record):
    perspective_type: Text
    conflict_priority: Text
    reasoning_style: Text


class SafetyRules(Record):
    max_similarity_scale: float = Field(..., ge=0, le=1)
    plagiarism_guard_instructions: Text


class StyleDNA(Record):
    id: Text
    name: Text
    created_at: datetime = Field(default_factory=_now)
    linguistic: Linguistic
    vocabulary: Vocabulary
    narrative: Narrative
    editorial: Editorial
    safety_rules: SafetyRules


class NormalizedTopic(BaseModel):
    topic: str
    angle: str
    key_points: List[str]


class EditorialPlan(BaseModel):
    opening: str
    structure: List[str]
    tone: str
    target_length: float
    depth: Depth


class GeneratedScript(Record):
    id: str
    topic: str
    content: str
    dna_name: str
    created_at: datetime = Field(default_factory=_now)

    @classmethod
    def create(cls, topic: str, content: str, profile: StyleDNA) -> "GeneratedScript":
        return cls(id=str(uuid.uuid4()), topic=topic, content=content, dna_name=profile.name)
