"""
The three generation stages.  Each one is a single model call; errors from
the invoker (ProviderError / SchemaViolation) pass through untouched.
"""

from __future__ import annotations

import logging

from scriptmimic.config import Settings, load_settings
from scriptmimic.errors import ProviderError
from scriptmimic.generators import prompt_builders as pb
from scriptmimic.llm.openai_wrapper import call_llm
from scriptmimic.llm.retry import Invoker
from scriptmimic.models import Depth, EditorialPlan, NormalizedTopic, StyleDNA
from scriptmimic.utils.validate import load_schema

logger = logging.getLogger(__name__)

HIGH_DEPTH_WORDS = 3000
MEDIUM_DEPTH_WORDS = 1000


def classify_depth(target_words: int) -> Depth:
    if target_words > HIGH_DEPTH_WORDS:
        return "high"
    if target_words > MEDIUM_DEPTH_WORDS:
        return "medium"
    return "low"


def normalize_topic(
    raw_input: str, *, invoke: Invoker = call_llm, settings: Settings | None = None
) -> NormalizedTopic:
    settings = settings or load_settings()
    system, user = pb.build_topic_prompt(raw_input.strip())
    data = invoke(
        model=settings.topic_model,
        prompt=user,
        system=system,
        schema=load_schema("normalized_topic"),
    )
    topic = NormalizedTopic.model_validate(data)
    logger.info("Topic normalised: %r (%d key points)", topic.topic, len(topic.key_points))
    return topic


def plan_editorial(
    topic: NormalizedTopic,
    dna: StyleDNA,
    target_words: int,
    *,
    invoke: Invoker = call_llm,
    settings: Settings | None = None,
) -> EditorialPlan:
    settings = settings or load_settings()
    # decided locally, never asked of the model
    depth = classify_depth(target_words)
    system, user = pb.build_plan_prompt(topic, dna, target_words)
    data = invoke(
        model=settings.plan_model,
        prompt=user,
        system=system,
        schema=load_schema("editorial_plan"),
    )
    plan = EditorialPlan.model_validate({**data, "depth": depth})
    logger.info("Plan: %d sections, depth=%s", len(plan.structure), depth)
    return plan


def compose_draft(
    plan: EditorialPlan,
    topic: NormalizedTopic,
    dna: StyleDNA,
    *,
    invoke: Invoker = call_llm,
    settings: Settings | None = None,
) -> str:
    settings = settings or load_settings()
    system, user = pb.build_draft_prompt(plan, topic, dna)
    text = invoke(
        model=settings.draft_model,
        prompt=user,
        system=system,
        temperature=settings.draft_temperature,
        reasoning_effort=settings.reasoning_effort,
    )
    if not text or not text.strip():
        raise ProviderError(f"{settings.draft_model} returned no script text")
    logger.info("Draft: %d words", len(text.split()))
    return text
