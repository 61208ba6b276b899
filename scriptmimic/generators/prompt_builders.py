"""
Prompt builders – one (system, user) pair per stage.
• Forensic analysis sees every transcript, split by a visible marker.
• Planning only sees the profile's hook type as a style anchor.
• Drafting sees the full profile.
"""

from __future__ import annotations

import json
from textwrap import dedent
from typing import List, Tuple

from scriptmimic.models import EditorialPlan, NormalizedTopic, StyleDNA

TRANSCRIPT_SEPARATOR = "\n\n--- NEXT TRANSCRIPT ---\n\n"

Prompt = Tuple[str, str]


def _dump(obj) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2)


def build_analysis_prompt(transcripts: List[str]) -> Prompt:
    system = dedent(
        """
        ACT AS A FORENSIC SCRIPT ANALYST.
        Perform a 7-step "Style DNA" extraction on the provided transcripts:
        * linguistic rhythm, rhetorical devices, emotion level, formality
        * vocabulary abstraction, conflict-word frequency, lexical quirks
        * narrative hook, climax placement, ending, pacing
        * editorial perspective, conflict priority, reasoning style
        * safety rules that keep new scripts from copying the source
        Describe HOW the author writes, never WHAT they wrote about.
        Output *only* valid JSON (no markdown).
        """
    ).strip()
    user = "Transcripts to analyze:\n" + TRANSCRIPT_SEPARATOR.join(transcripts)
    return system, user


def build_topic_prompt(raw_input: str) -> Prompt:
    system = (
        "Transform this scriptwriting request into a structured scriptwriting object "
        "containing topic, angle, and key points."
    )
    return system, f'Raw input: "{raw_input}"'


def build_plan_prompt(topic: NormalizedTopic, dna: StyleDNA, target_words: int) -> Prompt:
    system = (
        "Create a detailed editorial plan for a script. "
        f"Style requirements from DNA: {dna.narrative.hook_type}."
    )
    user = f"Topic: {topic.topic}. Angle: {topic.angle}. Target: {target_words} words."
    return system, user


def build_draft_prompt(plan: EditorialPlan, topic: NormalizedTopic, dna: StyleDNA) -> Prompt:
    system = (
        "WRITE A FULL SCRIPT using the provided Style DNA:\n"
        + _dump(dna.to_document())
        + "\n\nAdhere strictly to the editorial plan and stylistic nuances."
        + "\nFollow safetyRules: never reproduce source sentences."
        + "\nNo meta commentary."
    )
    user = f"Plan: {_dump(plan.model_dump())}\n\nTopic: {_dump(topic.model_dump())}"
    return system, user
