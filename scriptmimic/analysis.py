"""
Style DNA extraction: transcripts → one forensic model call → StyleDNA.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from scriptmimic.config import Settings, load_settings
from scriptmimic.errors import (
    AnalysisFailed,
    DuplicateProfileName,
    InsufficientInput,
    ProviderError,
    SchemaViolation,
)
from scriptmimic.generators.prompt_builders import build_analysis_prompt
from scriptmimic.identity import stable_profile_id
from scriptmimic.llm.retry import Invoker, default_invoker
from scriptmimic.models import StyleDNA
from scriptmimic.utils.validate import load_schema

logger = logging.getLogger(__name__)

SECTIONS = ("linguistic", "vocabulary", "narrative", "editorial", "safetyRules")


def substantial_transcripts(transcripts: Iterable[str], min_chars: int = 100) -> List[str]:
    """Trimmed transcripts longer than *min_chars*, in their original order."""
    trimmed = (t.strip() for t in transcripts)
    return [t for t in trimmed if len(t) > min_chars]


def ensure_unique_name(existing: Iterable[StyleDNA], name: str) -> None:
    wanted = name.strip().lower()
    if any(p.name.strip().lower() == wanted for p in existing):
        raise DuplicateProfileName(f'A style profile named "{name.strip()}" already exists.')


def extract_style_profile(
    transcripts: Iterable[str],
    name: str,
    *,
    invoke: Invoker | None = None,
    settings: Settings | None = None,
) -> StyleDNA:
    """
    Run forensic analysis over *transcripts* and return a new StyleDNA.

    Fails with InsufficientInput before any model call when the name is
    blank or no transcript is substantial; any invoker failure surfaces
    as AnalysisFailed with the original error as ``__cause__``.
    """
    settings = settings or load_settings()
    name = name.strip()
    if not name:
        raise InsufficientInput("Please provide a name for this style profile.")

    sources = substantial_transcripts(transcripts, settings.min_transcript_chars)
    if not sources:
        raise InsufficientInput(
            f"Please provide at least one substantial transcript "
            f"(min {settings.min_transcript_chars} characters)."
        )

    invoke = invoke or default_invoker(settings)

    system, user = build_analysis_prompt(sources)
    logger.info("Analysing %d transcript(s) for profile %r", len(sources), name)
    try:
        data = invoke(
            model=settings.analysis_model,
            prompt=user,
            system=system,
            schema=load_schema("style_dna"),
            reasoning_effort=settings.reasoning_effort,
        )
    except (SchemaViolation, ProviderError) as e:
        logger.error("Style analysis failed: %s", e)
        raise AnalysisFailed(f"Analysis failed for profile {name!r}: {e}") from e

    sections = {k: data[k] for k in SECTIONS}
    dna = StyleDNA.model_validate({**sections, "id": stable_profile_id(name, sources), "name": name})
    logger.info("Extracted profile %s (%s)", dna.id, dna.name)
    return dna
