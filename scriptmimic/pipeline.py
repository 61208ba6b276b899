"""
Generation pipeline: NORMALIZING → PLANNING → DRAFTING → DONE.

Stages run strictly one after the other.  Before each stage the observer
(if any) is told which stage is about to run.  The first failure moves the
run to FAILED and is re-raised unchanged; later stages are never started.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Optional

from scriptmimic.config import Settings, load_settings
from scriptmimic.errors import InsufficientInput
from scriptmimic.generators import stages
from scriptmimic.llm.retry import Invoker, default_invoker
from scriptmimic.models import StyleDNA

logger = logging.getLogger(__name__)


class Stage(enum.Enum):
    NORMALIZING = "Normalizing Topic..."
    PLANNING = "Crafting Editorial Plan..."
    DRAFTING = "Drafting Full Script..."
    DONE = "Done"
    FAILED = "Failed"

    @property
    def label(self) -> str:
        return self.value


ProgressObserver = Callable[[Stage], None]


class GenerationPipeline:
    """One run of the topic → script pipeline.  Not reusable."""

    def __init__(
        self,
        profile: StyleDNA,
        target_word_count: int,
        on_progress: Optional[ProgressObserver] = None,
        *,
        invoke: Invoker | None = None,
        settings: Settings | None = None,
    ):
        self.profile = profile
        self.target_word_count = target_word_count
        self.on_progress = on_progress
        self.settings = settings or load_settings()
        self.invoke = invoke or default_invoker(self.settings)
        self.state: Stage | None = None

    def _enter(self, stage: Stage) -> None:
        self.state = stage
        logger.info("── %s", stage.label)
        if self.on_progress is not None:
            self.on_progress(stage)

    def run(self, topic_input: str) -> str:
        if self.state is not None:
            raise RuntimeError("pipeline run already started")
        if not topic_input or not topic_input.strip():
            raise InsufficientInput("Topic / outline must not be empty.")
        if self.target_word_count < 1:
            raise InsufficientInput("Target word count must be a positive integer.")

        opts = dict(invoke=self.invoke, settings=self.settings)
        try:
            self._enter(Stage.NORMALIZING)
            topic = stages.normalize_topic(topic_input, **opts)

            self._enter(Stage.PLANNING)
            plan = stages.plan_editorial(topic, self.profile, self.target_word_count, **opts)

            self._enter(Stage.DRAFTING)
            script = stages.compose_draft(plan, topic, self.profile, **opts)
        except Exception:
            logger.error("Pipeline failed during %s", self.state.name)
            self.state = Stage.FAILED
            raise

        self.state = Stage.DONE
        return script


def run_generation_pipeline(
    topic_input: str,
    profile: StyleDNA,
    target_word_count: int,
    on_progress: Optional[ProgressObserver] = None,
    *,
    invoke: Invoker | None = None,
    settings: Settings | None = None,
) -> str:
    pipeline = GenerationPipeline(
        profile, target_word_count, on_progress, invoke=invoke, settings=settings
    )
    return pipeline.run(topic_input)
