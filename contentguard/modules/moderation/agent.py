"""Moderation pipeline.

    start -> analyze -> classify -> decide -> [needs_visualization] generate_visualization -> end

Each stage reads the current ``ModerationState`` and returns a partial update that is
merged into a new state. Stages run strictly in sequence for one submission.
"""

from enum import Enum as PyEnum
from typing import Any

from contentguard.core import events
from contentguard.core.enums import ContentClassification, ContentType
from contentguard.core.exception import PipelineStateError
from contentguard.core.logging import get_logger
from contentguard.core.utils.image import is_analyzable_image_source
from contentguard.modules.moderation.config import ModerationConfig
from contentguard.modules.moderation.providers import ProviderClients
from contentguard.modules.moderation.schemas import ModerationState
from contentguard.modules.moderation.services import (
    ContentAnalyzerService,
    DecisionService,
    VisionAnalyzerService,
    VisualizationService,
)

logger = get_logger(__name__)


class PipelineStage(str, PyEnum):
    ANALYZE = "analyze"
    CLASSIFY = "classify"
    DECIDE = "decide"
    GENERATE_VISUALIZATION = "generate_visualization"


class ModerationAgent:
    """Runs the moderation pipeline for one provider configuration.

    The agent holds no per-submission state, so one instance serves concurrent
    submissions.
    """

    def __init__(self, config: ModerationConfig, clients: ProviderClients | None = None):
        self.config = config
        self.clients = clients or ProviderClients.from_config(config)

        self.vision_analyzer = VisionAnalyzerService(self.clients, timeout_seconds=config.provider_timeout_seconds)
        self.content_analyzer = ContentAnalyzerService(self.clients, config.preferred_provider)
        self.visualization_service = VisualizationService(self.clients)
        self.decision_service = DecisionService()

        logger.info(f"Moderation agent initialized with preferred provider: {config.preferred_provider.value}")

    @property
    def preferred_provider(self):
        return self.config.preferred_provider

    def is_gemini_available(self) -> bool:
        return self.clients.gemini is not None

    async def moderate(self, content: str, content_type: ContentType) -> ModerationState:
        """Run the complete pipeline and return the terminal state.

        Raises:
            PipelineStateError: If a stage runs without its required inputs
            Exception: Anything a stage raises is propagated unchanged
        """
        logger.info(f"Starting moderation for {content_type.value} content")

        state = ModerationState(content=content, content_type=content_type)
        stage = PipelineStage.ANALYZE

        try:
            state = state.merge(await self.analyze(state))

            stage = PipelineStage.CLASSIFY
            state = state.merge(self.classify(state))

            stage = PipelineStage.DECIDE
            state = state.merge(await self.decide(state))

            if state.needs_visualization:
                stage = PipelineStage.GENERATE_VISUALIZATION
                state = state.merge(await self.generate_visualization(state))
        except Exception as e:
            logger.error(f"Moderation workflow failed at stage '{stage.value}': {e}")
            raise

        logger.info(f"Moderation complete: {state.decision.value} (via {state.ai_provider.value})")
        return state

    async def analyze(self, state: ModerationState) -> dict[str, Any]:
        logger.info(f"Analyzing {state.content_type.value} content")

        # Vision resolves its own failures to fallback or error results
        if state.content_type is ContentType.IMAGE and is_analyzable_image_source(state.content):
            result, provider = await self.vision_analyzer.analyze(state.content)
        else:
            result, provider = await self.content_analyzer.analyze(state.content, state.content_type.value)
        update: dict[str, Any] = {"analysis_result": result, "ai_provider": provider}

        events.emit_event(
            events.ANALYSIS_COMPLETED,
            provider=update["ai_provider"],
            is_safe=update["analysis_result"].is_safe,
            severity=update["analysis_result"].severity,
        )
        return update

    def classify(self, state: ModerationState) -> dict[str, Any]:
        if state.analysis_result is None:
            raise PipelineStateError("Analysis result is required for classification")

        classification = self.decision_service.classify_content(state.analysis_result)
        logger.debug(f"Content classified as: {classification.value}")
        return {"classification": classification}

    async def decide(self, state: ModerationState) -> dict[str, Any]:
        if state.classification is None:
            raise PipelineStateError("Classification is required for decision")
        if state.analysis_result is None:
            raise PipelineStateError("Analysis result is required for decision")
        if state.ai_provider is None:
            raise PipelineStateError("AI provider is required for decision")

        decision, reasoning = self.decision_service.make_decision(
            state.classification, state.analysis_result, state.ai_provider
        )
        events.emit_event(events.DECISION_MADE, decision=decision, classification=state.classification)

        needs_visualization = False
        if state.classification is ContentClassification.FLAGGED:
            needs_visualization = await self.visualization_service.should_generate_visualization(state)
            events.emit_event(events.VISUALIZATION_DECIDED, should_generate=needs_visualization)

        return {
            "decision": decision,
            "reasoning": reasoning,
            "needs_visualization": needs_visualization,
        }

    async def generate_visualization(self, state: ModerationState) -> dict[str, Any]:
        if not state.reasoning:
            raise PipelineStateError("Reasoning is required for visualization generation")

        visualization_url = await self.visualization_service.generate_visualization(state.reasoning)
        return {"visualization_url": visualization_url}
