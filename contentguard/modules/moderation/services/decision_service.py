from contentguard.core.enums import AIProvider, ContentClassification, ModerationDecision, Severity
from contentguard.core.logging import get_logger
from contentguard.modules.moderation import prompts
from contentguard.modules.moderation.schemas import AnalysisResult

logger = get_logger(__name__)

DECISION_BY_CLASSIFICATION: dict[ContentClassification, ModerationDecision] = {
    ContentClassification.SAFE: ModerationDecision.APPROVED,
    ContentClassification.FLAGGED: ModerationDecision.FLAGGED,
    ContentClassification.HARMFUL: ModerationDecision.REJECTED,
}

# Checked in order; the first category with a matching keyword picks the template
REJECTION_TEMPLATES: list[tuple[tuple[str, ...], str]] = [
    (("adult", "explicit", "sexual"), prompts.REJECTED_ADULT_MESSAGE),
    (("violence", "gore", "harm"), prompts.REJECTED_VIOLENCE_MESSAGE),
    (("child", "minor"), prompts.REJECTED_MINORS_MESSAGE),
]


def _join_concerns(concerns: list[str]) -> str:
    return ", ".join(concerns) or "Unknown"


class DecisionService:
    """Pure mapping from analysis results to classifications, decisions and user-facing reasoning."""

    def classify_content(self, analysis_result: AnalysisResult) -> ContentClassification:
        if analysis_result.is_safe:
            return ContentClassification.SAFE
        if analysis_result.severity is Severity.HIGH:
            return ContentClassification.HARMFUL
        return ContentClassification.FLAGGED

    def make_decision(
        self,
        classification: ContentClassification,
        analysis_result: AnalysisResult,
        ai_provider: AIProvider,
    ) -> tuple[ModerationDecision, str]:
        """
        Make the final moderation decision for a classification.

        Returns:
            tuple: (decision, reasoning shown to the user)
        """
        logger.debug(f"Making decision for classification: {classification.value} (provider: {ai_provider.value})")

        decision = DECISION_BY_CLASSIFICATION[classification]

        if classification is ContentClassification.SAFE:
            reasoning = prompts.APPROVED_MESSAGE
        elif classification is ContentClassification.FLAGGED:
            reasoning = self._flagged_message(analysis_result)
        else:
            reasoning = self._rejected_message(analysis_result)

        return decision, reasoning

    @staticmethod
    def _flagged_message(analysis_result: AnalysisResult) -> str:
        if analysis_result.detailed_reason:
            return analysis_result.detailed_reason
        return prompts.FLAGGED_MESSAGE.format(concerns=_join_concerns(analysis_result.concerns))

    @staticmethod
    def _rejected_message(analysis_result: AnalysisResult) -> str:
        if analysis_result.detailed_reason:
            return analysis_result.detailed_reason

        concerns_lower = [concern.lower() for concern in analysis_result.concerns]
        concerns_list = _join_concerns(analysis_result.concerns)

        for keywords, template in REJECTION_TEMPLATES:
            if any(keyword in concern for concern in concerns_lower for keyword in keywords):
                return template.format(concerns=concerns_list)

        return prompts.REJECTED_GENERIC_MESSAGE.format(concerns=concerns_list)
