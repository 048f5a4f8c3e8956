import pytest

from contentguard.core.enums import AIProvider, ContentClassification, ModerationDecision, Severity
from contentguard.modules.moderation import prompts
from contentguard.modules.moderation.schemas import AnalysisResult
from contentguard.modules.moderation.services import DecisionService


@pytest.fixture
def service() -> DecisionService:
    return DecisionService()


def analysis(is_safe=False, concerns=None, severity=Severity.MEDIUM, reason=None) -> AnalysisResult:
    return AnalysisResult(is_safe=is_safe, concerns=concerns or [], severity=severity, detailed_reason=reason)


@pytest.mark.parametrize(
    ("result", "expected"),
    [
        (analysis(is_safe=True, severity=Severity.HIGH), ContentClassification.SAFE),
        (analysis(severity=Severity.HIGH), ContentClassification.HARMFUL),
        (analysis(severity=Severity.MEDIUM), ContentClassification.FLAGGED),
        (analysis(severity=Severity.LOW), ContentClassification.FLAGGED),
    ],
)
def test_classify_content(service, result, expected):
    assert service.classify_content(result) is expected


def test_safe_content_is_approved(service):
    decision, reasoning = service.make_decision(
        ContentClassification.SAFE, analysis(is_safe=True, reason="fine"), AIProvider.OPENAI
    )

    assert decision is ModerationDecision.APPROVED
    assert reasoning == prompts.APPROVED_MESSAGE


def test_flagged_reason_is_returned_unchanged(service):
    decision, reasoning = service.make_decision(
        ContentClassification.FLAGGED, analysis(reason="Contains profanity."), AIProvider.OPENAI
    )

    assert decision is ModerationDecision.FLAGGED
    assert reasoning == "Contains profanity."


def test_flagged_without_reason_lists_concerns(service):
    _, reasoning = service.make_decision(
        ContentClassification.FLAGGED, analysis(concerns=["spam", "scam"]), AIProvider.OPENAI
    )

    assert reasoning == prompts.FLAGGED_MESSAGE.format(concerns="spam, scam")


def test_rejected_uses_detailed_reason(service):
    decision, reasoning = service.make_decision(
        ContentClassification.HARMFUL, analysis(severity=Severity.HIGH, reason="Graphic gore"), AIProvider.OPENAI
    )

    assert decision is ModerationDecision.REJECTED
    assert reasoning == "Graphic gore"


@pytest.mark.parametrize(
    ("concerns", "template"),
    [
        (["Explicit nudity"], prompts.REJECTED_ADULT_MESSAGE),
        (["graphic violence"], prompts.REJECTED_VIOLENCE_MESSAGE),
        (["involves a minor"], prompts.REJECTED_MINORS_MESSAGE),
        (["hate speech"], prompts.REJECTED_GENERIC_MESSAGE),
    ],
)
def test_rejected_template_by_concern(service, concerns, template):
    _, reasoning = service.make_decision(
        ContentClassification.HARMFUL, analysis(concerns=concerns, severity=Severity.HIGH), AIProvider.OPENAI
    )

    assert reasoning == template.format(concerns=", ".join(concerns))


def test_adult_template_wins_over_violence(service):
    concerns = ["sexual violence"]
    _, reasoning = service.make_decision(
        ContentClassification.HARMFUL, analysis(concerns=concerns, severity=Severity.HIGH), AIProvider.OPENAI
    )

    assert reasoning == prompts.REJECTED_ADULT_MESSAGE.format(concerns="sexual violence")


def test_rejected_without_concerns_says_unknown(service):
    _, reasoning = service.make_decision(
        ContentClassification.HARMFUL, analysis(severity=Severity.HIGH), AIProvider.OPENAI
    )

    assert reasoning == prompts.REJECTED_GENERIC_MESSAGE.format(concerns="Unknown")
