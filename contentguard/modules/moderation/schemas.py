from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from contentguard.core.enums import (
    AIProvider,
    ContentClassification,
    ContentType,
    ModerationDecision,
    Severity,
)

_SEVERITY_VALUES = frozenset(severity.value for severity in Severity)


class AnalysisResult(BaseModel):
    """Output of a single AI analysis call.

    Accepts the camelCase keys providers are prompted to return (``isSafe``,
    ``detailedReason``) as well as the snake_case field names.
    """

    model_config = ConfigDict(populate_by_name=True)

    is_safe: bool = Field(alias="isSafe")
    concerns: list[str] = Field(default_factory=list)
    severity: Severity = Severity.LOW
    detailed_reason: str | None = Field(default=None, alias="detailedReason")

    @field_validator("concerns", mode="before")
    @classmethod
    def _coerce_concerns(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, value: Any) -> Any:
        # Unrecognized labels ("critical", "severe") count as medium
        if isinstance(value, str):
            value = value.strip().lower()
            return value if value in _SEVERITY_VALUES else Severity.MEDIUM
        return value

    @model_validator(mode="after")
    def _safe_has_no_concerns(self) -> "AnalysisResult":
        if self.is_safe and self.concerns:
            self.concerns = []
        return self


class VisualizationDecision(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    should_generate: bool = Field(alias="shouldGenerate")
    reasoning: str = ""


class ModerationState(BaseModel):
    """Working record of one pipeline run.

    Stages never mutate a state; ``merge`` returns a new state with the stage's
    partial update applied.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    content_type: ContentType
    analysis_result: AnalysisResult | None = None
    classification: ContentClassification | None = None
    decision: ModerationDecision | None = None
    reasoning: str | None = None
    needs_visualization: bool | None = None
    visualization_url: str | None = None
    ai_provider: AIProvider | None = None

    def merge(self, update: dict[str, Any]) -> "ModerationState":
        return self.model_copy(update=update)


class ModerationResult(BaseModel):
    """What the service returns, caches and persists for a moderated submission."""

    decision: ModerationDecision
    reasoning: str
    classification: list[ContentClassification] = Field(default_factory=list)
    analysis_result: AnalysisResult | None = None
    visualization_url: str | None = None
    ai_provider: AIProvider | None = None

    @classmethod
    def from_state(cls, state: ModerationState) -> "ModerationResult":
        return cls(
            decision=state.decision,
            reasoning=state.reasoning,
            classification=[state.classification] if state.classification else [],
            analysis_result=state.analysis_result,
            visualization_url=state.visualization_url,
            ai_provider=state.ai_provider,
        )


class CacheStats(BaseModel):
    hits: int = 0
    misses: int = 0
    saves: int = 0
    total: int = 0
    hit_rate: float = Field(0.0, description="Cache hit rate in percent")


class ModerationStats(BaseModel):
    total_requests: int = 0
    cached_requests: int = 0
    ai_requests: int = 0
    cache_hit_rate: float = Field(0.0, description="Share of requests served from cache, in percent")
    estimated_cost_savings: float = Field(0.0, description="Estimated USD saved by cache hits")
    cache_stats: CacheStats
