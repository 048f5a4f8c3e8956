"""Structured moderation events.

Every decision point of the moderation pipeline is reported as a named event on the
``contentguard.events`` logger. The event name and its fields travel as ``extra`` on the
log record, so the JSON formatter used in production emits them as top-level keys.

Events:
    analysis_completed     provider, is_safe, severity
    decision_made          decision, classification
    visualization_decided  should_generate
    moderation_completed   decision, provider, cached
"""

from typing import Any

from contentguard.core.logging import get_logger

logger = get_logger("contentguard.events")

ANALYSIS_COMPLETED = "analysis_completed"
DECISION_MADE = "decision_made"
VISUALIZATION_DECIDED = "visualization_decided"
MODERATION_COMPLETED = "moderation_completed"


def _plain(value: Any) -> Any:
    return getattr(value, "value", value)


def emit_event(name: str, **fields: Any) -> None:
    """Emit a structured event with the given fields."""
    payload = {key: _plain(value) for key, value in fields.items()}
    summary = " ".join(f"{key}={value}" for key, value in payload.items())
    logger.info(f"{name} {summary}".strip(), extra={"event": name, **payload})
