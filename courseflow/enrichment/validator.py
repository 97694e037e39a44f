"""Checks the model's parsed JSON before it becomes a task result."""

from typing import Any

from courseflow.enrichment.exceptions import SummarizationValidationError
from courseflow.enrichment.models import SummaryResult, TranslationResult

_MAX_KEY_POINTS = 10


def build_summary(data: dict[str, Any]) -> SummaryResult:
    """Validate a summary answer and build a SummaryResult.

    Raises:
        SummarizationValidationError: on any validation failure.
    """
    summary = _require_string(data, "summary")
    language = _require_string(data, "language").lower()

    raw_points = data.get("key_points", [])
    if not isinstance(raw_points, list):
        raise SummarizationValidationError("'key_points' must be an array")
    key_points = []
    for index, point in enumerate(raw_points):
        if not isinstance(point, str):
            raise SummarizationValidationError(f"'key_points[{index}]' must be a string")
        if point.strip():
            key_points.append(point.strip())

    return SummaryResult(
        summary=summary,
        key_points=key_points[:_MAX_KEY_POINTS],
        language=language,
    )


def build_translation(data: dict[str, Any], target_language: str) -> TranslationResult:
    """Validate a translation answer.

    The requested language wins over whatever the model echoes back.
    """
    translated = data.get("translated_summary")
    if not isinstance(translated, str):
        raise SummarizationValidationError("'translated_summary' must be a string")
    return TranslationResult(translated_summary=translated.strip(), target_language=target_language)


def _require_string(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise SummarizationValidationError(f"'{key}' must be a non-empty string")
    return value.strip()
