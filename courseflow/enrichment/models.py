from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SummaryResult:
    summary: str
    key_points: list[str] = field(default_factory=list)
    language: str = "en"

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "key_points": list(self.key_points),
            "language": self.language,
        }


@dataclass(frozen=True)
class TranslationResult:
    translated_summary: str
    target_language: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "translated_summary": self.translated_summary,
            "target_language": self.target_language,
        }
