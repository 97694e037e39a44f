from dataclasses import dataclass, field
from enum import Enum

MIN_CONFIDENCE = 0.0
MAX_CONFIDENCE = 100.0


def clamp_confidence(value: float) -> float:
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, float(value)))


class FileCategory(str, Enum):
    LECTURE = "lecture"
    ASSIGNMENT = "assignment"
    EXAM = "exam"
    NOTES = "notes"
    OTHER = "other"


@dataclass(frozen=True)
class Course:
    """The subset of a course record the classifiers read."""

    id: str
    name: str
    code: str | None = None
    professor: str | None = None
    term: str = ""


@dataclass(frozen=True)
class ClassificationMatch:
    """A scored guess that a file belongs to ``target_id``.

    Confidence is clamped to [0, 100] on construction.
    """

    target_id: str
    confidence: float
    reasons: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))


@dataclass(frozen=True)
class ContentAnalysisMatch(ClassificationMatch):
    """Course match derived from extracted text rather than the filename."""

    extracted_keywords: list[str] = field(default_factory=list)
