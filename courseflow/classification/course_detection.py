"""Filename-based course detection.

Scoring is additive and deterministic:

- course code in the filename (separator variants allowed): +40
- share of course-name words (longer than 3 chars) in the filename: x 30
- a professor name token: +20
- subject keywords: +5 each, at most +20
- the term string verbatim: +10
"""

import re
from collections.abc import Iterable

from courseflow.classification.models import ClassificationMatch, Course
from courseflow.classification.subjects import FILENAME_SUBJECT_KEYWORDS, keywords_for

DEFAULT_THRESHOLD = 30.0

CODE_SCORE = 40.0
NAME_SCORE = 30.0
PROFESSOR_SCORE = 20.0
KEYWORD_SCORE = 5.0
KEYWORD_CAP = 20.0
TERM_SCORE = 10.0

_WHITESPACE = re.compile(r"\s+")
_DIGIT_RUN = re.compile(r"(\d+)")


def detect_course_from_file(
    file_name: str,
    courses: list[Course],
    threshold: float = DEFAULT_THRESHOLD,
) -> ClassificationMatch | None:
    """Return the best-scoring course for *file_name*, or None below *threshold*."""
    if not courses:
        return None

    matches = [m for m in (score_course(file_name, c) for c in courses) if m.confidence > 0]
    if not matches:
        return None
    best = sorted(matches, key=lambda m: m.confidence, reverse=True)[0]
    return best if best.confidence >= threshold else None


def score_course(file_name: str, course: Course) -> ClassificationMatch:
    lower_name = file_name.lower()
    confidence = 0.0
    reasons: list[str] = []

    if course.code and _contains_code(lower_name, course.code):
        confidence += CODE_SCORE
        reasons.append(f'Course code "{course.code}" found in filename')

    name_words = _significant_words(course.name)
    matched_words = sum(1 for word in name_words if word in lower_name)
    if matched_words:
        confidence += (matched_words / len(name_words)) * NAME_SCORE
        reasons.append(f"Course name words matched: {matched_words}/{len(name_words)}")

    if course.professor:
        tokens = [t for t in _WHITESPACE.split(course.professor.lower()) if len(t) > 2]
        if any(token in lower_name for token in tokens):
            confidence += PROFESSOR_SCORE
            reasons.append(f'Professor name "{course.professor}" found')

    keyword_hits = sum(
        1 for keyword in keywords_for(course.name, FILENAME_SUBJECT_KEYWORDS) if keyword in lower_name
    )
    if keyword_hits:
        confidence += min(keyword_hits * KEYWORD_SCORE, KEYWORD_CAP)
        reasons.append(f"Subject keywords matched: {keyword_hits}")

    if course.term and course.term.lower() in lower_name:
        confidence += TERM_SCORE
        reasons.append(f'Term "{course.term}" found')

    return ClassificationMatch(target_id=course.id, confidence=confidence, reasons=reasons)


def detect_courses_for_files(
    file_names: Iterable[str],
    courses: list[Course],
    threshold: float = DEFAULT_THRESHOLD,
) -> dict[str, ClassificationMatch | None]:
    return {name: detect_course_from_file(name, courses, threshold) for name in file_names}


def get_course_suggestions(
    file_name: str,
    courses: list[Course],
    limit: int = 3,
) -> list[ClassificationMatch]:
    """Top matches by code and name similarity, regardless of threshold."""
    lower_name = file_name.lower()
    suggestions: list[ClassificationMatch] = []
    for course in courses:
        confidence = 0.0
        reasons: list[str] = []
        if course.code and _normalize_code(course.code) in lower_name:
            confidence += CODE_SCORE
            reasons.append("Course code match")
        name_words = _significant_words(course.name)
        matched_words = sum(1 for word in name_words if word in lower_name)
        if matched_words:
            confidence += (matched_words / len(name_words)) * NAME_SCORE
            reasons.append("Name similarity")
        if confidence > 0:
            suggestions.append(
                ClassificationMatch(target_id=course.id, confidence=confidence, reasons=reasons)
            )
    suggestions.sort(key=lambda m: m.confidence, reverse=True)
    return suggestions[:limit]


def code_variations(code: str) -> list[str]:
    """Spellings of a course code as it tends to appear in filenames."""
    normalized = _normalize_code(code)
    return [
        normalized,
        normalized.replace("-", "", 1),
        normalized.replace("_", "", 1),
        _DIGIT_RUN.sub(r"-\1", normalized),
        _DIGIT_RUN.sub(r"_\1", normalized),
    ]


def _contains_code(lower_name: str, code: str) -> bool:
    return any(variation and variation in lower_name for variation in code_variations(code))


def _normalize_code(code: str) -> str:
    return _WHITESPACE.sub("", code.lower())


def _significant_words(name: str) -> list[str]:
    return [word for word in _WHITESPACE.split(name.lower()) if len(word) > 3]
