"""Course detection from extracted text content.

Stricter than the filename scorer: the default threshold is 60.
"""

import re
from collections import Counter

from courseflow.classification.models import ContentAnalysisMatch, Course
from courseflow.classification.subjects import CONTENT_SUBJECT_KEYWORDS, keywords_for

DEFAULT_CONTENT_THRESHOLD = 60.0

_STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
    "be", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "must", "can", "this", "that",
    "these", "those", "i", "you", "he", "she", "it", "we", "they",
})
_NON_WORD = re.compile(r"\W+")
_WHITESPACE = re.compile(r"\s+")


def analyze_content(
    text: str,
    file_name: str,
    courses: list[Course],
    threshold: float = DEFAULT_CONTENT_THRESHOLD,
) -> ContentAnalysisMatch | None:
    """Return the best course for the text, or None below *threshold*."""
    if not courses:
        return None

    lower_text = text.lower()
    lower_file = file_name.lower()
    matches: list[ContentAnalysisMatch] = []

    for course in courses:
        confidence = 0.0
        reasons: list[str] = []

        if course.code:
            code_hits = _count_word(course.code, text)
            if code_hits:
                confidence += min(50 + code_hits * 5, 70)
                reasons.append(f'Course code "{course.code}" found {code_hits} times in content')

        name_words = [w for w in _WHITESPACE.split(course.name.lower()) if len(w) > 3]
        matched_words = sum(1 for word in name_words if _count_word(word, lower_text))
        if matched_words:
            full_hits = len(re.findall(re.escape(course.name), text, flags=re.IGNORECASE))
            if full_hits:
                confidence += min(40 + full_hits * 10, 60)
                reasons.append(f'Exact course name "{course.name}" found {full_hits} times')
            else:
                confidence += (matched_words / len(name_words)) * 25
                reasons.append(f"Course name keywords found: {matched_words}/{len(name_words)}")

        if course.professor and _count_word(course.professor, text):
            confidence += 15
            reasons.append(f'Professor "{course.professor}" mentioned in content')

        keyword_score = 0.0
        found_keywords: list[str] = []
        for keyword in keywords_for(course.name, CONTENT_SUBJECT_KEYWORDS):
            hits = _count_word(keyword, lower_text)
            if hits:
                keyword_score += min(hits * 0.5, 3)
                found_keywords.append(keyword)
        if keyword_score:
            confidence += min(keyword_score, 20)
            reasons.append(f"Subject keywords found: {', '.join(found_keywords)}")

        first_name_word = course.name.lower().split(" ")[0]
        code_in_file = bool(course.code) and course.code.lower() in lower_file
        if code_in_file or (first_name_word and first_name_word in lower_file):
            confidence += 10
            reasons.append("Filename also matches course")

        if confidence > 0:
            matches.append(
                ContentAnalysisMatch(
                    target_id=course.id,
                    confidence=confidence,
                    reasons=reasons,
                    extracted_keywords=found_keywords,
                )
            )

    if not matches:
        return None
    best = sorted(matches, key=lambda m: m.confidence, reverse=True)[0]
    return best if best.confidence >= threshold else None


def analyze_by_filename(file_name: str, courses: list[Course]) -> ContentAnalysisMatch | None:
    """First course whose code (40) or leading name word (30) is in the filename."""
    lower_file = file_name.lower()
    for course in courses:
        if course.code and _WHITESPACE.sub("", course.code.lower()) in lower_file:
            return ContentAnalysisMatch(
                target_id=course.id, confidence=40, reasons=["Course code in filename"]
            )
        first_word = course.name.lower().split(" ")[0]
        if first_word and first_word in lower_file:
            return ContentAnalysisMatch(
                target_id=course.id, confidence=30, reasons=["Course name in filename"]
            )
    return None


def extract_keywords(text: str, limit: int = 20) -> list[str]:
    """Most frequent non-stop-words longer than three characters."""
    words = [
        word
        for word in _NON_WORD.split(text.lower())
        if len(word) > 3 and word not in _STOP_WORDS
    ]
    return [word for word, _ in Counter(words).most_common(limit)]


def _count_word(needle: str, haystack: str) -> int:
    pattern = rf"\b{re.escape(needle)}\b"
    return len(re.findall(pattern, haystack, flags=re.IGNORECASE))
