"""Filename-based category detection.

First match wins: rules are evaluated in table order (lecture, assignment,
exam, notes) and each rule tries its patterns, then its keywords. The order
of CATEGORY_RULES is significant.
"""

import re
from dataclasses import dataclass

from courseflow.classification.models import FileCategory


@dataclass(frozen=True)
class CategoryRule:
    category: FileCategory
    patterns: tuple[re.Pattern[str], ...]
    keywords: tuple[str, ...]

    def matches(self, lower_name: str) -> bool:
        if any(pattern.search(lower_name) for pattern in self.patterns):
            return True
        return any(keyword in lower_name for keyword in self.keywords)


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        FileCategory.LECTURE,
        _compile(
            r"lecture", r"lesson", r"chapter\s*\d+", r"week\s*\d+",
            r"slide", r"presentation", r"l\d{1,2}[\s\-_.]",
        ),
        ("lecture", "lesson", "chapter", "week", "slide", "presentation", "class"),
    ),
    CategoryRule(
        FileCategory.ASSIGNMENT,
        _compile(
            r"assignment", r"homework", r"hw\d+", r"problem\s*set", r"pset",
            r"exercise", r"task", r"project", r"lab", r"tutorial", r"worksheet",
            r"a\d{1,2}[\s\-_.]",
        ),
        (
            "assignment", "homework", "exercise", "task", "project",
            "lab", "tutorial", "worksheet", "problem",
        ),
    ),
    CategoryRule(
        FileCategory.EXAM,
        _compile(
            r"exam", r"test", r"quiz", r"midterm", r"final", r"assessment",
            r"evaluation", r"mock", r"past.*paper", r"sample.*paper",
        ),
        ("exam", "test", "quiz", "midterm", "final", "assessment", "evaluation"),
    ),
    CategoryRule(
        FileCategory.NOTES,
        _compile(
            r"notes?", r"summary", r"outline", r"review", r"study.*guide",
            r"cheat.*sheet", r"reference", r"n\d{1,2}[\s\-_.]",
        ),
        ("notes", "summary", "outline", "review", "study", "guide", "reference"),
    ),
)

_LABELS: dict[FileCategory, str] = {
    FileCategory.LECTURE: "Lectures",
    FileCategory.ASSIGNMENT: "Assignments",
    FileCategory.NOTES: "Notes",
    FileCategory.EXAM: "Exams",
    FileCategory.OTHER: "Other Files",
}


def categorize_file(file_name: str) -> FileCategory:
    lower_name = file_name.lower()
    for rule in CATEGORY_RULES:
        if rule.matches(lower_name):
            return rule.category
    return FileCategory.OTHER


def suggest_category(file_name: str) -> tuple[FileCategory, float]:
    """Category plus a coarse confidence: 0.8 for a rule hit, 0.3 for 'other'."""
    category = categorize_file(file_name)
    return category, (0.8 if category is not FileCategory.OTHER else 0.3)


def category_label(category: FileCategory) -> str:
    return _LABELS.get(category, "Other Files")


def category_folder(category: FileCategory) -> str:
    """Storage folder name, e.g. ``lecture -> 'Lectures'``."""
    return category.value.capitalize() + "s"
