from courseflow.classification.categorization import categorize_file, suggest_category
from courseflow.classification.content_analysis import analyze_content, extract_keywords
from courseflow.classification.course_detection import (
    detect_course_from_file,
    detect_courses_for_files,
    get_course_suggestions,
)
from courseflow.classification.models import (
    ClassificationMatch,
    ContentAnalysisMatch,
    Course,
    FileCategory,
)

__all__ = [
    "ClassificationMatch",
    "ContentAnalysisMatch",
    "Course",
    "FileCategory",
    "analyze_content",
    "categorize_file",
    "detect_course_from_file",
    "detect_courses_for_files",
    "extract_keywords",
    "get_course_suggestions",
    "suggest_category",
]
