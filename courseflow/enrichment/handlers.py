"""Enrichment handlers run by the task worker, one per task type."""

import threading
from collections import OrderedDict
from pathlib import Path
from typing import Any

from courseflow.classification.categorization import (
    category_folder,
    category_label,
    suggest_category,
)
from courseflow.classification.content_analysis import extract_keywords
from courseflow.config.settings import Settings
from courseflow.enrichment.factory import SummarizerFactory
from courseflow.enrichment.models import SummaryResult
from courseflow.enrichment.summarizer import Summarizer
from courseflow.extraction.factory import TextExtractorFactory
from courseflow.extraction.file_loader import FileLoader
from courseflow.extraction.models import ExtractedText
from courseflow.logging.logger import Log
from courseflow.tasks.handlers import EnrichmentHandlers
from courseflow.tasks.models import AIProcessingTask

CACHE_SIZE = 32
MAX_RESULT_TEXT_CHARS = 100_000


class _LruCache:
    """Small thread-safe LRU map keyed by file id."""

    def __init__(self, size: int) -> None:
        self._size = size
        self._values: OrderedDict[str, Any] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            value = self._values.get(key)
            if value is not None:
                self._values.move_to_end(key)
            return value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
            self._values.move_to_end(key)
            while len(self._values) > self._size:
                self._values.popitem(last=False)


class FileEnricher:
    """Implements the four enrichment steps on top of shared collaborators.

    Extracted text and summaries are cached per file id so the later tasks
    of a file do not re-read, re-parse or re-summarize it.
    """

    def __init__(
        self,
        *,
        file_loader: FileLoader,
        extractors: TextExtractorFactory,
        summarizer: Summarizer,
        target_language: str,
        cache_size: int = CACHE_SIZE,
    ) -> None:
        self._file_loader = file_loader
        self._extractors = extractors
        self._summarizer = summarizer
        self._target_language = target_language
        self._texts = _LruCache(cache_size)
        self._summaries = _LruCache(cache_size)

    def categorize(self, task: AIProcessingTask) -> dict[str, Any]:
        category, confidence = suggest_category(task.file_name)
        return {
            "category": category.value,
            "confidence": confidence,
            "label": category_label(category),
            "folder": category_folder(category),
        }

    def extract_text(self, task: AIProcessingTask) -> dict[str, Any]:
        extracted = self._extracted(task)
        return {
            "text": extracted.text[:MAX_RESULT_TEXT_CHARS],
            "page_count": extracted.page_count,
            "word_count": extracted.word_count,
            "keywords": extract_keywords(extracted.text),
        }

    def summarize(self, task: AIProcessingTask) -> dict[str, Any]:
        return self._summary(task).to_dict()

    def translate(self, task: AIProcessingTask) -> dict[str, Any]:
        summary = self._summary(task)
        if summary.language == self._target_language:
            Log.info(
                f"{task.file_name} is already in '{self._target_language}', "
                "skipping translation"
            )
            return {
                "translated_summary": summary.summary,
                "target_language": self._target_language,
            }
        return self._summarizer.translate(summary.summary, self._target_language).to_dict()

    def handlers(self) -> EnrichmentHandlers:
        return EnrichmentHandlers(
            categorization=self.categorize,
            text_extraction=self.extract_text,
            summary=self.summarize,
            translation=self.translate,
        )

    def _summary(self, task: AIProcessingTask) -> SummaryResult:
        cached: SummaryResult | None = self._summaries.get(task.file_id)
        if cached is not None:
            return cached
        summary = self._summarizer.summarize(self._extracted(task).text, task.file_name)
        self._summaries.put(task.file_id, summary)
        return summary

    def _extracted(self, task: AIProcessingTask) -> ExtractedText:
        cached: ExtractedText | None = self._texts.get(task.file_id)
        if cached is not None:
            return cached

        extractor = self._extractors.for_content_type(task.file_type)
        extracted = extractor.extract(self._file_loader.load(task.file_id))
        Log.debug(
            f"Extracted {extracted.word_count} words from {task.file_name} "
            f"({extracted.page_count} page(s))"
        )
        self._texts.put(task.file_id, extracted)
        return extracted


def build_handlers(
    settings: Settings,
    file_loader: FileLoader | None = None,
    summarizer: Summarizer | None = None,
) -> EnrichmentHandlers:
    """Wire the enrichment handlers from application settings."""
    enricher = FileEnricher(
        file_loader=file_loader or FileLoader(Path(settings.files_root)),
        extractors=TextExtractorFactory.create(settings),
        summarizer=summarizer or SummarizerFactory.create(settings),
        target_language=settings.summary_target_language.lower(),
    )
    return enricher.handlers()
