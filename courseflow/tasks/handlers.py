from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, assert_never

from courseflow.tasks.models import AIProcessingTask, TaskType

TaskHandler = Callable[[AIProcessingTask], dict[str, Any]]


@dataclass(frozen=True)
class EnrichmentHandlers:
    """One handler per task type.

    Adding a TaskType member requires a field here and a branch in resolve().
    """

    categorization: TaskHandler
    text_extraction: TaskHandler
    summary: TaskHandler
    translation: TaskHandler

    def resolve(self, task_type: TaskType) -> TaskHandler:
        match task_type:
            case TaskType.CATEGORIZATION:
                return self.categorization
            case TaskType.TEXT_EXTRACTION:
                return self.text_extraction
            case TaskType.SUMMARY:
                return self.summary
            case TaskType.TRANSLATION:
                return self.translation
            case _:
                assert_never(task_type)
