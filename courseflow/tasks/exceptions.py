class TaskQueueError(Exception):
    """Base exception for all task queue errors."""


class TaskNotFoundError(TaskQueueError):
    """Raised when a task id is not present in the queue."""


class TaskTimeoutError(TaskQueueError):
    """Raised when an enrichment handler does not finish within its timeout."""


class QueueStoreError(TaskQueueError):
    """Raised when the queue snapshot cannot be read from or written to its store."""


class TaskResultError(TaskQueueError):
    """Raised when a handler result cannot be stored in the queue snapshot."""
