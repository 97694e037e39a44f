from datetime import timedelta

from courseflow.config.settings import Settings
from courseflow.database.connection import close_pool, ensure_schema, init_pool
from courseflow.enrichment.handlers import build_handlers
from courseflow.logging.logger import Log
from courseflow.tasks.queue import TaskQueue
from courseflow.tasks.runner import TaskRunner
from courseflow.tasks.store.factory import QueueStoreFactory
from courseflow.tasks.worker import Worker


def build_queue(settings: Settings) -> TaskQueue:
    """Create the task queue on the configured store and recover interrupted tasks."""
    queue = TaskQueue(
        QueueStoreFactory.create(settings),
        storage_key=settings.queue_storage_key,
        max_attempts=settings.max_task_attempts,
        retention=timedelta(hours=settings.task_retention_hours),
    )
    queue.recover_interrupted()
    return queue


def main() -> None:
    """Entry point: configure -> open the queue -> start the worker pool."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(f"Starting CourseFlow worker (env={settings.app_env}, store={settings.queue_store})")
    uses_database = QueueStoreFactory.requires_database(settings)
    if uses_database:
        init_pool(settings)
        ensure_schema()

    try:
        queue = build_queue(settings)
        runner = TaskRunner(queue, build_handlers(settings), settings)
        worker = Worker(queue, runner, settings)
        worker.run()
    finally:
        if uses_database:
            close_pool()


if __name__ == "__main__":
    main()
