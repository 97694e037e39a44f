from courseflow.config.settings import Settings
from courseflow.tasks.store.base import BaseQueueStore
from courseflow.tasks.store.file_store import FileQueueStore
from courseflow.tasks.store.memory_store import InMemoryQueueStore
from courseflow.tasks.store.postgres_store import PostgresQueueStore


class QueueStoreFactory:
    """Create the queue snapshot store selected by settings.queue_store."""

    STORES = ("memory", "file", "postgres")

    @classmethod
    def create(cls, settings: Settings) -> BaseQueueStore:
        name = settings.queue_store.lower()
        if name == "memory":
            return InMemoryQueueStore()
        if name == "file":
            return FileQueueStore(settings.queue_store_path)
        if name == "postgres":
            return PostgresQueueStore()
        raise ValueError(
            f"Unknown queue store: {settings.queue_store}. "
            f"Available: {', '.join(cls.STORES)}"
        )

    @classmethod
    def requires_database(cls, settings: Settings) -> bool:
        return settings.queue_store.lower() == "postgres"
