from abc import ABC, abstractmethod


class BaseQueueStore(ABC):
    """Durable key-value medium for the serialized queue snapshot."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value for *key*, or None when nothing was saved."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Persist *value* under *key*, replacing any previous value.

        Raises:
            QueueStoreError: if the value cannot be written.
        """
