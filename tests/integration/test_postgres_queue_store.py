import pytest

from courseflow.tasks.models import FileRef, TaskStatus
from courseflow.tasks.queue import TaskQueue
from courseflow.tasks.store.postgres_store import PostgresQueueStore


@pytest.mark.integration
class TestPostgresQueueStore:
    def test_missing_key_returns_none(self, snapshot_key: str) -> None:
        assert PostgresQueueStore().get(snapshot_key) is None

    def test_set_overwrites_value(self, snapshot_key: str) -> None:
        store = PostgresQueueStore()
        store.set(snapshot_key, "[]")
        store.set(snapshot_key, '[{"id": "x"}]')
        assert store.get(snapshot_key) == '[{"id": "x"}]'

    def test_queue_survives_restart(self, snapshot_key: str) -> None:
        queue = TaskQueue(PostgresQueueStore(), storage_key=snapshot_key)
        task_ids = queue.queue_file_processing(
            FileRef(id="f1", name="notes.pdf", type="application/pdf")
        )
        claimed = queue.claim_next(timeout=0)
        assert claimed is not None

        reloaded = TaskQueue(PostgresQueueStore(), storage_key=snapshot_key)
        assert reloaded.recover_interrupted() == 1
        assert [t.id for t in reloaded.get_file_tasks("f1")] == task_ids
        assert all(t.status is TaskStatus.PENDING for t in reloaded.get_file_tasks("f1"))
