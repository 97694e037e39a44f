import psycopg

from courseflow.database.connection import get_connection
from courseflow.tasks.exceptions import QueueStoreError
from courseflow.tasks.store.base import BaseQueueStore


class PostgresQueueStore(BaseQueueStore):
    """Database operations for the queue_snapshots table."""

    def get(self, key: str) -> str | None:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "SELECT value FROM queue_snapshots WHERE key = %s",
                        (key,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise QueueStoreError(f"Cannot read queue snapshot '{key}': {exc}") from exc

        if row is None:
            return None
        return row[0]

    def set(self, key: str, value: str) -> None:
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO queue_snapshots (key, value, updated_at)
                    VALUES (%s, %s, NOW())
                    ON CONFLICT (key)
                    DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()
                    """,
                    (key, value),
                )
                conn.commit()
        except psycopg.Error as exc:
            raise QueueStoreError(f"Cannot write queue snapshot '{key}': {exc}") from exc
