import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from courseflow.config.settings import Settings
from courseflow.database.connection import close_pool, ensure_schema, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "courseflow_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        ensure_schema()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def snapshot_key(db_conn: psycopg.Connection[Any]) -> Generator[str, None, None]:
    key = f"test-{uuid.uuid4()}"
    yield key
    db_conn.execute("DELETE FROM queue_snapshots WHERE key = %s", (key,))
    db_conn.commit()
