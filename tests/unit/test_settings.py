import pytest
from pydantic import ValidationError

from courseflow.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_upload_limits(self) -> None:
        s = Settings()
        assert s.max_batch_files == 10
        assert s.max_file_size_bytes == 50 * 1024 * 1024
        assert s.max_batch_total_bytes == 100 * 1024 * 1024

    def test_default_match_thresholds(self) -> None:
        s = Settings()
        assert s.course_match_threshold == 30
        assert s.content_match_threshold == 60

    def test_default_queue_settings(self) -> None:
        s = Settings()
        assert s.max_task_attempts == 3
        assert s.max_concurrent_tasks == 3
        assert s.task_retention_hours == 24
        assert s.queue_storage_key == "courseflow_ai_processing_queue"

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_summary_provider(self) -> None:
        s = Settings()
        assert s.summary_provider == "example"

    def test_default_summary_openai_timeout(self) -> None:
        s = Settings()
        assert s.summary_openai_timeout_seconds == 30


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        s = Settings()
        assert s.app_env == "production"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_max_task_attempts(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_TASK_ATTEMPTS", "5")
        s = Settings()
        assert s.max_task_attempts == 5

    def test_loads_queue_store(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUEUE_STORE", "postgres")
        s = Settings()
        assert s.queue_store == "postgres"

    def test_loads_check_duplicates_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHECK_DUPLICATES", "false")
        s = Settings()
        assert s.check_duplicates is False


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_max_attempts_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_TASK_ATTEMPTS", "abc")
        with pytest.raises(ValidationError):
            Settings()
