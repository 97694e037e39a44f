from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "courseflow"
    db_username: str = "courseflow"
    db_password: str = "secret"

    max_file_size_bytes: int = 50 * 1024 * 1024
    max_batch_files: int = 10
    max_batch_total_bytes: int = 100 * 1024 * 1024

    course_match_threshold: float = 30.0
    content_match_threshold: float = 60.0

    check_duplicates: bool = True
    upload_grace_seconds: float = 1.5
    upload_base_url: str = "http://localhost:3000"
    upload_timeout_seconds: int = 60

    queue_store: str = "file"
    queue_store_path: str = ".courseflow"
    queue_storage_key: str = "courseflow_ai_processing_queue"
    max_task_attempts: int = 3
    max_concurrent_tasks: int = 3
    queue_tick_interval_seconds: float = 5.0
    task_retention_hours: int = 24
    task_timeout_seconds: float = 120.0

    files_root: str = "/app/files"
    pdf_engine: str = "pdfplumber"

    summary_provider: str = "example"
    summary_target_language: str = "es"
    summary_max_output_tokens: int = 800

    summary_openai_api_key: str = ""
    summary_openai_model_name: str = "gpt-4o-mini"
    summary_openai_timeout_seconds: int = 30
    summary_openai_temperature: float = 0.2

    summary_openai_compatible_base_url: str = ""
    summary_openai_compatible_api_key: str = ""
    summary_openai_compatible_model_name: str = ""
    summary_openai_compatible_timeout_seconds: int = 30

    summary_openrouter_api_key: str = ""
    summary_openrouter_model_name: str = ""
    summary_groq_api_key: str = ""
    summary_groq_model_name: str = ""
    summary_together_api_key: str = ""
    summary_together_model_name: str = ""
    summary_deepseek_api_key: str = ""
    summary_deepseek_model_name: str = ""
    summary_ollama_api_key: str = "ollama"
    summary_ollama_model_name: str = "llama3.1"
