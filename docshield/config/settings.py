from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "docshield"
    db_username: str = "docshield"
    db_password: str = "secret"

    record_store: str = "postgres"
    storage_root: Path = Path("./var/uploads")
    export_root: Path = Path("./var/exports")
    pdf_engine: str = "pdfplumber"

    current_user_email: str = ""

    ai_provider: str = "openai"
    ai_temperature: float = 0.0

    ai_openai_api_key: str = ""
    ai_openai_model_name: str = "gpt-4o-mini"
    ai_openai_timeout_seconds: int = 60

    ai_openai_compatible_base_url: str = ""
    ai_openai_compatible_api_key: str = ""
    ai_openai_compatible_model_name: str = ""
    ai_openai_compatible_timeout_seconds: int = 60

    ai_openrouter_api_key: str = ""
    ai_openrouter_model_name: str = ""
    ai_groq_api_key: str = ""
    ai_groq_model_name: str = ""
    ai_together_api_key: str = ""
    ai_together_model_name: str = ""
    ai_deepseek_api_key: str = ""
    ai_deepseek_model_name: str = ""
    ai_ollama_api_key: str = "ollama"
    ai_ollama_model_name: str = ""

    dashboard_recent_limit: int = 20
