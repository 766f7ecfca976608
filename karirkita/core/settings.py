"""Configuration and environment settings for the KarirKita marketplace."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for the KarirKita marketplace."""

    groq_api_key: str = ""
    groq_model: str = "llama-3.3-70b-versatile"
    groq_temperature: float = 0.6
    groq_max_completion_tokens: int = 4096
    groq_top_p: float = 0.95
    groq_stream: bool = True
    groq_stop: list[str] | None = None
    agent_name: str = "groq"
    jobs_per_batch: int = 5
    min_apply_balance: int = 50_000
    min_deposit: int = 100_000
    experience_per_job: int = 25
    rating_step: float = 0.05
    max_rating: float = 5.0
    log_file: str = "logs/karirkita.log"
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> "Settings":
    """Return an instance of the application settings."""
    return Settings()
