"""Application configuration from environment."""
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Decision Journal"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./decision_journal.db"

    # Auth
    secret_key: str = "change-me-in-production-use-env"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days
    auth_cookie_name: str = "dj_auth"
    auth_cookie_max_age: int = 60 * 60 * 24 * 14  # 14 days

    # CORS (the web client lives on another origin)
    cors_origins: list[str] = ["*"]

    # AI gateway (OpenAI-compatible chat completions)
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    ai_gateway_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ai_gateway_api_key", "lovable_api_key"),
    )
    ai_model: str = "google/gemini-3-flash-preview"
    ai_request_timeout: float = 60.0

    # Alternative generation: auto | simulated | gateway | proxy
    generator_backend: Literal["auto", "simulated", "gateway", "proxy"] = "auto"
    generation_proxy_url: str = "http://localhost:8000/generate-alternatives"
    simulated_latency_seconds: float = 0.0
    default_alternative_count: int = 3

    # Scenario storage: database | local
    storage_backend: Literal["database", "local"] = "database"
    local_store_path: Path = Path("./decision_journal_scenarios.json")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
