"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Relational store (SQLite locally, PostgreSQL in deployment)
    database_url: str = "sqlite:///./smarthire.db"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "smarthire_docs"

    # Generative AI (OpenAI-compatible endpoint, Gemini by default)
    ai_api_key: str = ""
    ai_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    ai_model: str = "gemini-2.5-flash"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Uploads
    upload_dir: str = "./uploads"
    max_upload_mb: int = 5
    max_video_mb: int = 100

    # Agents
    master_agent_interval_seconds: int = 30
    master_agent_enabled: bool = True

    # App
    seed_demo_data: bool = True
    api_base: str = "/api"
    log_level: str = "INFO"
    debug: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
