"""Application configuration and LLM client initialization.

Defines `Settings` with environment variables and creates an `OPENAI_CLIENT`
used by the form-candidate extractor.
"""
# app/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from openai import AsyncOpenAI

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    OPENAI_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENAI_API_KEY: str = ""
    OCR_MODEL_NAME: str = "openai/gpt-4o-mini"
    OCR_MAX_IMAGE_BYTES: int = 4 * 1024 * 1024

    APP_NAME: str = "Mentorship Feedback"
    APP_URL: str = "http://127.0.0.1:8000"
    DEBUG: bool = True
    LOG_PATH: str = "logging"
    SECRET_KEY: str = "change-me-in-env"
    DATABASE_URL: str = "sqlite:///./app.db"

    SESSION_TTL: int = 60 * 60 * 24 * 7  # 7 days
    DEV_SIGN_IN_ENABLED: bool = False
    PAGE_SIZE_DEFAULT: int = 50

    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = ""
    SMTP_TIMEOUT: int = 10


settings = Settings()
OPENAI_CLIENT = AsyncOpenAI(
    base_url=settings.OPENAI_BASE_URL,
    api_key=settings.OPENAI_API_KEY or "not-configured",
    default_headers={"HTTP-Referer": settings.APP_URL, "X-Title": settings.APP_NAME},
)
