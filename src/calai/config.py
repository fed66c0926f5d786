"""Application configuration."""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    use_remote_plan: bool = True
    storage_backend: str = "file"
    state_path: str = "calai_state.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    timezone: str = "UTC"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str) -> str:
    """Normalize the storage backend name."""
    cleaned = raw.strip().lower()
    if cleaned not in {"file", "supabase"}:
        raise ValueError(f"Unsupported storage backend: {raw}")
    return cleaned


def parse_timezone(raw: str) -> str:
    """Validate an IANA timezone name."""
    cleaned = raw.strip()
    try:
        ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {raw}") from exc
    return cleaned
