"""Configuration management for the URL shortener application.

This module provides centralized configuration management using Pydantic BaseSettings
with environment variable support and caching for performance.

Flow Diagram — get_settings()
=============================
::
    ┌─────────────┐
    │  Call get_  │
    │  settings() │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Check cache │
    │ (lru_cache) │
    └──────┬──────┘
    HIT?   │
    ┌──────┴────┐
    │ NO        │ YES
    ▼           ▼
┌─────────┐  ┌─────────┐
│ Create  │  │ Return  │
│ Settings│  │ cached  │
│ instance│  │ value   │
└─────────┘  └─────────┘

How to Use
===========
**Step 1 — Import**::
    from shortener.config import get_settings

**Step 2 — Get settings**::
    settings = get_settings()
    secret = settings.SECRET_KEY

Key Behaviours
===============
- Settings are cached after first access.
- Environment variables (or a ``.env`` file) override defaults.
- ``SECRET_KEY`` falls back to a public value when unset. The service keeps
  running in that case and logs a warning on startup, since every code it
  issues is then derived from a predictable alphabet permutation.

Classes:
    Settings:  Pydantic model for all configuration values.
"""

__all__ = ["DEFAULT_SECRET_KEY", "Settings", "get_settings"]

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "default_secret"


class Settings(BaseSettings):
    APP_NAME: str = "url-shortener"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Alphabet permutation seed; must never change once codes are issued.
    SECRET_KEY: str = DEFAULT_SECRET_KEY

    # Counter store
    REDIS_URL: str = "redis://redis:6379/0"
    ID_COUNTER_KEY: str = "url_id"
    ID_OFFSET: int = 14_000_000

    # Durable store
    DATABASE_URL: str = "postgresql+asyncpg://urlshortener:urlshortener@db:5432/urlshortener"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    @property
    def uses_default_secret(self) -> bool:
        return self.SECRET_KEY == DEFAULT_SECRET_KEY


@lru_cache()
def get_settings() -> Settings:
    return Settings()
