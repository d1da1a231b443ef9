"""
Centralised application settings loaded from environment / .env file.
"""
from __future__ import annotations

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env from project root (two levels up from this file)
_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseSettings):
    # ── Backend ──────────────────────────────────────────
    backend: str = "postgres"  # postgres | supabase | pocketbase

    # ── Postgres (direct / Supabase database) ────────────
    postgres_user: str = "ccr"
    postgres_password: str = "ccr_pw"
    postgres_db: str = "plant_ops"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    # ── Supabase ─────────────────────────────────────────
    supabase_url: str = ""
    supabase_key: str = ""

    # ── PocketBase ───────────────────────────────────────
    pocketbase_url: str = "http://127.0.0.1:8090"
    pocketbase_token: str = ""
    http_timeout_seconds: float = 10.0

    # ── Query layer ──────────────────────────────────────
    query_cache_ttl_seconds: float = 300.0
    query_cache_max_size: int = 256
    query_range_window: int = 1000

    # ── App ──────────────────────────────────────────────
    api_port: int = 8000
    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
