"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "Ancure"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Supabase ---
    # Direct postgres connection string for asyncpg.  Empty disables cloud storage.
    supabase_db_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    # --- Clerk ---
    clerk_jwks_url: str = "https://api.clerk.com/v1/jwks"

    # --- Device storage ---
    device_store_dir: Path = Path(".ancure/devices")

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "ANCURE_"}

    @property
    def cloud_storage_enabled(self) -> bool:
        return bool(self.supabase_db_url)


@lru_cache
def get_settings() -> Settings:
    return Settings()
