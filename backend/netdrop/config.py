"""Application configuration from environment variables."""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All config comes from env vars or a .env file. Built once at import."""

    DATA_DIR: str = "data"
    DATABASE_URL: str = ""  # empty -> sqlite file under DATA_DIR
    MAX_UPLOAD_BYTES: int = 1000 * 1024 * 1024
    HASH_SALT_TIMESTAMP: bool = True
    RECONCILE_ON_STARTUP: bool = True
    RECONCILE_MIN_AGE_SECONDS: float = 300.0
    API_PORT: int = 8000
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:8000"
    STATIC_DIR: str = ""
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def upload_dir(self) -> Path:
        return Path(self.DATA_DIR) / "uploads"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite+aiosqlite:///{Path(self.DATA_DIR) / 'netdrop.db'}"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
