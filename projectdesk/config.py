from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Backend API consumed by the workspace
    api_base_url: str = "http://127.0.0.1:8080/api"
    api_token: str = ""
    api_timeout: float = 30.0

    # Autosave & local drafts
    autosave_quiet_period_ms: int = 2000
    draft_store_url: str = "sqlite:///data/drafts.sqlite3"

    # File listing tag marking an output artifact
    output_file_source: str = "output"

    # Sandbox API (local stand-in for the backend)
    app_title: str = "ProjectDesk Sandbox API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore, outbound HTTP
    log_level_sql: str = "WARNING"           # sqlalchemy.engine, draft store
    log_level_autosave: str = "INFO"         # autosave scheduler & draft overlay
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def autosave_quiet_period(self) -> float:
        """Quiet period in seconds."""
        return self.autosave_quiet_period_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
