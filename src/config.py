from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"
DB_FILE = ARTIFACTS_DIR / "finance.db"


class AppSettings(BaseSettings):
    database_file: Path = DB_FILE
    finance_api_url: str = "http://localhost:5000/api/finance"
    finance_api_token: str | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
