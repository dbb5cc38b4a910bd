"""Application configuration loaded from environment variables and .env file."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGED_DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DATABASE_URL: str = "sqlite:///./loot.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 정의 데이터 (affix.json, affix_pool.json, item.json, loot_pool.json)
    DATA_DIR: Path = PACKAGED_DATA_DIR

    # None이면 OS 엔트로피 사용
    RNG_SEED: Optional[int] = None


settings = Settings()
