# studyaid/core/config.py
import os
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict
from typing import Optional, List
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application Settings
    APP_NAME: str = "Study Aid API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "127.0.0.1"
    PORT: int = int(os.environ.get("PORT", 8000))

    # History storage (memory | file | sql)
    STORAGE_BACKEND: str = "file"
    STORAGE_DIR: str = "data"
    DATABASE_URL: str = "sqlite:///./data/studyaid.db"
    HISTORY_STORAGE_KEY: str = "study-app-history"
    # Per-slot quota, mirrors the ~5MB browser local storage limit
    STORAGE_QUOTA_BYTES: Optional[int] = 5 * 1024 * 1024

    # Image / request limits
    MAX_IMAGE_SIZE: int = 10 * 1024 * 1024  # 10MB decoded
    MAX_REQUEST_SIZE: int = 15 * 1024 * 1024  # base64 inflates by ~4/3

    # CORS Settings
    ALLOWED_ORIGINS: str = "*"

    # AI Settings
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Helper methods for list envs
    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings: Settings = get_settings()
