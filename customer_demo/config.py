from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None
    SQL_ECHO: bool = False
    DB_CONNECT_RETRIES: int = 5
    DB_CONNECT_DELAY: int = 3  # seconds, multiplied by attempt number

    # Console -> Data Service
    API_BASE_URL: str = "http://127.0.0.1:8080"
    API_TIMEOUT_SECONDS: float = 10.0

    # CORS
    CORS_ORIGINS: list = ["*"]

    # App
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
