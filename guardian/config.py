from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite+aiosqlite:///./guardian.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 5370

    # Environment
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "structured"
    log_file: Optional[str] = None

    # CORS
    backend_cors_origins: List[str] = ["*"]

    # Queries
    history_limit: int = 200

    # SOS notifications
    sos_webhook_url: Optional[str] = None
    sos_webhook_timeout: float = 10.0

    # App Info
    app_name: str = "Guardian Location API"
    app_version: str = "1.0.0"

    class Config:
        env_file = ".env"


settings = Settings()
