from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database - defaults to SQLite for easy local development
    database_url: str = "sqlite:///./volleyball.db"

    # Connection pool (ignored for SQLite)
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: float = 30.0

    # Reported by /api/health
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"
    shutdown_timeout: int = 10
    cors_origins: list[str] = ["*"]

    # Static pages; defaults to the package's public/ directory
    public_dir: str = ""

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
