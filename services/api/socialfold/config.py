"""
Configuration management using Pydantic BaseSettings.
All values can be overridden via environment variables or a .env file.
"""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database (MySQL-protocol compatible) ───────────────────────────────
    db_host: str = "mysql"
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = ""
    db_database: str = "socialfold"
    # Full SQLAlchemy URL; takes precedence over the db_* fields when set
    database_url: Optional[str] = None

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"mysql+aiomysql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_database}"
        )

    # ── Ranking Service ────────────────────────────────────────────────────
    ranking_service_url: str = "http://ranking-service:8001"
    ranking_use_remote: bool = True      # False → always rank in-process
    ranking_timeout_seconds: float = 2.0
    ranking_candidate_limit: int = 500   # most recent posts considered
    feed_page_size: int = 20             # default posts returned

    # ── Validation limits ──────────────────────────────────────────────────
    min_username_length: int = 3
    max_username_length: int = 30
    max_title_length: int = 200
    max_post_length: int = 1000
    max_comment_length: int = 500
    notifications_page_size: int = 20

    # ── Observability ──────────────────────────────────────────────────────
    otel_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://jaeger:4317"
    service_name: str = "api-service"
    environment: str = "development"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
