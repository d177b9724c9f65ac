"""Application configuration."""
from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")
    app_env: str = "development"
    debug: bool = True
    public_base_url: str | None = None

    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "suitec"
    postgres_user: str = "suitec"
    postgres_password: str = "changeme"

    redis_host: str = "localhost"
    redis_port: int = 6379

    jwt_secret: str = "your-jwt-secret-min-32-chars"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60

    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_secure: str = "tls"  # tls | ssl | none
    email_from: str = ""
    email_from_name: str = "SuiteC"

    # Digest windows are cut at a fixed hour in this timezone.
    timezone: str = "America/Los_Angeles"
    email_daily_hour: int = 8
    email_weekly_hour: int = 8
    email_weekly_weekday: int = 0  # Monday
    digest_scheduler_enabled: bool = True
    digest_scheduler_poll_seconds: int = 60
    digest_lock_ttl_seconds: int = 3600
    rq_digest_queue_name: str = "digests"
    digest_random_seed: int | None = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
