"""Application configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "Polideportivo"
    debug: bool = True
    secret_key: str = "dev-secret-change-in-production"
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Database
    database_url: str = "postgresql+asyncpg://polideportivo:polideportivo@db:5432/polideportivo"
    database_echo: bool = False

    # Auth
    access_token_expire_minutes: int = 60
    jwt_algorithm: str = "HS256"

    # Availability
    default_timezone: str = "Europe/Madrid"
    default_maintenance_minutes: int = 120
    maintenance_lookback_days: int = 7  # open maintenance older than this is not read
    max_duration_minutes: int = 480
    min_check_duration_minutes: int = 30

    model_config = {"env_prefix": "PD_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
