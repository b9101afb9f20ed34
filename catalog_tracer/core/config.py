"""Application configuration."""

from os import getenv

from pydantic import BaseModel


def _optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "catalog-tracer API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./catalog_tracer.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    tracer_default_limit: int = int(getenv("TRACER_DEFAULT_LIMIT", "100"))
    tracer_max_limit: int = int(getenv("TRACER_MAX_LIMIT", "1000"))
    tracer_query_timeout_seconds: float | None = _optional_float(getenv("TRACER_QUERY_TIMEOUT_SECONDS"))
    use_ancestor_hints: bool = getenv("TRACER_USE_ANCESTOR_HINTS", "1") == "1"


settings: Settings = Settings()
