# feria/core/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:// for local runs)
      - JWT_SECRET_KEY (HS256 signing secret for session tokens)

    Optional:
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (only needed by the
        storage-backed upload endpoints)

    Settings are frozen: they are read once at startup and handed to the
    token service / storage client as explicit dependencies.
    """

    PROJECT_NAME: str = "Feria Backend"
    API_PREFIX: str = ""

    DATABASE_URL: str

    # Session tokens
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    SESSION_TTL_SECONDS: int = 7 * 24 * 60 * 60

    # bcrypt work factor
    PASSWORD_HASH_ROUNDS: int = 10

    # Session cookie
    AUTH_COOKIE_NAME: str = "authToken"
    COOKIE_SECURE: bool = True
    COOKIE_SAMESITE: str = "none"

    # Supabase Storage (service role key bypasses RLS, backend only)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "assets"

    CORS_ORIGINS: list[str] = [
        "http://localhost:4200",
        "http://localhost:3000",
        "https://salon-feria-frontend.vercel.app",
    ]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
