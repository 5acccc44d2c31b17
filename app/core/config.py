# Fichier: app/core/config.py
from pydantic_settings import BaseSettings
from typing import List
from pydantic import ValidationError, field_validator
import sys

class Settings(BaseSettings):
    DATABASE_URL: str
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    ENVIRONMENT: str = "development"

    # La clé secrète pour signer les JWTs.
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60

    # Performance instrumentation
    SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS: int = 300

    # Compte administrateur créé au démarrage s'il n'existe pas
    DEFAULT_ADMIN_EMAIL: str = "admin@lms.local"
    DEFAULT_ADMIN_PASSWORD: str = "password"

    class Config:
        env_file = ".env"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def _normalize_database_url(cls, value: str) -> str:
        """Map legacy Postgres schemes onto the psycopg2 driver.

        Managed Postgres providers (Supabase, Vercel, Heroku) still hand out
        ``postgres://`` URLs, an alias SQLAlchemy dropped. Plain
        ``postgresql://`` and the async driver variants are rewritten too so the
        synchronous engine always boots. SQLite and explicit driver URLs are
        left untouched.
        """

        if not isinstance(value, str):
            return value

        if "+psycopg2" in value:
            return value

        replacements = {
            "postgres://": "postgresql+psycopg2://",
            "postgresql://": "postgresql+psycopg2://",
            "postgresql+asyncpg://": "postgresql+psycopg2://",
        }

        for prefix, target in replacements.items():
            if value.startswith(prefix):
                return target + value[len(prefix) :]

        return value

def _log_settings_validation_error(exc: ValidationError) -> None:
    """Pretty-print missing or invalid environment variables.

    The Settings model is instantiated at import time, so a missing variable
    surfaces as a ValidationError deep in an import chain. We print the
    structured payload to stderr before re-raising so the culprit shows up in
    the server logs.
    """

    header = "Configuration error while loading environment variables:"
    print(header, file=sys.stderr)

    details = exc.errors()
    if details:
        for error in details:
            location = ".".join(str(part) for part in error.get("loc", ()))
            message = error.get("msg", "Unknown validation error")
            type_name = error.get("type")
            hint_parts = [message]
            if type_name:
                hint_parts.append(f"(type={type_name})")
            hint = " ".join(hint_parts)
            print(f"  - {location}: {hint}", file=sys.stderr)
    else:
        print(exc, file=sys.stderr)


try:
    settings = Settings()
except ValidationError as exc:  # pragma: no cover - exercised at runtime
    _log_settings_validation_error(exc)
    raise
