from typing import List, Optional, Tuple
import sys

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./wordquiz.db"
    ENVIRONMENT: str = "development"
    SECRET_KEY: str = "change-me"

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:8000",
        "http://127.0.0.1:5173",
    ]

    # Performance instrumentation
    SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS: int = 300
    DATABASE_CONNECTION_MAX_RETRIES: int = 3
    DATABASE_CONNECTION_RETRY_BACKOFF_SECONDS: float = 1.0

    # Quiz configuration
    QUIZ_VARIANT_COUNT: int = 4
    QUIZ_SELECTION_STRATEGY: str = "weighted"  # "weighted" | "priority"
    QUIZ_TIER_WEIGHTS: Tuple[float, float, float] = (0.6, 0.3, 0.1)

    SEED_ON_STARTUP: bool = True
    SEED_WORDS_FILE: Optional[str] = None  # JSON list of {original, translation, category}
    ADMIN_ENABLED: bool = True
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: Optional[str] = None  # back office login is refused while unset

    class Config:
        env_file = ".env"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def _normalize_database_url(cls, value: str) -> str:
        """Map async driver URLs onto their synchronous counterparts.

        The service talks to the database through a synchronous engine only.
        Deployments that still export ``sqlite+aiosqlite://`` or
        ``postgresql+asyncpg://`` URLs keep working: the driver suffix is
        swapped for the default synchronous driver and everything else in the
        URL is left untouched.
        """

        if not isinstance(value, str):
            return value

        replacements = {
            "sqlite+aiosqlite://": "sqlite://",
            "postgres://": "postgresql://",
            "postgresql+asyncpg://": "postgresql://",
        }

        for prefix, target in replacements.items():
            if value.startswith(prefix):
                return target + value[len(prefix) :]

        return value

    @field_validator("QUIZ_SELECTION_STRATEGY", mode="before")
    @classmethod
    def _normalize_strategy(cls, value: str) -> str:
        strategy = (value or "").strip().lower()
        if strategy not in {"weighted", "priority"}:
            raise ValueError("QUIZ_SELECTION_STRATEGY must be 'weighted' or 'priority'")
        return strategy

    @field_validator("QUIZ_TIER_WEIGHTS")
    @classmethod
    def _check_weights(cls, value: Tuple[float, float, float]) -> Tuple[float, float, float]:
        if any(weight < 0 for weight in value) or sum(value) <= 0:
            raise ValueError("QUIZ_TIER_WEIGHTS must be non-negative with a positive sum")
        return value

    @field_validator("QUIZ_VARIANT_COUNT")
    @classmethod
    def _check_variant_count(cls, value: int) -> int:
        if value < 2:
            raise ValueError("QUIZ_VARIANT_COUNT must allow at least one distractor")
        return value


def _log_settings_validation_error(exc: ValidationError) -> None:
    """Pretty-print missing or invalid environment variables.

    Pydantic raises the ValidationError during module import, which makes it
    hard to spot the offending variable in server logs. The structured error
    payload is printed to stderr before the exception is re-raised.
    """

    print("Configuration error while loading environment variables:", file=sys.stderr)

    details = exc.errors()
    if details:
        for error in details:
            location = ".".join(str(part) for part in error.get("loc", ()))
            message = error.get("msg", "Unknown validation error")
            type_name = error.get("type")
            hint_parts = [message]
            if type_name:
                hint_parts.append(f"(type={type_name})")
            print(f"  - {location}: {' '.join(hint_parts)}", file=sys.stderr)
    else:
        print(exc, file=sys.stderr)


try:
    settings = Settings()
except ValidationError as exc:  # pragma: no cover - exercised at runtime
    _log_settings_validation_error(exc)
    raise
