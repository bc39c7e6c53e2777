import logging
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).resolve().parent.parent

# Status codes a post-action redirect may use
_REDIRECT_STATUSES = {301, 302, 303, 307, 308}


class Settings(BaseSettings):
    # API settings
    DEBUG: bool = False
    PROJECT_NAME: str = "Backoffice"
    ENVIRONMENT: str = "development"

    # CORS settings - accepts string or list, normalized to list[str] by validator
    CORS_ORIGINS: str | list[str] = "*"

    # Rendering
    TEMPLATE_DIR: str = ""  # Empty means the templates shipped with the package
    TRANSLATIONS_DIR: str = ""  # Empty means the catalogs shipped with the package
    LOCALE: str = "en"
    FALLBACK_LOCALE: str = "en"

    # Session settings
    SESSION_COOKIE_NAME: str = "backoffice_session"
    SESSION_MAX_AGE: int = 86400  # Idle lifetime in seconds (default: 24 hours)
    COOKIE_SECURE: bool = True  # Set to False for plain HTTP development environments

    # Authentication
    ADMIN_API_KEY: str = ""  # Empty disables API key login

    # HTTP request metrics via prometheus-fastapi-instrumentator
    ENABLE_HTTP_METRICS: bool = True

    # Post-action flow
    REDIRECT_STATUS_CODE: int = 301
    DEFAULT_BUNDLE: str = "core"
    INDEX_ROUTE_NAME: str = "backoffice_core_index"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @property
    def TEMPLATE_DIR_PATH(self) -> str:
        """Directory holding the Jinja2 templates"""
        return self.TEMPLATE_DIR or str(_PACKAGE_DIR / "templates")

    @property
    def TRANSLATIONS_DIR_PATH(self) -> str:
        """Directory holding the translation catalogs"""
        return self.TRANSLATIONS_DIR or str(_PACKAGE_DIR / "translations")

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Normalize CORS origins to a list.

        Accepts a comma-separated string or a list. Empty values fall back
        to the wildcard origin.
        """
        if isinstance(v, str):
            origins = [origin.strip() for origin in v.split(",") if origin.strip()]
        else:
            origins = [str(origin).strip() for origin in v if str(origin).strip()]
        return origins or ["*"]

    @field_validator("REDIRECT_STATUS_CODE")
    @classmethod
    def validate_redirect_status(cls, v: int) -> int:
        if v not in _REDIRECT_STATUSES:
            raise ValueError(
                f"REDIRECT_STATUS_CODE must be one of {sorted(_REDIRECT_STATUSES)}, got {v}"
            )
        return v

    @field_validator("SESSION_MAX_AGE")
    @classmethod
    def validate_session_max_age(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("SESSION_MAX_AGE must be a positive number of seconds")
        return v

    @field_validator("DEFAULT_BUNDLE", "LOCALE", "FALLBACK_LOCALE")
    @classmethod
    def normalize_identifier(cls, v: str) -> str:
        normalized = v.strip().lower()
        if not normalized:
            raise ValueError("value must not be empty")
        return normalized


# Thread-safe lazy initialization using lru_cache
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings instance with lazy initialization.

    Settings are only created once on first access, then cached for subsequent calls.

    Returns:
        Settings: Application settings object
    """
    return Settings()


def reset_settings() -> None:
    """Reset the cached settings instance.

    Useful for testing when you need to reload settings with different values.
    """
    get_settings.cache_clear()
