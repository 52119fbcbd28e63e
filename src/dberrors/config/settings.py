from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import to_uppercase, to_lowercase, strip_or_none

class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Error classification
    DATABASE_PRODUCT: str = "H2"
    ERROR_CODES_FILE: Path | None = None
    REPORT_UNCLASSIFIED: bool = False
    PROPAGATE_UNEXTRACTED_ERRORS: bool = True

    # Database configuration
    DATABASE_URL: str = "sqlite://"

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "text"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("logs")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    # --- Validators ---
    @field_validator("DATABASE_PRODUCT", mode="before")
    def normalize_database_product(cls, v: str | None) -> str:
        """
        Strip the configured product name.

        Case is kept as written: product lookups are case-insensitive, and the
        original spelling reads better in logs. A blank value selects the
        `default` code set.
        """
        return strip_or_none(v) or "default"

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_LEVEL environment variable value to uppercase.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_FORMAT environment variable value to lowercase.
        """
        return to_lowercase(v)

    # --- SettingsConfigDict settings ---
    model_config = SettingsConfigDict(
        # Load environment variables from the .env file located next to the package.
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

# get_settings() takes no arguments and always returns the same settings from the environment,
# so caching it with @lru_cache() is good for performance.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
