from pathlib import Path
from typing import Annotated, List

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"

DEFAULT_PORT = 4242
DEFAULT_LEDGER_FILE = "pedidos.json"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(RuntimeError):
    pass


class Settings(BaseSettings):
    """Gateway configuration from environment variables and .env.

    Field names map to upper-case variables: STRIPE_SECRET_KEY, PORT,
    LEDGER_FILE, CORS_ORIGINS (comma-separated), LEDGER_LOCK, LOG_LEVEL...
    """
    stripe_secret_key: str = Field(min_length=1)
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    ledger_file: Path = Path(DEFAULT_LEDGER_FILE)
    currency: str = "clp"
    cors_origins: Annotated[List[str], NoDecode] = ["*"]
    ledger_lock: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file_encoding="utf-8", extra="ignore")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            value = [origin.strip() for origin in value.split(",") if origin.strip()]
        return value or ["*"]

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level


def load_settings() -> Settings:
    """Read Settings from the environment, falling back to .env at the project root."""
    try:
        return Settings(_env_file=ENV_PATH)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration. Check your .env file.\n{e}") from e
