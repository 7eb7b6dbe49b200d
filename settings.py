import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from expr_engine.expressions.types import ARRAY_INDEX_CAP, DEFAULT_LIMIT, POWER_LIMIT, ExpressionMode

BASE_DIR = Path(__file__).parent.resolve()


class BaseConfig(BaseSettings):
    # Autocomplete engine
    AUTOCOMPLETE_DEFAULT_LIMIT: int = DEFAULT_LIMIT
    AUTOCOMPLETE_POWER_LIMIT: int = POWER_LIMIT
    AUTOCOMPLETE_ARRAY_INDEX_CAP: int = ARRAY_INDEX_CAP
    # Second root alias accepted in bracket-key position (e.g. "env"). Disabled when unset.
    AUTOCOMPLETE_ENV_ALIAS: Optional[str] = None

    # Expression wrapping
    EXPRESSION_MODE: ExpressionMode = ExpressionMode.WRAPPED
    EXPRESSION_START_WORD: str = "{{"
    EXPRESSION_SUFFIX: str = "}}"

    # API
    CORS_ALLOW_ORIGINS: str = (
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173,*"
    )

    # Logging
    LOG_CONFIG_PATH: str = "logging-config.yaml"

    @model_validator(mode="after")
    def check_autocomplete_settings(self):
        if self.AUTOCOMPLETE_DEFAULT_LIMIT < 1:
            raise ValueError("AUTOCOMPLETE_DEFAULT_LIMIT must be at least 1")
        if self.AUTOCOMPLETE_POWER_LIMIT < self.AUTOCOMPLETE_DEFAULT_LIMIT:
            raise ValueError("AUTOCOMPLETE_POWER_LIMIT cannot be lower than AUTOCOMPLETE_DEFAULT_LIMIT")
        if not self.EXPRESSION_START_WORD or not self.EXPRESSION_SUFFIX:
            raise ValueError("EXPRESSION_START_WORD and EXPRESSION_SUFFIX cannot be empty")
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ALLOW_ORIGINS.split(",") if origin.strip()]


class DevSettings(BaseConfig):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / "credentials.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


class TestSettings(BaseConfig):
    model_config = SettingsConfigDict(extra="ignore")


def get_settings() -> BaseConfig:
    env = os.getenv("APP_ENV", "dev")
    match env:
        case "dev":
            settings = DevSettings()
        case "prod":
            raise NotImplementedError("Production settings not implemented")
        case "test":
            settings = TestSettings()
        case _:
            raise ValueError("Invalid environment name")

    env_file = settings.model_config.get("env_file")
    if env_file:
        load_dotenv(
            dotenv_path=env_file,
            encoding=settings.model_config.get("env_file_encoding"),
            override=True,
        )
    return settings


settings = get_settings()
