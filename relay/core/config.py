"""Application configuration via pydantic-settings.

Outside production, values are loaded from the .env file at the project root
and the .env file takes precedence over OS-level environment variables.
With APP_ENV=production the .env file is ignored and only the process
environment is read.
"""

import os
from pathlib import Path
from typing import Tuple, Type

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# Resolve .env from project root (two levels up from this file: relay/core/config.py → project root)
_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Central application settings. .env file wins over OS env vars."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Override source priority: .env file > OS env vars > defaults."""
        return (init_settings, dotenv_settings, env_settings, file_secret_settings)

    # --- Translation provider (IBM Watson Language Translator) ---
    translator_api_key: str = ""
    translator_url: str = "https://api.us-south.language-translator.watson.cloud.ibm.com"
    translator_api_version: str = "2018-05-01"

    # --- Delivery provider (Vonage SMS) ---
    vonage_api_key: str = ""
    vonage_api_secret: str = ""
    vonage_base_url: str = "https://rest.nexmo.com"
    sender: str = ""

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = 8000

    # --- App ---
    app_env: str = "development"
    log_level: str = "INFO"
    operator_language: str = "en"
    provider_timeout_seconds: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"


def load_settings() -> Settings:
    """Build settings, skipping the local .env file in production."""
    if os.getenv("APP_ENV", "").strip().lower() == "production":
        return Settings(_env_file=None)
    return Settings()


settings = load_settings()
