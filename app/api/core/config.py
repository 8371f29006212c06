import os
from pathlib import Path

from decouple import Config, RepositoryEnv
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = next(p for p in Path(__file__).resolve().parents if (p / "main.py").exists())
BASE_DIR = PROJECT_ROOT

# Determine which env file to load
env_file = os.getenv("ENV_FILE", ".env")
env_path = PROJECT_ROOT / env_file

# Only use RepositoryEnv if the env file exists
if env_path.exists():
    config = Config(RepositoryEnv(env_path))
else:
    # fallback: read directly from os.environ using decouple's AutoConfig
    from decouple import AutoConfig

    config = AutoConfig(search_path=None)


class Settings(BaseSettings):
    # App general
    DEBUG: bool = config("DEBUG", default=False, cast=bool)
    APP_NAME: str = config("APP_NAME", default="Misir")
    APP_VERSION: str = config("APP_VERSION", default="1.0.0")
    ENVIRONMENT: str = config("ENVIRONMENT", default="dev")
    APP_PORT: int = config("APP_PORT", default=8000, cast=int)
    APP_URL: str = config("APP_URL", default="https://misir.app")
    DEV_URL: str = config("DEV_URL", default="http://localhost:3000")

    # Datastore
    DATABASE_URL: str = config("DATABASE_URL", default="")
    DATABASE_KEY: str = config("DATABASE_KEY", default="")
    DB_ECHO: bool = config("DB_ECHO", default=False, cast=bool)
    DB_CREATE_TABLES: bool = config("DB_CREATE_TABLES", default=True, cast=bool)

    # Landing page
    SHARE_URL: str = config("SHARE_URL", default="https://misir.app")
    SHARE_TEXT: str = config(
        "SHARE_TEXT",
        default="I just joined the waitlist for Misir - The Anti-Noise Engine. "
        "Google Maps for your mind!",
    )

    model_config = SettingsConfigDict(extra="allow")

    @property
    def CORS_ORIGINS(self) -> list[str]:
        return [origin for origin in (self.APP_URL, self.DEV_URL) if origin]

    def missing_datastore_settings(self) -> list[str]:
        """Return the names of datastore settings that are not configured.

        Returns:
            list[str]: Empty when both the endpoint and the access key are set.
        """

        missing = []
        if not self.DATABASE_URL:
            missing.append("DATABASE_URL")
        if not self.DATABASE_KEY:
            missing.append("DATABASE_KEY")
        return missing


settings = Settings()
