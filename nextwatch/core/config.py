from functools import lru_cache
from typing import Literal
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "NextWatch"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: LogLevel = "INFO"  # ignored when DEBUG is set
    LOG_QUIET_LOGGERS: str = "pymongo,motor,openai,httpx"  # CSV, capped at LOG_QUIET_LEVEL
    LOG_QUIET_LEVEL: LogLevel = "WARNING"

    # HTTP
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    ALLOWED_ORIGINS: str = "*"  # CSV, "*" allows every origin

    # Mongo
    MONGO_URI: str = "mongodb://127.0.0.1:27017"
    MONGO_DB: str = "next-watch"
    MONGO_TLS: bool = False  # mongodb+srv:// URIs always use TLS

    # Redis (optional, empty disables the recommendation cache)
    REDIS_URL: str = ""
    recommendation_cache_ttl: int = 24 * 3600  # records never change
    recommendation_cache_prefix: str = "rec"

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.7
    openai_timeout_s: int = 30  # seconds

    # API
    api_prefix: str = "/api"

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

    @property
    def log_level(self) -> LogLevel:
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL

    @property
    def quiet_loggers(self) -> list[str]:
        return [n.strip() for n in self.LOG_QUIET_LOGGERS.split(",") if n.strip()]

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
