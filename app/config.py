from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_title: str = Field(default="API Server", alias="APP_TITLE")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    enable_docs: bool = Field(default=True, alias="ENABLE_DOCS")

    sentry_dsn: str = Field(default="", alias="SENTRY_DSN")

    basic_auth_username: str = Field(default="", alias="BASIC_AUTH_USERNAME")
    basic_auth_password: str = Field(default="", alias="BASIC_AUTH_PASSWORD")

    @property
    def basic_auth_configured(self) -> bool:
        return bool(self.basic_auth_username and self.basic_auth_password)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
