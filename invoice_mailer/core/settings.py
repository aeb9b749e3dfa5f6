from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Invoice Mailer", alias="APP_NAME")
    app_env: str = Field(default="local", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    smtp_host: str = Field(default="localhost", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_username: str | None = Field(default=None, alias="SMTP_USERNAME")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    smtp_use_ssl: bool = Field(default=False, alias="SMTP_USE_SSL")
    smtp_timeout: float = Field(default=30.0, alias="SMTP_TIMEOUT")

    mail_from: str = Field(default="noreply@invoices.local", alias="MAIL_FROM")
    mail_from_name: str = Field(default="Invoice Team", alias="MAIL_FROM_NAME")
    currency_symbol: str = Field(default="₹", alias="CURRENCY_SYMBOL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
