from typing import Literal, Optional

from pydantic import Field, PostgresDsn, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: PostgresDsn = Field(..., alias="DATABASE_URL")
    DEBUG: bool = Field(default=False, alias="DEBUG")
    REDIS_URL: RedisDsn = Field(..., alias="REDIS_URL")  # celery broker for notifications

    # Token Configuration
    SECRET_KEY: str = Field(..., alias="SECRET_KEY")
    JWT_ALGORITHM: str = Field(default="HS256", alias="JWT_ALGORITHM")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # Mail Configuration
    SMTP_HOST: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    SMTP_PORT: int = Field(default=587, alias="SMTP_PORT")
    SMTP_USE_TLS: bool = Field(default=True, alias="SMTP_USE_TLS")
    EMAIL_USER: Optional[str] = Field(default=None, alias="EMAIL_USER")
    EMAIL_PASS: Optional[str] = Field(default=None, alias="EMAIL_PASS")

    # "strict" enforces open -> in_progress -> closed
    TICKET_STATUS_POLICY: Literal["permissive", "strict"] = Field(
        default="permissive", alias="TICKET_STATUS_POLICY"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
