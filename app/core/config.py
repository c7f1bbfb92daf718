from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    env: str = Field("development", alias="ENV")
    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60 * 24 * 7, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    admin_email: Optional[str] = Field(None, alias="ADMIN_EMAIL")
    admin_password: Optional[str] = Field(None, alias="ADMIN_PASSWORD")

    # Takes precedence over the webhook_secret row in the settings table
    webhook_secret: Optional[str] = Field(None, alias="WEBHOOK_SECRET")
    webhook_rate_limit: str = Field("10/minute", alias="WEBHOOK_RATE_LIMIT")
    rate_limit_enabled: bool = Field(True, alias="RATE_LIMIT_ENABLED")

    allowed_origins: str = Field("http://localhost:3000", alias="ALLOWED_ORIGINS")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("json", alias="LOG_FORMAT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
