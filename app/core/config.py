# app/core/config.py
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.upload_utils import UploadConfig


class Settings(BaseSettings):
    """Settings that come from environment variables (or a local .env)."""

    # MongoDB
    MONGO_URL: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "users_api"
    MONGO_TLS: bool = False

    # Token verification (issuing happens elsewhere). Required, no default.
    JWT_SECRET_KEY: str = Field(min_length=32)
    ALGORITHM: str = "HS256"

    # bcrypt cost factor
    SALT_ROUNDS: int = Field(default=10, ge=4, le=31)

    # Avatar uploads
    SERVER_URL: str = "http://localhost:8000"
    PUBLIC_DIR: str = "public"
    PROFILES_SUBDIR: str = "img/profiles"
    MAX_AVATAR_SIZE: int = 1024 * 1024 * 5

    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def upload_config(self) -> UploadConfig:
        return UploadConfig(
            server_url=self.SERVER_URL,
            public_dir=self.PUBLIC_DIR,
            profiles_subdir=self.PROFILES_SUBDIR,
            max_file_size=self.MAX_AVATAR_SIZE,
        )


settings = Settings()
