# backend/assettag/core/config.py

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_env: str = "dev"
    app_name: str = "MB Asset Tagging API"

    database_url: str = Field(default="sqlite:///./assets.db", alias="DATABASE_URL")

    # JWT (24h tokens, same as the mobile client expects)
    jwt_secret: str = Field(default="dev-secret-change-me", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60 * 24, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Comma-separated allowlist, e.g. "https://tagging.example.com,http://localhost:3000"
    cors_origins: str = Field(default="", alias="CORS_ORIGINS")
    frontend_url: str = Field(default="http://localhost:3000", alias="FRONTEND_URL")

    # "mock" | "local"
    photo_storage: str = Field(default="mock", alias="PHOTO_STORAGE")
    photo_base_url: str = Field(default="https://drive.google.com/mock", alias="PHOTO_BASE_URL")
    photo_dir: str = Field(default="var/photos", alias="PHOTO_DIR")

    default_admin_password: str = Field(default="admin123", alias="DEFAULT_ADMIN_PASSWORD")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        populate_by_name = True
        extra = "ignore"

    def allow_origins(self) -> List[str]:
        cors_env = self.cors_origins.strip()
        if cors_env:
            return [o.strip() for o in cors_env.split(",") if o.strip()]
        return sorted({self.frontend_url.strip(), "http://localhost:3000"})


settings = Settings()
