import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Carga el .env automáticamente
load_dotenv()


def _env(name: str, default: str) -> str:
    return os.getenv(name) or default


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    environment: str = Field(default_factory=lambda: _env("ENVIRONMENT", "development"))
    database_url: str = Field(default_factory=lambda: _env("DATABASE_URL", "sqlite:///./budgetpay.db"))
    database_echo: bool = Field(default_factory=lambda: _env_bool("DATABASE_ECHO"))
    jwt_secret: str = Field(default_factory=lambda: _env("JWT_SECRET", "dev-secret-change-me"))
    jwt_algorithm: str = Field(default_factory=lambda: _env("JWT_ALGORITHM", "HS256"))
    access_token_expire_minutes: int = Field(
        default_factory=lambda: int(_env("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
    )
    upload_dir: str = Field(default_factory=lambda: _env("UPLOAD_DIR", "uploads"))
    # Single display currency; amounts are never converted.
    currency: str = Field(default_factory=lambda: _env("CURRENCY", "INR"))
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in _env(
                "CORS_ORIGINS",
                "http://localhost:5173,http://127.0.0.1:5173,http://localhost:8080",
            ).split(",")
            if o.strip()
        ]
    )
    log_level: str = Field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
