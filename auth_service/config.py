"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'auth_service.db'}"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    # Session credentials (shared by every service instance)
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 10080  # 7 days

    # Second factor
    totp_issuer: str = "Pong"
    totp_valid_window: int = 1  # accepted time steps on each side of now

    model_config = {"env_prefix": "AUTH_", "env_file": ".env"}


settings = Settings()
