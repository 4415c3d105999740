# File: app/core/config.py

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator  # BaseSettings not needed


def _optional_env(name: str, default: Optional[str]) -> Optional[str]:
    # An explicitly empty variable disables the value
    value = os.getenv(name, default)
    return value or None


class Settings(BaseModel):
    # Defaults are read from the environment, so validate them too
    model_config = ConfigDict(validate_default=True)

    # Basic app info
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Mini Tasks API")
    VERSION: str = os.getenv("VERSION", "0.1.0")

    # Prefix for the auth / tasks routers. Empty means they live at the root,
    # which is where the web client expects them.
    api_prefix: str = os.getenv("API_PREFIX", "")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    backend_cors_origins: List[str] = os.getenv(
        "BACKEND_CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    )

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./mini_tasks.db")

    # Security / auth
    secret_key: str = os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))  # 24h
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", 12))

    # Issuer / audience are embedded at issuance AND enforced at verification.
    # Set the env var to an empty string to turn either one off on both sides.
    jwt_issuer: Optional[str] = _optional_env("JWT_ISSUER", "mini-tasks-app")
    jwt_audience: Optional[str] = _optional_env("JWT_AUDIENCE", "mini-tasks-users")

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, list):
            return v
        return []


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
