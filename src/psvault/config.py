"""
psvault/config.py — Configurações centralizadas via .env
"""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "psvault"
    APP_ENV: str = "development"
    APP_PORT: int = 8003

    # Banco — em produção use postgresql+asyncpg://...
    DATABASE_URL: str = "sqlite+aiosqlite:///./psvault.db"
    DATABASE_ECHO: bool = False

    # JWT emitido pelo provedor de sessão externo; aqui só validamos.
    # Gere com: openssl rand -hex 32
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 15

    # Auditoria
    AUDIT_LIST_LIMIT: int = 50
    AUDIT_LIST_MAX: int = 500

    LOG_LEVEL: str = "INFO"

    @field_validator("JWT_SECRET")
    @classmethod
    def jwt_secret_must_be_strong(cls, v: str) -> str:
        if not v or v in ("troque-em-producao", "changeme", "secret"):
            raise ValueError("JWT_SECRET inválido. Gere um com: openssl rand -hex 32")
        if len(v) < 32:
            raise ValueError(
                "JWT_SECRET muito curto (mínimo 32 caracteres). "
                "Gere um com: openssl rand -hex 32"
            )
        return v

    @field_validator("AUDIT_LIST_LIMIT", "AUDIT_LIST_MAX")
    @classmethod
    def limit_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Limites de auditoria devem ser >= 1.")
        return v

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
