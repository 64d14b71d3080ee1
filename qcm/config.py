"""Configuracao do QCM - Settings via variaveis de ambiente / .env."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QcmSettings(BaseSettings):
    """Configuracao centralizada do motor de quiz."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Geral
    APP_NAME: str = "QCM Quiz Engine"
    ENVIRONMENT: str = Field("development", description="development|test|production")
    LOG_LEVEL: str = "INFO"

    # Banco de dados (URL async do SQLAlchemy)
    DATABASE_URL: str = "sqlite+aiosqlite:///./qcm.db"
    DATABASE_ECHO: bool = False

    # Quiz
    QUIZ_DEFAULT_QUESTIONS: int = Field(20, ge=1)
    QUIZ_MIN_QUESTIONS: int = Field(1, ge=1)
    QUIZ_MAX_QUESTIONS: int = Field(50, ge=1)
    QUIZ_PASS_PERCENTAGE: int = Field(50, ge=0, le=100)
    HISTORY_MAX_LIMIT: int = Field(50, ge=1)

    # CORS
    FRONTEND_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator("FRONTEND_ORIGINS", mode="before")
    @classmethod
    def _parse_origins(cls, v: Any) -> Any:
        """Aceita lista JSON ou string separada por virgula/ponto-e-virgula."""
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                try:
                    return json.loads(s)
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in s.replace(";", ",").split(",") if item.strip()]
        return v

    def resolve_question_count(self, count: int | None) -> int:
        """Retorna o count pedido ou o default configurado."""
        return self.QUIZ_DEFAULT_QUESTIONS if count is None else count


@lru_cache
def get_settings() -> QcmSettings:
    """Retorna settings (cacheado)."""
    return QcmSettings()


def reload_settings() -> QcmSettings:
    """Limpa o cache e recarrega settings do ambiente."""
    get_settings.cache_clear()
    return get_settings()
