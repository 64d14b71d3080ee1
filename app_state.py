"""Core module - estado compartilhado da aplicacao."""

from __future__ import annotations

from typing import Optional

from qcm.config import get_settings
from qcm.logger import get_logger
from qcm.storage.database import Database

logger = get_logger("app_state")

# =============================================================================
# GLOBAL INSTANCES
# =============================================================================

database: Optional[Database] = None


async def get_database() -> Database:
    """Retorna Database (cria engine e tabelas na primeira chamada)."""
    global database
    if database is None:
        settings = get_settings()
        database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        await database.create_all()
        logger.info("Banco inicializado", url=settings.DATABASE_URL)
    return database


def set_database(db: Optional[Database]) -> None:
    """Substitui a instancia global (testes / setup externo)."""
    global database
    database = db


async def cleanup() -> None:
    """Libera conexoes no shutdown."""
    global database
    if database is not None:
        await database.dispose()
        database = None
        logger.info("Banco fechado")
