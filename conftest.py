# =============================================================================
# CONFTEST - Pytest Fixtures Globais
# =============================================================================
# Ambiente de teste: banco SQLite em memoria, logs reduzidos
# =============================================================================

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Adicionar root ao path
sys.path.insert(0, str(Path(__file__).parent))


# =============================================================================
# FIXTURES DE AMBIENTE
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Configura variaveis de ambiente para testes."""
    env_vars = {
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "ERROR",
        "DATABASE_URL": "sqlite+aiosqlite://",
        "QUIZ_DEFAULT_QUESTIONS": "3",
        "QUIZ_PASS_PERCENTAGE": "50",
    }
    with patch.dict(os.environ, env_vars):
        from qcm.config import get_settings

        get_settings.cache_clear()
        yield
        get_settings.cache_clear()
