# =============================================================================
# CONFTEST - Fixtures compartilhadas para todos os testes
# =============================================================================
# Banco em memoria, banco de questoes de exemplo e cliente FastAPI
# =============================================================================

import random

import pytest

# Banco de exemplo:
# - HEC/Math: 5 PUBLISHED (chave "a") + 1 DRAFT + 1 ARCHIVED
# - HEC/Physique: 1 PUBLISHED
# - ESSEC/Math: 2 PUBLISHED
SAMPLE_BANK = [
    {"id": "hec-math-1", "difficulty": "EASY", "chapter": "Algebre"},
    {"id": "hec-math-2", "difficulty": "EASY", "chapter": "Algebre"},
    {"id": "hec-math-3", "difficulty": "MEDIUM", "chapter": "Analyse", "points": 2},
    {"id": "hec-math-4", "difficulty": "MEDIUM", "chapter": "Analyse"},
    {"id": "hec-math-5", "difficulty": "HARD", "chapter": "Probabilites", "points": 3},
    {"id": "hec-math-draft", "status": "DRAFT"},
    {"id": "hec-math-archived", "status": "ARCHIVED"},
    {"id": "hec-phys-1", "matiere": "Physique", "chapter": "Mecanique"},
    {"id": "essec-math-1", "school": "ESSEC"},
    {"id": "essec-math-2", "school": "ESSEC", "difficulty": "HARD"},
]

HEC_MATH_PUBLISHED = {f"hec-math-{i}" for i in range(1, 6)}


def build_question_payload(question_id: str, **overrides) -> dict:
    """Payload JSON de questao com 4 alternativas (correta: "a")."""
    payload = {
        "id": question_id,
        "text": f"Enunciado {question_id}",
        "options": [
            {"id": "a", "text": "Alternativa A"},
            {"id": "b", "text": "Alternativa B"},
            {"id": "c", "text": "Alternativa C"},
            {"id": "d", "text": "Alternativa D"},
        ],
        "correct_option_id": "a",
        "explanation": f"Explicacao {question_id}",
        "school": "HEC",
        "matiere": "Math",
        "chapter": None,
        "difficulty": "MEDIUM",
        "points": 1,
        "status": "PUBLISHED",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# FIXTURES DE DADOS
# =============================================================================


@pytest.fixture
def question_factory():
    """Fabrica de QuestionCreate."""
    from qcm.models.schemas import QuestionCreate

    def _make(question_id: str, **overrides):
        return QuestionCreate(**build_question_payload(question_id, **overrides))

    return _make


@pytest.fixture
def sample_bank():
    """Lista de payloads do banco de exemplo."""
    bank = []
    for entry in SAMPLE_BANK:
        fields = dict(entry)
        bank.append(build_question_payload(fields.pop("id"), **fields))
    return bank


@pytest.fixture
def hec_math_ids():
    """IDs das questoes PUBLISHED de HEC/Math."""
    return set(HEC_MATH_PUBLISHED)


@pytest.fixture
def seeded_rng():
    """RNG deterministico para sorteios reprodutiveis."""
    return random.Random(1234)


@pytest.fixture
def test_settings():
    """Settings isolados do ambiente."""
    from qcm.config import QcmSettings

    return QcmSettings(
        QUIZ_DEFAULT_QUESTIONS=3,
        QUIZ_MIN_QUESTIONS=1,
        QUIZ_MAX_QUESTIONS=50,
        QUIZ_PASS_PERCENTAGE=50,
        HISTORY_MAX_LIMIT=50,
    )


# =============================================================================
# FIXTURES DE BANCO
# =============================================================================


@pytest.fixture
async def database():
    """Banco SQLite em memoria com tabelas criadas."""
    from qcm.storage.database import Database

    db = Database("sqlite+aiosqlite://")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def seeded_database(database, sample_bank):
    """Banco em memoria populado com o banco de exemplo."""
    from qcm.models.schemas import QuestionCreate
    from qcm.storage.question_store import QuestionStore

    async with database.session() as session:
        store = QuestionStore(session)
        for payload in sample_bank:
            await store.create_question(QuestionCreate(**payload), uploaded_by="admin-1")
    return database


@pytest.fixture
async def file_database(tmp_path, sample_bank):
    """Banco SQLite em arquivo (conexoes independentes) com o banco de exemplo."""
    from qcm.models.schemas import QuestionCreate
    from qcm.storage.database import Database
    from qcm.storage.question_store import QuestionStore

    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'qcm_race.db'}")
    await db.create_all()
    async with db.session() as session:
        store = QuestionStore(session)
        for payload in sample_bank:
            await store.create_question(QuestionCreate(**payload), uploaded_by="admin-1")
    yield db
    await db.dispose()


@pytest.fixture
def attempt_engine(seeded_database, test_settings):
    """AttemptEngine sobre o banco de exemplo."""
    from qcm.engine.attempt_engine import AttemptEngine

    return AttemptEngine(seeded_database, settings=test_settings)


# =============================================================================
# FIXTURES DO FASTAPI
# =============================================================================


@pytest.fixture
def admin_headers():
    return {"X-User-Id": "admin-1", "X-User-Role": "ADMIN"}


@pytest.fixture
def student_headers():
    return {"X-User-Id": "student-1", "X-User-Role": "STUDENT"}


@pytest.fixture
def other_student_headers():
    return {"X-User-Id": "student-2", "X-User-Role": "STUDENT"}


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Cliente de teste FastAPI com banco SQLite temporario."""
    from fastapi.testclient import TestClient

    import app_state
    from qcm.config import get_settings

    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'qcm_test.db'}")
    get_settings.cache_clear()
    app_state.set_database(None)

    from server import app

    with TestClient(app) as test_client:
        yield test_client

    app_state.set_database(None)
    get_settings.cache_clear()


@pytest.fixture
def seeded_client(client, admin_headers, sample_bank):
    """Cliente com o banco de exemplo criado via API admin."""
    for payload in sample_bank:
        response = client.post("/questions", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
    return client
