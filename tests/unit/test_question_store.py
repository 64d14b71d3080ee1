# =============================================================================
# TESTES - Question Store
# =============================================================================
# Testes unitarios para facetas, sorteio e gestao do banco de questoes
# =============================================================================

import pytest


class TestFacets:
    """Testes para opcoes de filtro e contagens."""

    @pytest.mark.asyncio
    async def test_filter_options_only_published(self, seeded_database):
        """Verifica facetas restritas a questoes PUBLISHED."""
        from qcm.models.enums import QuestionDifficulty
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            options = await QuestionStore(session).get_filter_options()

        assert options.schools == ["ESSEC", "HEC"]
        assert options.matieres == ["Math", "Physique"]
        assert "Algebre" in options.chapters
        assert options.difficulties == [
            QuestionDifficulty.EASY,
            QuestionDifficulty.MEDIUM,
            QuestionDifficulty.HARD,
        ]

    @pytest.mark.asyncio
    async def test_question_count(self, seeded_database):
        """Verifica contagem de PUBLISHED por escola/materia."""
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            store = QuestionStore(session)
            assert await store.get_question_count("HEC", "Math") == 5
            assert await store.get_question_count("ESSEC", "Math") == 2
            assert await store.get_question_count("INSEAD", "Math") == 0

    @pytest.mark.asyncio
    async def test_matieres_for_school(self, seeded_database):
        """Verifica materias por escola (desconhecida -> lista vazia)."""
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            store = QuestionStore(session)
            assert await store.get_matieres_for_school("HEC") == ["Math", "Physique"]
            assert await store.get_matieres_for_school("ESSEC") == ["Math"]
            assert await store.get_matieres_for_school("INSEAD") == []

    @pytest.mark.asyncio
    async def test_quiz_filter_options_combinations(self, seeded_database):
        """Verifica que so combinacoes com questoes aparecem."""
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            options = await QuestionStore(session).get_quiz_filter_options()

        pairs = {(c.school, c.matiere): c.question_count for c in options.combinations}
        assert pairs == {("ESSEC", "Math"): 2, ("HEC", "Math"): 5, ("HEC", "Physique"): 1}
        assert ("ESSEC", "Physique") not in pairs

    @pytest.mark.asyncio
    async def test_empty_bank(self, database):
        """Verifica banco vazio: listas vazias, sem erro."""
        from qcm.storage.question_store import QuestionStore

        async with database.session() as session:
            store = QuestionStore(session)
            options = await store.get_filter_options()
            combos = await store.get_quiz_filter_options()

        assert options.schools == []
        assert options.difficulties == []
        assert combos.combinations == []


class TestCandidates:
    """Testes para leitura usada no sorteio."""

    @pytest.mark.asyncio
    async def test_candidate_ids_exclude_draft_and_archived(self, seeded_database, hec_math_ids):
        """Verifica que DRAFT e ARCHIVED nao sao elegiveis."""
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            ids = await QuestionStore(session).list_candidate_ids("HEC", "Math")

        assert set(ids) == hec_math_ids
        assert "hec-math-draft" not in ids
        assert "hec-math-archived" not in ids

    @pytest.mark.asyncio
    async def test_get_many_preserves_order(self, seeded_database):
        """Verifica que get_many respeita a ordem pedida."""
        from qcm.storage.question_store import QuestionStore

        wanted = ["hec-math-3", "hec-math-1", "hec-math-5"]
        async with seeded_database.session() as session:
            questions = await QuestionStore(session).get_many(wanted)

        assert [q.id for q in questions] == wanted


class TestManagement:
    """Testes para criacao e atualizacao de questoes."""

    @pytest.mark.asyncio
    async def test_create_question(self, database, question_factory):
        """Verifica criacao com versao 1 e contadores zerados."""
        from qcm.models.enums import QuestionStatus
        from qcm.storage.question_store import QuestionStore

        async with database.session() as session:
            question = await QuestionStore(session).create_question(
                question_factory("nova-1", tags=["algebre"]), uploaded_by="admin-1"
            )

        assert question.id == "nova-1"
        assert question.version == 1
        assert question.times_answered == 0
        assert question.status == QuestionStatus.PUBLISHED
        assert question.uploaded_by == "admin-1"
        assert question.options[0] == {
            "id": "a",
            "text": "Alternativa A",
            "content_type": "TEXT",
            "image_url": None,
        }

    @pytest.mark.asyncio
    async def test_create_duplicate_id_conflict(self, seeded_database, question_factory):
        """Verifica que id ja existente -> ConflictError e a original fica intacta."""
        from qcm.exceptions import ConflictError
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            store = QuestionStore(session)
            with pytest.raises(ConflictError) as exc_info:
                await store.create_question(
                    question_factory("hec-math-1", text="Outro enunciado"), uploaded_by="admin-2"
                )
            original = await store.get_question("hec-math-1")

        assert exc_info.value.details == {"question_id": "hec-math-1"}
        assert original.text == "Enunciado hec-math-1"
        assert original.uploaded_by == "admin-1"

    @pytest.mark.asyncio
    async def test_update_text_keeps_version(self, seeded_database):
        """Verifica que mudar so o enunciado nao incrementa a versao."""
        from qcm.models.schemas import QuestionUpdate
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            question = await QuestionStore(session).update_question(
                "hec-math-1", QuestionUpdate(text="Novo enunciado")
            )

        assert question.text == "Novo enunciado"
        assert question.version == 1

    @pytest.mark.asyncio
    async def test_update_options_bumps_version(self, seeded_database):
        """Verifica que mudar alternativas incrementa a versao."""
        from qcm.models.schemas import QuestionOption, QuestionUpdate
        from qcm.storage.question_store import QuestionStore

        update = QuestionUpdate(
            options=[QuestionOption(id="a", text="Sim"), QuestionOption(id="b", text="Nao")]
        )
        async with seeded_database.session() as session:
            question = await QuestionStore(session).update_question("hec-math-1", update)

        assert question.version == 2
        assert [o["id"] for o in question.options] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_update_key_outside_options(self, seeded_database):
        """Verifica chave fora das alternativas -> ValidationError."""
        from qcm.exceptions import ValidationError
        from qcm.models.schemas import QuestionUpdate
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            with pytest.raises(ValidationError):
                await QuestionStore(session).update_question(
                    "hec-math-1", QuestionUpdate(correct_option_id="z")
                )

    @pytest.mark.asyncio
    async def test_update_unknown_question(self, seeded_database):
        """Verifica questao inexistente -> NotFoundError."""
        from qcm.exceptions import NotFoundError
        from qcm.models.schemas import QuestionUpdate
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            with pytest.raises(NotFoundError):
                await QuestionStore(session).update_question("nao-existe", QuestionUpdate())

    @pytest.mark.asyncio
    async def test_clear_nullable_field(self, seeded_database):
        """Verifica que campos opcionais aceitam null explicito."""
        from qcm.models.schemas import QuestionUpdate
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            question = await QuestionStore(session).update_question(
                "hec-math-1", QuestionUpdate(chapter=None, text=None)
            )

        assert question.chapter is None
        assert question.text == "Enunciado hec-math-1"


class TestListQuestions:
    """Testes para listagem admin."""

    @pytest.mark.asyncio
    async def test_list_all_statuses(self, seeded_database):
        """Verifica que a listagem inclui DRAFT/ARCHIVED."""
        from qcm.models.schemas import QuestionListFilters
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            questions, total = await QuestionStore(session).list_questions(
                QuestionListFilters(school="HEC", matiere="Math", limit=100)
            )

        assert total == 7
        assert len(questions) == 7

    @pytest.mark.asyncio
    async def test_list_filters_and_pagination(self, seeded_database):
        """Verifica filtro por status e paginacao."""
        from qcm.models.enums import QuestionStatus
        from qcm.models.schemas import QuestionListFilters
        from qcm.storage.question_store import QuestionStore

        filters = QuestionListFilters(status=QuestionStatus.PUBLISHED, limit=3, page=3)
        async with seeded_database.session() as session:
            questions, total = await QuestionStore(session).list_questions(filters)

        assert total == 8
        assert len(questions) == 2

    @pytest.mark.asyncio
    async def test_list_search(self, seeded_database):
        """Verifica busca textual no enunciado/capitulo."""
        from qcm.models.schemas import QuestionListFilters
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            questions, total = await QuestionStore(session).list_questions(
                QuestionListFilters(search="mecanique")
            )

        assert total == 1
        assert questions[0].id == "hec-phys-1"

    @pytest.mark.asyncio
    async def test_list_sorted_by_difficulty(self, seeded_database):
        """Verifica ordenacao EASY -> HARD."""
        from qcm.models.schemas import QuestionListFilters
        from qcm.storage.question_store import QuestionStore

        filters = QuestionListFilters(
            school="HEC", status="PUBLISHED", matiere="Math", sort_by="difficulty", sort_order="asc"
        )
        async with seeded_database.session() as session:
            questions, _ = await QuestionStore(session).list_questions(filters)

        assert [q.difficulty.value for q in questions] == [
            "EASY",
            "EASY",
            "MEDIUM",
            "MEDIUM",
            "HARD",
        ]


class TestAnswerOutcomes:
    """Testes para contadores de resposta."""

    @pytest.mark.asyncio
    async def test_record_and_totals(self, seeded_database):
        """Verifica incrementos e soma global."""
        from qcm.storage.question_store import QuestionStore

        async with seeded_database.session() as session:
            store = QuestionStore(session)
            await store.record_answer_outcomes(
                [("hec-math-1", True), ("hec-math-2", False), ("hec-math-1", False)]
            )
            await session.commit()

        async with seeded_database.session() as session:
            store = QuestionStore(session)
            question = await store.get_question("hec-math-1")
            assert question.times_answered == 2
            assert question.times_correct == 1
            assert await store.success_totals() == (3, 1)
