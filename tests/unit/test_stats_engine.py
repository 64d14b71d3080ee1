# =============================================================================
# TESTES - Statistics Aggregator
# =============================================================================
# Testes unitarios para estatisticas administrativas
# =============================================================================

import pytest


async def _submit(engine, user_id, school, matiere, count, selected):
    from qcm.models.schemas import AnswerSubmission, StartQuizRequest, SubmitQuizRequest

    started = await engine.start(
        user_id, StartQuizRequest(school=school, matiere=matiere, count=count)
    )
    answers = [
        AnswerSubmission(question_id=q.id, selected_option_id=selected)
        for q in started.questions
    ]
    return await engine.submit(
        user_id, SubmitQuizRequest(attempt_id=started.attempt_id, answers=answers)
    )


class TestQuestionStats:
    """Testes para estatisticas do banco de questoes."""

    @pytest.mark.asyncio
    async def test_counts(self, seeded_database, test_settings):
        """Verifica contagens por status, dificuldade, escola e materia."""
        from qcm.engine.stats_engine import StatisticsAggregator

        stats = await StatisticsAggregator(seeded_database, test_settings).get_question_stats()

        assert stats.total_questions == 10
        assert stats.published_questions == 8
        assert stats.by_status == {"PUBLISHED": 8, "DRAFT": 1, "ARCHIVED": 1}
        assert stats.by_school == {"HEC": 8, "ESSEC": 2}
        assert stats.by_matiere == {"Math": 9, "Physique": 1}
        assert sum(stats.by_difficulty.values()) == 10
        assert stats.average_success_rate == 0.0

    @pytest.mark.asyncio
    async def test_success_rate_after_submissions(
        self, seeded_database, attempt_engine, test_settings
    ):
        """Verifica taxa media de acerto apos submissoes."""
        from qcm.engine.stats_engine import StatisticsAggregator

        await _submit(attempt_engine, "student-1", "ESSEC", "Math", 2, "a")
        await _submit(attempt_engine, "student-2", "ESSEC", "Math", 2, "b")

        stats = await StatisticsAggregator(seeded_database, test_settings).get_question_stats()

        assert stats.average_success_rate == 50.0

    @pytest.mark.asyncio
    async def test_empty_bank(self, database, test_settings):
        """Verifica banco vazio: zeros, sem erro."""
        from qcm.engine.stats_engine import StatisticsAggregator

        stats = await StatisticsAggregator(database, test_settings).get_question_stats()

        assert stats.total_questions == 0
        assert stats.by_status == {}
        assert stats.average_success_rate == 0.0


class TestAdminFilterOptions:
    """Testes para taxonomia completa."""

    @pytest.mark.asyncio
    async def test_includes_unpublished(self, seeded_database, test_settings):
        """Verifica que DRAFT/ARCHIVED entram nos status."""
        from qcm.engine.stats_engine import StatisticsAggregator
        from qcm.models.enums import QuestionStatus

        options = await StatisticsAggregator(
            seeded_database, test_settings
        ).get_question_filter_options()

        assert options.statuses == [
            QuestionStatus.DRAFT,
            QuestionStatus.PUBLISHED,
            QuestionStatus.ARCHIVED,
        ]
        assert options.schools == ["ESSEC", "HEC"]


class TestAttemptStats:
    """Testes para estatisticas de tentativas."""

    @pytest.mark.asyncio
    async def test_no_attempts(self, seeded_database, test_settings):
        """Verifica ausencia de tentativas: zeros."""
        from qcm.engine.stats_engine import StatisticsAggregator

        stats = await StatisticsAggregator(seeded_database, test_settings).get_attempt_stats()

        assert stats.total_attempts == 0
        assert stats.average_percentage == 0.0
        assert stats.pass_rate == 0.0
        assert stats.pass_percentage == 50
        assert stats.by_combination == []

    @pytest.mark.asyncio
    async def test_average_and_pass_rate(self, seeded_database, attempt_engine, test_settings):
        """Verifica media e taxa de aprovacao por combinacao."""
        from qcm.engine.stats_engine import StatisticsAggregator
        from qcm.models.schemas import StartQuizRequest

        await _submit(attempt_engine, "student-1", "ESSEC", "Math", 2, "a")
        await _submit(attempt_engine, "student-2", "ESSEC", "Math", 2, "b")
        await _submit(attempt_engine, "student-1", "HEC", "Physique", 1, "a")
        # CREATED nao entra nas estatisticas
        await attempt_engine.start(
            "student-3", StartQuizRequest(school="HEC", matiere="Math", count=2)
        )

        stats = await StatisticsAggregator(seeded_database, test_settings).get_attempt_stats()

        assert stats.total_attempts == 3
        assert stats.average_percentage == pytest.approx(66.7)
        assert stats.pass_rate == pytest.approx(66.7)

        groups = {(g.school, g.matiere): g for g in stats.by_combination}
        assert groups[("ESSEC", "Math")].attempts == 2
        assert groups[("ESSEC", "Math")].average_percentage == 50.0
        assert groups[("ESSEC", "Math")].pass_rate == 50.0
        assert groups[("HEC", "Physique")].pass_rate == 100.0
        assert ("HEC", "Math") not in groups
