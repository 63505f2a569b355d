from datetime import datetime, timedelta, timezone

import pytest

from flashwise.models import Category
from flashwise.schemas import QuizResultDraft
from flashwise.services import metrics_service, quiz_service
from flashwise.services.user_service import NotAuthenticatedError

BASE = datetime(2024, 4, 1, 18, 0, tzinfo=timezone.utc)


def draft(correct, total, category=Category.PYTHON, time_spent=30, days=0):
    return QuizResultDraft(
        category=category,
        total_questions=total,
        correct_answers=correct,
        time_spent=time_spent,
        date=BASE + timedelta(days=days),
    )


def test_first_result_creates_metrics(user):
    saved = quiz_service.create_quiz_result(user.id, draft(3, 4, time_spent=20))

    assert saved.id is not None
    assert saved.category == "python"

    metrics = metrics_service.get_study_metrics(user.id, Category.PYTHON)
    assert metrics.total_study_time == 20
    assert metrics.cards_reviewed == 4
    assert metrics.average_accuracy == pytest.approx(0.75)


def test_second_result_merges_weighted_accuracy(user):
    quiz_service.create_quiz_result(user.id, draft(5, 10, time_spent=100))
    quiz_service.create_quiz_result(user.id, draft(5, 5, time_spent=30, days=1))

    metrics = metrics_service.get_study_metrics(user.id, Category.PYTHON)
    assert metrics.cards_reviewed == 15
    assert metrics.total_study_time == 130
    assert metrics.average_accuracy == pytest.approx(0.667, abs=1e-3)

    rows = metrics_service.list_study_metrics(user.id)
    assert len(rows) == 1


def test_metrics_are_kept_per_category(user):
    quiz_service.create_quiz_result(user.id, draft(1, 2, Category.APPDEV))
    quiz_service.create_quiz_result(user.id, draft(2, 2, Category.PYTHON))

    assert metrics_service.get_study_metrics(user.id, Category.APPDEV).average_accuracy == pytest.approx(0.5)
    assert metrics_service.get_study_metrics(user.id, Category.PYTHON).average_accuracy == pytest.approx(1.0)
    assert metrics_service.get_study_metrics(user.id, Category.FULLSTACK) is None


def test_results_are_listed_oldest_first_and_filterable(user, other_user):
    quiz_service.create_quiz_result(user.id, draft(1, 2, days=2))
    quiz_service.create_quiz_result(user.id, draft(2, 2, Category.APPDEV, days=0))
    quiz_service.create_quiz_result(user.id, draft(0, 2, days=1))
    quiz_service.create_quiz_result(other_user.id, draft(2, 2))

    results = quiz_service.list_quiz_results(user.id)
    assert [r.correct_answers for r in results] == [2, 0, 1]

    python_only = quiz_service.list_quiz_results(user.id, Category.PYTHON)
    assert [r.correct_answers for r in python_only] == [0, 1]


def test_result_and_metrics_are_written_together(user, monkeypatch):
    def failing_merge(session, user_id, quiz):
        raise RuntimeError("metrics write failed")

    monkeypatch.setattr(quiz_service, "apply_quiz_result_in_session", failing_merge)

    with pytest.raises(RuntimeError):
        quiz_service.create_quiz_result(user.id, draft(1, 1))

    assert quiz_service.list_quiz_results(user.id) == []
    assert metrics_service.get_study_metrics(user.id, Category.PYTHON) is None


def test_writes_require_a_user(user):
    with pytest.raises(NotAuthenticatedError):
        quiz_service.create_quiz_result(None, draft(1, 1))

    data = {"total_study_time": 1, "cards_reviewed": 1, "average_accuracy": 1.0, "last_study_date": BASE}
    with pytest.raises(NotAuthenticatedError):
        metrics_service.upsert_study_metrics(None, Category.PYTHON, data)

    assert quiz_service.list_quiz_results(user.id) == []
    assert metrics_service.list_study_metrics(user.id) == []


def test_upsert_replaces_existing_row(user):
    first = {"total_study_time": 10, "cards_reviewed": 2, "average_accuracy": 0.5, "last_study_date": BASE}
    second = {"total_study_time": 25, "cards_reviewed": 6, "average_accuracy": 0.9, "last_study_date": BASE}

    created = metrics_service.upsert_study_metrics(user.id, Category.APPDEV, first)
    updated = metrics_service.upsert_study_metrics(user.id, Category.APPDEV, second)

    assert created.id == updated.id
    assert updated.cards_reviewed == 6
    assert updated.average_accuracy == pytest.approx(0.9)
    assert len(metrics_service.list_study_metrics(user.id)) == 1
