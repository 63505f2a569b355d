# flashwise/services/metrics_service.py
from typing import List, Optional
from sqlmodel import Session, select
from flashwise.database import create_session
from flashwise.models import Category, StudyMetrics
from flashwise.schemas import QuizResultDraft, StudyMetricsData
from flashwise.services.user_service import require_user
from flashwise.core.progress import merge_study_metrics
from flashwise.core.log_manager import logger

def _to_data(row: StudyMetrics) -> StudyMetricsData:
    return {
        "total_study_time": row.total_study_time,
        "cards_reviewed": row.cards_reviewed,
        "average_accuracy": row.average_accuracy,
        "last_study_date": row.last_study_date,
    }

def _find_row(session: Session, user_id: int, category: str) -> Optional[StudyMetrics]:
    statement = select(StudyMetrics).where(
        StudyMetrics.user_id == user_id,
        StudyMetrics.category == category,
    ).with_for_update()
    return session.exec(statement).first()

def get_study_metrics(user_id: int, category: Category) -> Optional[StudyMetrics]:
    with create_session() as session:
        statement = select(StudyMetrics).where(
            StudyMetrics.user_id == user_id,
            StudyMetrics.category == Category(category).value,
        )
        return session.exec(statement).first()

def list_study_metrics(user_id: int) -> List[StudyMetrics]:
    with create_session() as session:
        statement = select(StudyMetrics).where(StudyMetrics.user_id == user_id)
        return list(session.exec(statement).all())

def upsert_study_metrics_in_session(session: Session, user_id: int, category: Category, data: StudyMetricsData) -> StudyMetrics:
    """Writes the aggregate row without committing, for callers that own the transaction."""
    category = Category(category).value
    row = _find_row(session, user_id, category)
    if row is None:
        row = StudyMetrics(user_id=user_id, category=category)

    row.total_study_time = data["total_study_time"]
    row.cards_reviewed = data["cards_reviewed"]
    row.average_accuracy = data["average_accuracy"]
    row.last_study_date = data["last_study_date"]
    session.add(row)
    return row

def upsert_study_metrics(user_id: Optional[int], category: Category, data: StudyMetricsData) -> StudyMetrics:
    require_user(user_id)

    with create_session() as session:
        row = upsert_study_metrics_in_session(session, user_id, category, data)
        session.commit()
        session.refresh(row)
        return row

def apply_quiz_result_in_session(session: Session, user_id: int, draft: QuizResultDraft) -> StudyMetrics:
    """
    Read-modify-write of the (user, category) aggregate inside the caller's transaction.
    Concurrent writers for the same user are last-writer-wins.
    """
    category = Category(draft.category).value
    row = _find_row(session, user_id, category)
    prior = _to_data(row) if row is not None else None

    merged = merge_study_metrics(prior, draft)
    row = upsert_study_metrics_in_session(session, user_id, draft.category, merged)

    logger.info(
        f"StudyMetrics for User {user_id} in '{category}': "
        f"{merged['cards_reviewed']} cards, accuracy {merged['average_accuracy']:.3f}."
    )
    return row
