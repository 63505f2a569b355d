# flashwise/services/quiz_service.py
from typing import List, Optional
from sqlmodel import select, col
from flashwise.database import create_session
from flashwise.models import Category, QuizResult
from flashwise.schemas import QuizResultDraft
from flashwise.services.user_service import require_user
from flashwise.services.metrics_service import apply_quiz_result_in_session
from flashwise.core.log_manager import logger

def list_quiz_results(user_id: int, category: Optional[Category] = None) -> List[QuizResult]:
    """
    Quiz history for the user, oldest first. Pass a category to filter.
    """
    with create_session() as session:
        statement = select(QuizResult).where(QuizResult.user_id == user_id)
        if category:
            statement = statement.where(QuizResult.category == Category(category).value)
        statement = statement.order_by(col(QuizResult.date).asc())
        return list(session.exec(statement).all())

def create_quiz_result(user_id: Optional[int], draft: QuizResultDraft) -> QuizResult:
    """
    Persists a finished quiz and folds it into the user's StudyMetrics.
    Both writes share one transaction: either both land or neither does.
    """
    require_user(user_id)

    with create_session() as session:
        result = QuizResult(
            user_id=user_id,
            date=draft.date,
            category=draft.category.value,
            total_questions=draft.total_questions,
            correct_answers=draft.correct_answers,
            time_spent=draft.time_spent,
        )
        session.add(result)
        apply_quiz_result_in_session(session, user_id, draft)

        session.commit()
        session.refresh(result)

    logger.info(
        f"QuizResult {result.id} saved for User {user_id}: "
        f"{result.correct_answers}/{result.total_questions} in '{result.category}'."
    )
    return result
