from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from flashwise.models import Category
from flashwise.schemas import FlashcardCreateDTO, FlashcardUpdateDTO, QuizResultDraft

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_create_dto_strips_and_defaults_category():
    dto = FlashcardCreateDTO(question="  What is HTTP?  ", answer=" A protocol ")
    assert dto.question == "What is HTTP?"
    assert dto.answer == "A protocol"
    assert dto.category is Category.FULLSTACK


@pytest.mark.parametrize("question,answer,message", [
    ("ab", "A long enough answer", "Question must be at least 3 characters"),
    ("   abc   ", "no", "Answer must be at least 3 characters"),
    ("      ", "Answer", "Question must be at least 3 characters"),
])
def test_create_dto_rejects_short_text(question, answer, message):
    with pytest.raises(ValidationError) as excinfo:
        FlashcardCreateDTO(question=question, answer=answer)
    assert message in str(excinfo.value)


def test_create_dto_rejects_unknown_category():
    with pytest.raises(ValidationError):
        FlashcardCreateDTO(question="What?", answer="This", category="history")


def test_update_dto_is_partial():
    dto = FlashcardUpdateDTO(answer="  New answer ")
    assert dto.question is None
    assert dto.category is None
    assert dto.answer == "New answer"

    with pytest.raises(ValidationError):
        FlashcardUpdateDTO(question="x")


def test_quiz_result_draft_bounds():
    draft = QuizResultDraft(category="python", total_questions=4, correct_answers=3, time_spent=20, date=NOW)
    assert draft.category is Category.PYTHON

    with pytest.raises(ValidationError):
        QuizResultDraft(category="python", total_questions=4, correct_answers=5, time_spent=20, date=NOW)
    with pytest.raises(ValidationError):
        QuizResultDraft(category="python", total_questions=0, correct_answers=0, time_spent=0, date=NOW)
    with pytest.raises(ValidationError):
        QuizResultDraft(category="python", total_questions=2, correct_answers=1, time_spent=-1, date=NOW)
