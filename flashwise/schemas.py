# flashwise/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, TypedDict

from flashwise.models import Category

MIN_TEXT_LENGTH = 3

def _check_text(value: str, label: str) -> str:
    value = value.strip()
    if len(value) < MIN_TEXT_LENGTH:
        raise ValueError(f"{label} must be at least {MIN_TEXT_LENGTH} characters")
    return value

class FlashcardCreateDTO(BaseModel):
    question: str
    answer: str
    category: Category = Category.FULLSTACK

    @field_validator('question')
    def validate_question(cls, v):
        return _check_text(v, "Question")

    @field_validator('answer')
    def validate_answer(cls, v):
        return _check_text(v, "Answer")

class FlashcardUpdateDTO(BaseModel):
    """Partial edit. Fields left as None are not touched."""
    question: Optional[str] = None
    answer: Optional[str] = None
    category: Optional[Category] = None

    @field_validator('question')
    def validate_question(cls, v):
        return None if v is None else _check_text(v, "Question")

    @field_validator('answer')
    def validate_answer(cls, v):
        return None if v is None else _check_text(v, "Answer")

class QuizResultDraft(BaseModel):
    """
    A finished quiz as produced by the engine, before it gets an id.
    """
    category: Category
    total_questions: int = Field(ge=1)
    correct_answers: int = Field(ge=0)
    time_spent: int = Field(ge=0)
    date: datetime

    @model_validator(mode='after')
    def validate_counts(self):
        if self.correct_answers > self.total_questions:
            raise ValueError("correct_answers cannot exceed total_questions.")
        return self

class StudyMetricsData(TypedDict):
    total_study_time: int
    cards_reviewed: int
    average_accuracy: float
    last_study_date: Optional[datetime]

class MasterySummary(TypedDict):
    mastered: int
    total: int
    percentage: int

class ProgressPoint(TypedDict):
    date: str   # locale formatted day
    score: int  # rounded percentage
