from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
from sqlmodel import SQLModel, Field, Relationship, UniqueConstraint

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class Category(str, Enum):
    """
    Fixed topic tags. Flashcards, quiz results and study metrics are partitioned by these.
    """
    FULLSTACK = "fullstack"
    APPDEV = "appdev"
    PYTHON = "python"

# Mixed "quick quizzes" are booked under this category
DEFAULT_QUIZ_CATEGORY = Category.FULLSTACK

# --- 1. ACCOUNTS ---

class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: str
    picture_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

    # Relationships
    flashcards: List["Flashcard"] = Relationship(back_populates="owner")
    quiz_results: List["QuizResult"] = Relationship(back_populates="user")

# --- 2. STUDY CONTENT ---

class Flashcard(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    category: str = Field(index=True, description="One of Category values")
    question: str
    answer: str

    # Review counters. Only ever incremented; times_correct <= times_reviewed.
    times_reviewed: int = Field(default=0)
    times_correct: int = Field(default=0)
    last_reviewed: Optional[datetime] = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    # Relationships
    owner: User = Relationship(back_populates="flashcards")

# --- 3. HISTORY (write-once) ---

class QuizResult(SQLModel, table=True):
    """
    One finished quiz. Written once when the session completes, never updated.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    date: datetime = Field(default_factory=utc_now, index=True)
    category: str = Field(index=True)
    total_questions: int
    correct_answers: int
    time_spent: int = Field(default=0, description="Seconds from quiz start to completion")

    # Relationships
    user: User = Relationship(back_populates="quiz_results")

class StudyMetrics(SQLModel, table=True):
    """
    Running aggregate per (user, category). At most one row per pair.
    """
    __table_args__ = (UniqueConstraint("user_id", "category", name="uq_study_metrics_user_category"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    category: str

    total_study_time: int = Field(default=0)
    cards_reviewed: int = Field(default=0)
    average_accuracy: float = Field(default=0.0, description="Weighted by cards_reviewed, 0..1")
    last_study_date: Optional[datetime] = None
