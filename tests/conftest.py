import os
import tempfile

# Configure before any flashwise import reads the environment
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "flashwise-test-logs"))
os.environ.setdefault("SEED_SAMPLE_CARDS", "false")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from flashwise import database
from flashwise.models import User, Flashcard, QuizResult, StudyMetrics, Category


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float):
        self.value += seconds


def make_card(card_id: int, category: Category = Category.PYTHON, reviewed: int = 0, correct: int = 0) -> Flashcard:
    return Flashcard(
        id=card_id,
        user_id=1,
        category=category.value,
        question=f"Question {card_id}?",
        answer=f"Answer {card_id}",
        times_reviewed=reviewed,
        times_correct=correct,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db_engine(monkeypatch):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    monkeypatch.setattr(database, "engine", engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def user(db_engine):
    with database.create_session() as session:
        user = User(email="learner@example.com", name="Learner")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


@pytest.fixture
def other_user(db_engine):
    with database.create_session() as session:
        user = User(email="someone@example.com", name="Someone")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
