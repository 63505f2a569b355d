# flashwise/database.py
import os
from sqlmodel import SQLModel, create_engine, Session
from flashwise.config import DATABASE_URL
from flashwise.core.log_manager import logger

def _build_engine(url: str):
    if url.startswith("sqlite"):
        # Make sure the folder for the db file exists (db/flashwise.db by default)
        db_path = url.replace("sqlite:///", "", 1)
        db_dir = os.path.dirname(db_path)
        if db_dir and db_path != url:
            os.makedirs(db_dir, exist_ok=True)
        # check_same_thread=False is needed for SQLite with NiceGUI/FastAPI concurrency
        return create_engine(url, echo=False, connect_args={"check_same_thread": False})
    return create_engine(url, echo=False, pool_pre_ping=True)

# Create the engine
engine = _build_engine(DATABASE_URL)

def init_db():
    """
    Creates the database tables based on the models.
    Should be called on app startup.
    """
    from flashwise.models import User, Flashcard, QuizResult, StudyMetrics  # Import to register models
    SQLModel.metadata.create_all(engine)
    logger.info(f"Database initialized at {engine.url.render_as_string(hide_password=True)}")

def get_db_session():
    """
    Yields a database session.
    Use with context manager: `with get_db_session() as session:`
    """
    with Session(engine) as session:
        yield session

# Direct session factory for when generators aren't suitable
def create_session():
    return Session(engine)
