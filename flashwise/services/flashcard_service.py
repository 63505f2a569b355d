# flashwise/services/flashcard_service.py
from datetime import datetime, timezone
from typing import List, Optional
import bleach
from sqlmodel import select, col
from flashwise.database import create_session
from flashwise.models import Category, Flashcard, utc_now
from flashwise.schemas import FlashcardCreateDTO, FlashcardUpdateDTO
from flashwise.services.user_service import require_user
from flashwise.core.mastery import card_accuracy
from flashwise.core.helpers import as_utc
from flashwise.core.log_manager import logger

# Cards are rendered as markdown, so only light formatting tags survive
ALLOWED_TAGS = ['b', 'i', 'strong', 'em', 'p', 'br', 'ul', 'ol', 'li', 'code', 'pre', 'blockquote', 'span']

SORT_OPTIONS = ('newest', 'oldest', 'mastery-high', 'mastery-low')

SAMPLE_FLASHCARDS = [
    (Category.FULLSTACK, "What is React?",
     "React is a JavaScript library for building user interfaces, particularly single-page applications."),
    (Category.FULLSTACK, "What is the Virtual DOM in React?",
     "A lightweight copy of the actual DOM that React uses to minimize direct DOM manipulation."),
    (Category.APPDEV, "What is Swift?",
     "Apple's programming language for iOS, macOS, watchOS and tvOS app development."),
    (Category.APPDEV, "What is Kotlin?",
     "A statically typed language by JetBrains, officially supported by Google for Android development."),
    (Category.PYTHON, "What is a Python decorator?",
     "A callable that wraps another function or class to add behaviour without modifying its source."),
    (Category.PYTHON, "What are Python list comprehensions?",
     "A concise syntax for building a list from an iterable, e.g. [x * 2 for x in items]."),
]

def sanitize_text(content: str) -> str:
    if not content: return ""
    return bleach.clean(content, tags=ALLOWED_TAGS, strip=True)

def list_flashcards(user_id: int, category: Optional[Category] = None) -> List[Flashcard]:
    """
    All cards owned by the user, optionally restricted to one category.
    """
    with create_session() as session:
        statement = select(Flashcard).where(Flashcard.user_id == user_id)
        if category:
            statement = statement.where(Flashcard.category == Category(category).value)
        statement = statement.order_by(col(Flashcard.created_at).desc())
        return list(session.exec(statement).all())

def get_flashcard(user_id: int, card_id: int) -> Optional[Flashcard]:
    with create_session() as session:
        card = session.get(Flashcard, card_id)
        if not card or card.user_id != user_id:
            return None
        return card

def create_flashcard(user_id: Optional[int], dto: FlashcardCreateDTO) -> Flashcard:
    """
    Stores a new card with fresh counters. The DTO has already validated the text lengths.
    """
    require_user(user_id)

    with create_session() as session:
        card = Flashcard(
            user_id=user_id,
            category=dto.category.value,
            question=sanitize_text(dto.question),
            answer=sanitize_text(dto.answer),
            times_reviewed=0,
            times_correct=0,
        )
        session.add(card)
        session.commit()
        session.refresh(card)
        logger.info(f"Flashcard {card.id} created by User {user_id} in '{card.category}'.")
        return card

def update_flashcard(user_id: Optional[int], card_id: int, dto: FlashcardUpdateDTO) -> bool:
    """
    Applies an edit. Counters are not editable here, see record_review.
    Returns False when the card does not exist or belongs to someone else.
    """
    require_user(user_id)

    with create_session() as session:
        card = session.get(Flashcard, card_id)
        if not card or card.user_id != user_id:
            logger.warning(f"Update of Flashcard {card_id} refused for User {user_id}.")
            return False

        if dto.question is not None:
            card.question = sanitize_text(dto.question)
        if dto.answer is not None:
            card.answer = sanitize_text(dto.answer)
        if dto.category is not None:
            card.category = dto.category.value
        card.updated_at = utc_now()

        session.add(card)
        session.commit()
        logger.info(f"Flashcard {card_id} updated by User {user_id}.")
        return True

def delete_flashcard(user_id: Optional[int], card_id: int) -> bool:
    require_user(user_id)

    with create_session() as session:
        card = session.get(Flashcard, card_id)
        if not card or card.user_id != user_id:
            return False

        session.delete(card)
        session.commit()
        logger.info(f"Flashcard {card_id} deleted by User {user_id}.")
        return True

def record_review(user_id: Optional[int], card_id: int, correct: bool, reviewed_at: Optional[datetime] = None) -> bool:
    """
    Counts one quiz answer against a card: times_reviewed +1, times_correct +1 if correct.
    Read-modify-write inside a single transaction; counters only ever go up.
    """
    require_user(user_id)

    with create_session() as session:
        card = session.get(Flashcard, card_id)
        if not card or card.user_id != user_id:
            logger.warning(f"Review of unknown Flashcard {card_id} for User {user_id} dropped.")
            return False

        card.times_reviewed = (card.times_reviewed or 0) + 1
        if correct:
            card.times_correct = (card.times_correct or 0) + 1
        card.last_reviewed = reviewed_at or utc_now()

        session.add(card)
        session.commit()
        return True

def seed_sample_flashcards(user_id: int) -> int:
    """Gives a new account something to quiz on. Returns the number of cards created."""
    require_user(user_id)

    with create_session() as session:
        for category, question, answer in SAMPLE_FLASHCARDS:
            session.add(Flashcard(
                user_id=user_id,
                category=category.value,
                question=question,
                answer=answer,
            ))
        session.commit()

    logger.info(f"Seeded {len(SAMPLE_FLASHCARDS)} sample flashcards for User {user_id}.")
    return len(SAMPLE_FLASHCARDS)

# --- LISTING HELPERS (in-memory) ---

def search_flashcards(cards: List[Flashcard], query: str) -> List[Flashcard]:
    """Case-insensitive match on question or answer."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(cards)
    return [
        card for card in cards
        if needle in card.question.lower() or needle in card.answer.lower()
    ]

def sort_flashcards(cards: List[Flashcard], sort_by: str = 'newest') -> List[Flashcard]:
    """
    newest/oldest: by last review (never reviewed cards go last for 'newest', first for 'oldest').
    mastery-high/mastery-low: by historical accuracy.
    """
    if sort_by not in SORT_OPTIONS:
        raise ValueError(f"Unknown sort option: {sort_by}")

    if sort_by in ('newest', 'oldest'):
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        key = lambda c: as_utc(c.last_reviewed) if c.last_reviewed else epoch
        return sorted(cards, key=key, reverse=(sort_by == 'newest'))

    return sorted(cards, key=card_accuracy, reverse=(sort_by == 'mastery-high'))
