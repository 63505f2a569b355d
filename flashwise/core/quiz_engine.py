# core/quiz_engine.py
"""
Quiz session state machine.

A QuizSession walks through SELECTING -> IN_PROGRESS -> COMPLETE. Selection with no
candidate cards ends in NO_CARDS instead of IN_PROGRESS.

The session never touches the database. It reports what happened through two callbacks:
    on_review(card_id, correct, reviewed_at)  -> once per accepted answer
    on_complete(draft)                         -> exactly once per finished quiz
The caller decides how (and when) to persist those events.
"""
import math
import random
import time
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from flashwise.core.helpers import percentage
from flashwise.core.log_manager import logger
from flashwise.models import Category, DEFAULT_QUIZ_CATEGORY, Flashcard, utc_now
from flashwise.schemas import QuizResultDraft

MAX_QUIZ_QUESTIONS = 10

ReviewCallback = Callable[[int, bool, datetime], None]
CompleteCallback = Callable[[QuizResultDraft], None]

class QuizPhase(str, Enum):
    SELECTING = "selecting"
    NO_CARDS = "no_cards"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"

def shuffle_cards(cards: Iterable, rng: Optional[random.Random] = None) -> list:
    """
    Returns a uniformly shuffled copy. random.shuffle is a Fisher-Yates shuffle,
    so every permutation is equally likely. The input is left untouched.
    """
    shuffled = list(cards)
    (rng or random).shuffle(shuffled)
    return shuffled

def select_questions(
    cards: Iterable,
    rng: Optional[random.Random] = None,
    limit: int = MAX_QUIZ_QUESTIONS
) -> list:
    """Shuffles the candidates and keeps at most `limit` of them."""
    return shuffle_cards(cards, rng)[:limit]


class QuizSession:
    def __init__(
        self,
        category: Optional[Category] = None,
        *,
        max_questions: int = MAX_QUIZ_QUESTIONS,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utc_now,
        on_review: Optional[ReviewCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ):
        # None means a mixed quiz over every category
        self.category: Optional[Category] = Category(category) if category else None
        self.max_questions = max_questions

        self._rng = rng
        self._clock = clock  # monotonic seconds, used for elapsed time only
        self._now = now      # wall clock, used for timestamps
        self._on_review = on_review
        self._on_complete = on_complete

        self._candidates: List[Flashcard] = []
        self._reset()

    def _reset(self):
        self.phase = QuizPhase.SELECTING
        self.cards: List[Flashcard] = []
        self.current_index: int = 0
        self.outcomes: Dict[int, bool] = {}
        self.result: Optional[QuizResultDraft] = None
        self._active_ids: set = set()
        self._started_at: Optional[float] = None

    # --- SELECTION ---

    def _matches(self, card) -> bool:
        if self.category is None:
            return card.category in {c.value for c in Category}
        return card.category == self.category.value

    def change_category(self, category: Optional[Category], candidates: Iterable) -> QuizPhase:
        self.category = Category(category) if category else None
        return self.start(candidates)

    def start(self, candidates: Iterable) -> QuizPhase:
        """
        (Re)enters SELECTING with a fresh draw from `candidates`.
        Any in-progress state is discarded.
        """
        self._reset()
        self._candidates = [card for card in candidates if self._matches(card)]

        if not self._candidates:
            self.phase = QuizPhase.NO_CARDS
            logger.info(f"No cards available for quiz (category={self.category_label}).")
            return self.phase

        self.cards = select_questions(self._candidates, self._rng, self.max_questions)
        self._active_ids = {card.id for card in self.cards}
        self._started_at = self._clock()
        self.phase = QuizPhase.IN_PROGRESS

        logger.info(f"Quiz started with {len(self.cards)} of {len(self._candidates)} cards (category={self.category_label}).")
        return self.phase

    def restart(self, candidates: Optional[Iterable] = None) -> QuizPhase:
        """Back to SELECTING with a reshuffled set. Reuses the last candidates unless new ones are given."""
        pool = list(candidates) if candidates is not None else list(self._candidates)
        return self.start(pool)

    def abandon(self):
        """Drops the session without emitting anything."""
        if self.phase is QuizPhase.IN_PROGRESS:
            logger.info(f"Quiz abandoned after {self.answered_count}/{self.total} answers.")
        self._reset()

    # --- GAMEPLAY ---

    def answer(self, card_id: int, correct: bool) -> bool:
        """
        Records the outcome for a card of the active set.
        Answering the same card again overwrites its outcome.
        Returns False (and changes nothing) when the answer is not accepted.
        """
        if self.phase is not QuizPhase.IN_PROGRESS:
            logger.warning(f"Answer for card {card_id} ignored; quiz is {self.phase.value}.")
            return False
        if card_id not in self._active_ids:
            logger.warning(f"Answer for card {card_id} ignored; card is not part of this quiz.")
            return False

        correct = bool(correct)
        self.outcomes[card_id] = correct

        if self._on_review:
            self._on_review(card_id, correct, self._now())

        if self.current_index < len(self.cards) - 1:
            self.current_index += 1

        self.check_completion()
        return True

    def go_to_next(self) -> int:
        if self.current_index < len(self.cards) - 1:
            self.current_index += 1
        return self.current_index

    def go_to_previous(self) -> int:
        if self.current_index > 0:
            self.current_index -= 1
        return self.current_index

    def check_completion(self) -> Optional[QuizResultDraft]:
        """
        Finalizes the quiz the first time every active card has an outcome.
        Returns the draft on that first call only; later calls return None.
        """
        if self.result is not None or not self.cards:
            return None
        if len(self.outcomes) < len(self.cards):
            return None

        # Single authoritative clock read for the stored duration
        time_spent = max(0, math.floor(self._clock() - self._started_at))

        self.result = QuizResultDraft(
            category=self.category or DEFAULT_QUIZ_CATEGORY,
            total_questions=len(self.cards),
            correct_answers=self.correct_count,
            time_spent=time_spent,
            date=self._now(),
        )
        self.phase = QuizPhase.COMPLETE
        logger.info(f"Quiz complete: {self.result.correct_answers}/{self.result.total_questions} in {time_spent}s.")

        if self._on_complete:
            self._on_complete(self.result)
        return self.result

    # --- READ-ONLY VIEWS ---

    @property
    def category_label(self) -> str:
        return self.category.value if self.category else "all"

    @property
    def total(self) -> int:
        return len(self.cards)

    @property
    def current_card(self) -> Optional[Flashcard]:
        if not self.cards:
            return None
        return self.cards[self.current_index]

    @property
    def answered_count(self) -> int:
        return len(self.outcomes)

    @property
    def correct_count(self) -> int:
        return sum(1 for ok in self.outcomes.values() if ok)

    def is_answered(self, card_id: int) -> bool:
        return card_id in self.outcomes

    @property
    def progress_percentage(self) -> int:
        return percentage(self.answered_count, self.total)

    @property
    def running_score(self) -> int:
        """Score over the questions answered so far."""
        return percentage(self.correct_count, self.answered_count)

    @property
    def score_percentage(self) -> int:
        if self.result is None:
            return 0
        return percentage(self.result.correct_answers, self.result.total_questions)

    def elapsed_seconds(self) -> int:
        """For display. Frozen at the stored duration once the quiz is complete."""
        if self.result is not None:
            return self.result.time_spent
        if self._started_at is None:
            return 0
        return max(0, math.floor(self._clock() - self._started_at))
