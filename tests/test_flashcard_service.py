from datetime import datetime, timedelta, timezone

import pytest

from flashwise.models import Category
from flashwise.schemas import FlashcardCreateDTO, FlashcardUpdateDTO
from flashwise.services import flashcard_service as fs
from flashwise.services.user_service import NotAuthenticatedError

from tests.conftest import make_card


def new_card(user_id, question="What is a closure?", answer="A function with captured scope", category=Category.PYTHON):
    return fs.create_flashcard(user_id, FlashcardCreateDTO(question=question, answer=answer, category=category))


# --- CRUD ---

def test_create_starts_with_zero_counters(user):
    card = new_card(user.id)

    assert card.id is not None
    assert card.user_id == user.id
    assert card.category == "python"
    assert card.times_reviewed == 0
    assert card.times_correct == 0
    assert card.last_reviewed is None


def test_create_sanitizes_markup(user):
    card = new_card(user.id, question='<b>What</b> is <img src=x onerror="alert(1)">Python?')

    assert "<b>What</b>" in card.question
    assert "<img" not in card.question
    assert "onerror" not in card.question


def test_list_filters_by_owner_and_category(user, other_user):
    new_card(user.id, category=Category.PYTHON)
    new_card(user.id, question="What is Swift?", category=Category.APPDEV)
    new_card(other_user.id, question="Whose card?", category=Category.PYTHON)

    mine = fs.list_flashcards(user.id)
    assert len(mine) == 2
    assert all(card.user_id == user.id for card in mine)

    python_only = fs.list_flashcards(user.id, Category.PYTHON)
    assert [card.question for card in python_only] == ["What is a closure?"]


def test_update_edits_text_and_category(user):
    card = new_card(user.id)

    assert fs.update_flashcard(user.id, card.id, FlashcardUpdateDTO(question="What is a generator?", category=Category.FULLSTACK))

    stored = fs.get_flashcard(user.id, card.id)
    assert stored.question == "What is a generator?"
    assert stored.answer == "A function with captured scope"
    assert stored.category == "fullstack"
    assert stored.updated_at is not None


def test_other_users_cannot_touch_a_card(user, other_user):
    card = new_card(user.id)

    assert fs.get_flashcard(other_user.id, card.id) is None
    assert fs.update_flashcard(other_user.id, card.id, FlashcardUpdateDTO(answer="Hijacked")) is False
    assert fs.delete_flashcard(other_user.id, card.id) is False
    assert fs.record_review(other_user.id, card.id, True) is False

    stored = fs.get_flashcard(user.id, card.id)
    assert stored.answer == "A function with captured scope"
    assert stored.times_reviewed == 0


def test_delete(user):
    card = new_card(user.id)

    assert fs.delete_flashcard(user.id, card.id) is True
    assert fs.get_flashcard(user.id, card.id) is None
    assert fs.delete_flashcard(user.id, card.id) is False


def test_missing_card_is_reported_not_raised(user):
    assert fs.update_flashcard(user.id, 999, FlashcardUpdateDTO(answer="Anything")) is False
    assert fs.record_review(user.id, 999, True) is False


def test_writes_require_a_user(user):
    card = new_card(user.id)
    dto = FlashcardCreateDTO(question="What is DNS?", answer="Name resolution")

    with pytest.raises(NotAuthenticatedError):
        fs.create_flashcard(None, dto)
    with pytest.raises(NotAuthenticatedError):
        fs.update_flashcard(None, card.id, FlashcardUpdateDTO(answer="Changed"))
    with pytest.raises(NotAuthenticatedError):
        fs.delete_flashcard(None, card.id)
    with pytest.raises(NotAuthenticatedError):
        fs.record_review(None, card.id, True)

    assert len(fs.list_flashcards(user.id)) == 1
    assert fs.get_flashcard(user.id, card.id).answer == "A function with captured scope"


# --- REVIEWS ---

def test_record_review_only_increments(user):
    card = new_card(user.id)
    reviewed_at = datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)

    for correct in (True, False, True):
        assert fs.record_review(user.id, card.id, correct, reviewed_at)

    stored = fs.get_flashcard(user.id, card.id)
    assert stored.times_reviewed == 3
    assert stored.times_correct == 2
    assert stored.times_correct <= stored.times_reviewed
    assert stored.last_reviewed.replace(tzinfo=None) == reviewed_at.replace(tzinfo=None)


def test_seed_sample_flashcards(user):
    assert fs.seed_sample_flashcards(user.id) == len(fs.SAMPLE_FLASHCARDS)

    cards = fs.list_flashcards(user.id)
    assert {card.category for card in cards} == {c.value for c in Category}
    assert len(fs.list_flashcards(user.id, Category.APPDEV)) == 2


# --- SEARCH / SORT ---

def test_search_is_case_insensitive():
    cards = [make_card(1), make_card(2)]
    cards[0].question = "What is React?"
    cards[1].answer = "Uses react hooks"

    assert fs.search_flashcards(cards, "REACT") == cards
    assert fs.search_flashcards(cards, "angular") == []
    assert fs.search_flashcards(cards, "   ") == cards


def test_sort_by_last_review():
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    never = make_card(1)
    old = make_card(2)
    old.last_reviewed = base
    recent = make_card(3)
    recent.last_reviewed = (base + timedelta(days=3)).replace(tzinfo=None)

    assert [c.id for c in fs.sort_flashcards([never, old, recent], "newest")] == [3, 2, 1]
    assert [c.id for c in fs.sort_flashcards([recent, never, old], "oldest")] == [1, 2, 3]


def test_sort_by_mastery():
    cards = [make_card(1, reviewed=4, correct=1), make_card(2, reviewed=2, correct=2), make_card(3)]

    assert [c.id for c in fs.sort_flashcards(cards, "mastery-high")] == [2, 1, 3]
    assert [c.id for c in fs.sort_flashcards(cards, "mastery-low")] == [3, 1, 2]


def test_sort_rejects_unknown_option():
    with pytest.raises(ValueError):
        fs.sort_flashcards([], "alphabetical")
