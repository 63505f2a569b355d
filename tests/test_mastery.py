from flashwise.core.mastery import calculate_mastery, card_accuracy, is_mastered
from flashwise.models import Category, Flashcard

from tests.conftest import make_card


def test_empty_collection_is_all_zero():
    assert calculate_mastery([]) == {"mastered": 0, "total": 0, "percentage": 0}


def test_unreviewed_cards_are_never_mastered():
    cards = [make_card(i) for i in range(5)]
    summary = calculate_mastery(cards)
    assert summary == {"mastered": 0, "total": 5, "percentage": 0}


def test_threshold_is_inclusive_at_80_percent():
    assert is_mastered(make_card(1, reviewed=5, correct=4))
    assert not is_mastered(make_card(2, reviewed=5, correct=3))
    assert is_mastered(make_card(3, reviewed=1, correct=1))


def test_missing_counters_read_as_zero():
    card = Flashcard(id=1, user_id=1, category=Category.APPDEV.value, question="What?", answer="That")
    card.times_reviewed = None
    card.times_correct = None
    assert not is_mastered(card)
    assert card_accuracy(card) == 0.0


def test_percentage_rounds_half_up():
    # 1 of 8 mastered = 12.5% -> 13
    cards = [make_card(1, reviewed=2, correct=2)] + [make_card(i) for i in range(2, 9)]
    summary = calculate_mastery(cards)
    assert summary["mastered"] == 1
    assert summary["total"] == 8
    assert summary["percentage"] == 13


def test_percentage_stays_within_bounds():
    all_mastered = [make_card(i, reviewed=3, correct=3) for i in range(4)]
    assert calculate_mastery(all_mastered)["percentage"] == 100

    mixed = [make_card(1, reviewed=10, correct=9), make_card(2, reviewed=10, correct=1), make_card(3)]
    summary = calculate_mastery(mixed)
    assert 0 <= summary["percentage"] <= 100
    assert summary["percentage"] == 33


def test_accepts_any_iterable():
    cards = (make_card(i, reviewed=1, correct=1) for i in range(3))
    assert calculate_mastery(cards)["mastered"] == 3


def test_card_accuracy():
    assert card_accuracy(make_card(1, reviewed=4, correct=3)) == 0.75
    assert card_accuracy(make_card(2)) == 0.0
