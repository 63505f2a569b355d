# core/mastery.py
from typing import Iterable

from flashwise.core.helpers import percentage
from flashwise.schemas import MasterySummary

MASTERY_THRESHOLD = 0.8

def card_accuracy(card) -> float:
    """Historical accuracy of a card, 0.0 when it was never reviewed."""
    reviewed = card.times_reviewed or 0
    if reviewed == 0:
        return 0.0
    return (card.times_correct or 0) / reviewed

def is_mastered(card) -> bool:
    # Floor of 1 in the denominator: an unreviewed card scores 0/1 and is never mastered
    ratio = (card.times_correct or 0) / max(card.times_reviewed or 0, 1)
    return ratio >= MASTERY_THRESHOLD

def calculate_mastery(cards: Iterable) -> MasterySummary:
    """
    Counts mastered cards in a collection (usually one category).
    Returns {mastered, total, percentage}; all zero for an empty collection.
    """
    cards = list(cards)
    total = len(cards)
    if total == 0:
        return {"mastered": 0, "total": 0, "percentage": 0}

    mastered = sum(1 for card in cards if is_mastered(card))

    return {
        "mastered": mastered,
        "total": total,
        "percentage": percentage(mastered, total),
    }
