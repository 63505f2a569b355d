import pytest

from flashwise.services import user_service
from flashwise.services.flashcard_service import list_flashcards, SAMPLE_FLASHCARDS
from flashwise.services.user_service import AuthError, NotAuthenticatedError, get_or_create_user, require_user

GOOGLE_INFO = {
    "email": "new.learner@example.com",
    "name": "New Learner",
    "picture": "https://example.com/avatar.png",
}


def test_new_user_is_created_and_seeded(db_engine, monkeypatch):
    monkeypatch.setattr(user_service, "SEED_SAMPLE_CARDS", True)

    user = get_or_create_user(GOOGLE_INFO)
    assert user.id is not None
    assert user.email == "new.learner@example.com"
    assert len(list_flashcards(user.id)) == len(SAMPLE_FLASHCARDS)


def test_existing_user_is_synced_not_reseeded(db_engine, monkeypatch):
    monkeypatch.setattr(user_service, "SEED_SAMPLE_CARDS", True)
    first = get_or_create_user(GOOGLE_INFO)

    again = get_or_create_user({**GOOGLE_INFO, "name": "Renamed Learner", "picture": None})
    assert again.id == first.id
    assert again.name == "Renamed Learner"
    assert again.picture_url is None
    assert len(list_flashcards(first.id)) == len(SAMPLE_FLASHCARDS)


def test_seeding_can_be_disabled(db_engine, monkeypatch):
    monkeypatch.setattr(user_service, "SEED_SAMPLE_CARDS", False)

    user = get_or_create_user(GOOGLE_INFO)
    assert list_flashcards(user.id) == []


def test_whitelist_blocks_other_emails(db_engine, monkeypatch):
    monkeypatch.setattr(user_service, "ALLOWED_USERS", ["someone.else@example.com"])

    with pytest.raises(AuthError):
        get_or_create_user(GOOGLE_INFO)


def test_email_is_required(db_engine):
    with pytest.raises(ValueError):
        get_or_create_user({"name": "Nameless"})


def test_require_user():
    assert require_user(7) == 7
    with pytest.raises(NotAuthenticatedError):
        require_user(None)
    with pytest.raises(AuthError):
        require_user(0)
