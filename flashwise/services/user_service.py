from typing import Optional
from sqlmodel import select
from flashwise.database import create_session
from flashwise.models import User
from flashwise.core.log_manager import logger
from flashwise.config import ALLOWED_USERS, SEED_SAMPLE_CARDS

class AuthError(Exception):
    """Custom exception for authentication failures."""
    pass

class NotAuthenticatedError(AuthError):
    """A mutating call was attempted without a signed-in user."""
    pass

def require_user(user_id: Optional[int]) -> int:
    """
    Guard for every write. Raises NotAuthenticatedError when there is no session user.
    """
    if not user_id:
        logger.warning("Rejected write attempt without an authenticated user.")
        raise NotAuthenticatedError("You need to sign in to do that.")
    return user_id

def get_or_create_user(google_user_info: dict) -> User:
    """
    Checks if a user exists by email.
    If yes: Updates their name/picture (in case they changed on Google).
    If no: Creates a new record and gives them the sample deck.
    Returns: The User database object.
    """
    email = google_user_info.get('email')
    name = google_user_info.get('name') or email
    picture = google_user_info.get('picture')

    if not email:
        raise ValueError("Cannot create user without email")

    if ALLOWED_USERS and email not in ALLOWED_USERS:
        logger.warning(f"Login attempt blocked for non-whitelisted user: {email}")
        raise AuthError("This email is not authorized to access FlashWise.")

    is_new = False
    with create_session() as session:
        # 1. Try to find existing user
        user = session.exec(select(User).where(User.email == email)).first()

        if user:
            # 2. Update existing user (Sync profile data)
            if user.name != name or user.picture_url != picture:
                user.name = name
                user.picture_url = picture
                session.add(user)
                session.commit()
                session.refresh(user)
                logger.info(f"Updated user profile for: {email}")
            else:
                logger.info(f"User login (existing): {email}")
        else:
            # 3. Create new user
            user = User(email=email, name=name, picture_url=picture)
            session.add(user)
            session.commit()
            session.refresh(user)
            is_new = True
            logger.info(f"Created new user: {email}")

    if is_new and SEED_SAMPLE_CARDS:
        # Imported here to avoid a cycle (flashcard_service imports require_user)
        from flashwise.services.flashcard_service import seed_sample_flashcards
        seed_sample_flashcards(user.id)

    return user
