import secrets
from typing import List
import dotenv
import os
dotenv.load_dotenv("secrets.env")

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    SECRET_KEY = secrets.token_hex(32)

GOOGLE_AUTH_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_AUTH_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")

_allowed_users_str = os.getenv("ALLOWED_USERS", "")
ALLOWED_USERS: List[str] = [
    email.strip() for email in _allowed_users_str.split(",") if email.strip()
]

# Any SQLAlchemy URL works here, e.g. a hosted postgresql:// instance
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///db/flashwise.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# New accounts start with the sample deck unless disabled
SEED_SAMPLE_CARDS = os.getenv("SEED_SAMPLE_CARDS", "true").lower() in ("1", "true", "yes")

APP_PORT = int(os.getenv("APP_PORT", "8080"))
