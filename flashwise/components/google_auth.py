import asyncio
from typing import Optional
from nicegui import ui
from google.oauth2 import id_token
from google.auth.transport import requests as google_requests
from flashwise.config import GOOGLE_AUTH_CLIENT_ID
from flashwise.core.log_manager import logger

CALLBACK_PATH = '/auth/google/callback'

_google_request = google_requests.Request()

async def verify_google_token(token: str) -> Optional[dict]:
    """
    Verifies the Google ID token off the event loop.
    Returns the token claims (email, name, picture...) or None if it is not valid.
    """
    if not GOOGLE_AUTH_CLIENT_ID:
        logger.error("GOOGLE_CLIENT_ID is not configured; cannot verify sign-in tokens.")
        return None
    try:
        return await asyncio.to_thread(
            id_token.verify_oauth2_token,
            token,
            _google_request,
            GOOGLE_AUTH_CLIENT_ID
        )
    except ValueError as e:
        logger.error(f"Token verification failed: {e}")
        return None

class GoogleSignInButton(ui.element):
    """
    Renders the Google Identity Services button.
    On success the browser script redirects to CALLBACK_PATH?token=..., where the login is completed.
    """

    def __init__(self):
        super().__init__('div')
        self.target_id = f'g-signin-{self.id}'

        with self:
            ui.element('div').props(f'id={self.target_id}')

        ui.timer(0.1, self._init_client_side, once=True)

    def _init_client_side(self):
        ui.run_javascript(
            f'initGoogleLogin("{GOOGLE_AUTH_CLIENT_ID}", "{self.target_id}", "{CALLBACK_PATH}")'
        )
