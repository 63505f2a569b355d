# flashwise/pages/auth_callback.py
from nicegui import ui, app, run
from sqlalchemy.exc import SQLAlchemyError
from flashwise.components.google_auth import verify_google_token, CALLBACK_PATH
from flashwise.core.log_manager import logger
from flashwise.core.locale_manager import T
from flashwise.pages.common import setup_page
from flashwise.services.user_service import get_or_create_user, AuthError

@ui.page(CALLBACK_PATH)
async def auth_callback_page(token: str = None):
    """
    Receives the Google Token via URL Query Parameter.
    Example: /auth/google/callback?token=eyJ...
    """
    if not setup_page(restricted=False, remove_url_params=True):
        return

    if not token:
        ui.notify(T("login_error_no_token"), type='negative')
        logger.warning("Auth callback visited without token.")
        ui.navigate.to('/')
        return

    # Show a "Verifying..." spinner so user knows something is happening
    with ui.column().classes('w-screen h-screen justify-center items-center gradient-bg') as loading_container:
        ui.spinner('dots', size='xl', color='primary')
        ui.label(T("verifying_login")).classes('text-xl mt-4 animate-pulse text-white/80')

    logger.info("Received token via HTTP Redirect. Verifying...")
    user_info = await verify_google_token(token)

    if not user_info:
        logger.error("Token verification failed.")
        ui.notify(T("login_failed"), type='negative')
        ui.navigate.to('/')
        return

    try:
        db_user = await run.io_bound(get_or_create_user, user_info)
    except AuthError as e:
        logger.warning(f"Auth Blocked: {e}")
        loading_container.delete()
        with ui.column().classes('w-screen h-screen justify-center items-center gradient-bg'):
            ui.icon('block', size='64px', color='red').classes('mb-4')
            ui.label(T("whitelist_blocked_user")).classes('text-xl text-white/80')
        return
    except (SQLAlchemyError, ValueError) as e:
        logger.error(f"Database Sync Error: {e}")
        ui.notify(T("login_failed_db"), type='negative')
        ui.navigate.to('/')
        return

    app.storage.user['email'] = db_user.email
    app.storage.user['name'] = db_user.name
    app.storage.user['picture'] = db_user.picture_url
    # Every service call is keyed on this id
    app.storage.user['id'] = db_user.id

    logger.info(f"Login Complete. User ID: {db_user.id}")
    ui.notify(T("welcome_user", name=db_user.name), type='positive')
    ui.navigate.to('/app')
