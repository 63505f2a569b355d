from pathlib import Path
from typing import Optional
from nicegui import app, ui
from flashwise.core.locale_manager import T
from flashwise.core.log_manager import logger

ASSETS_DIR = Path(__file__).resolve().parents[2] / "assets"

def setup_page(restricted: bool = True, remove_url_params: bool = False) -> bool:
    ui.dark_mode()
    ui.add_head_html("<style>html, #c3 { padding: 0 !important;}</style>") # Remove default padding from html and #c3
    ui.add_css(ASSETS_DIR / "global.css")
    if restricted:
        # If the page is restricted, check for user session
        if not app.storage.user.get('id'):
            ui.notify(T("access_denied_login_required"), type='negative')
            ui.navigate.to('/')
            return False

    if remove_url_params:
        ui.run_javascript("window.history.replaceState(null, '', window.location.pathname);")

    return True

def current_user_id() -> Optional[int]:
    return app.storage.user.get('id')

def logout():
    logger.info(f"User logged out: {app.storage.user.get('email')}")
    app.storage.user.clear()
    ui.navigate.to('/')

def report_error(context: str, error: Exception, message_key: str = "error_generic"):
    """Logs a failed backend call and tells the user. The page keeps its previous state."""
    logger.error(f"{context}: {error}")
    ui.notify(T(message_key), type='negative')

def create_navbar():
    with ui.header().classes('w-full bg-black text-white justify-between items-center px-6 py-2 shadow-md'):

        with ui.row().classes('items-center gap-4'):
            with ui.button(icon='menu').props('flat round color=white'):
                with ui.menu().props('auto-close'):
                    ui.menu_item(T("home"), on_click=lambda: ui.navigate.to('/app'))
                    ui.menu_item(T("my_flashcards"), on_click=lambda: ui.navigate.to('/app/flashcards'))
                    ui.menu_item(T("quick_quiz"), on_click=lambda: ui.navigate.to('/app/quiz'))
                    ui.menu_item(T("results"), on_click=lambda: ui.navigate.to('/app/results'))

            ui.label(T("app_title")).classes('text-xl font-bold tracking-tight cursor-pointer') \
                .on('click', lambda: ui.navigate.to('/app'))

        with ui.row().classes('items-center gap-4'):
            with ui.avatar(size='32px').classes('bg-gray-700 cursor-pointer'):
                if app.storage.user.get("picture"):
                    ui.image(app.storage.user.get("picture"))
                else:
                    ui.icon('person') # Fallback icon if no image

                with ui.menu().props('auto-close'):
                    ui.menu_item(T("logout"), on_click=logout)
