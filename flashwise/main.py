# main.py
from nicegui import ui, app
from flashwise.config import SECRET_KEY, APP_PORT
from flashwise.database import init_db
from flashwise.core.locale_manager import T
from flashwise.core.log_manager import logger
from flashwise.pages.common import ASSETS_DIR

# --- PAGE REGISTRATION (import side effects register the routes) ---
import flashwise.pages.landing
import flashwise.pages.auth_callback
import flashwise.pages.app_page
import flashwise.pages.flashcards_page
import flashwise.pages.quiz_page
import flashwise.pages.results_page

# Mount the 'assets' directory to be accessible at the '/assets/' URL path
if ASSETS_DIR.exists():
    app.add_static_files('/assets', ASSETS_DIR)
else:
    logger.error(f"Assets directory not found at: {ASSETS_DIR}")

app.on_startup(init_db)

def main():
    ui.run(title=T("app_title", use_fallback=True), reload=False, port=APP_PORT, storage_secret=SECRET_KEY)

# --- STARTUP ---
if __name__ in {"__main__", "__mp_main__"}:
    main()
