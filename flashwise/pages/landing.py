from nicegui import ui, app
from flashwise.pages.common import setup_page
from flashwise.components.google_auth import GoogleSignInButton
from flashwise.core.locale_manager import T

@ui.page('/')
def landing_page():
    if not setup_page(restricted=False):
        return

    # Already signed in: skip the landing page
    if app.storage.user.get('id'):
        ui.navigate.to('/app')
        return

    ui.add_head_html('<script src="https://accounts.google.com/gsi/client" async defer></script>')
    ui.add_head_html('<script src="/assets/js/google_auth_handler.js"></script>')

    with ui.column().classes('w-screen h-screen gradient-bg overflow-hidden justify-center items-center'):
        with ui.card().classes("transparent shadow-none max-w-4xl w-full p-10"):
            with ui.column().classes('max-w-xxl gap-6'):
                ui.label(T("app_title")).classes('text-6xl font-black text-white')
                ui.label(T("app_subtitle")).classes('text-2xl text-indigo-300')
                ui.label(T("app_description")).classes('text-white/75 italic max-w-lg text-lg')

                with ui.row().classes('gap-6 text-white/80'):
                    for icon, key in (('psychology', 'feature_active_recall'),
                                      ('timer', 'feature_timed_quizzes'),
                                      ('insights', 'feature_progress')):
                        with ui.row().classes('items-center gap-2'):
                            ui.icon(icon).classes('text-indigo-300')
                            ui.label(T(key))

                with ui.column().classes('items-center backdrop-blur-md bg-black/30 p-6 mt-4 w-full rounded-xl'):
                    GoogleSignInButton()
                    ui.label(T("login_disclaimer")).classes('text-white/60 text-s max-w-md border-t border-white/20 pt-2 mt-2')
