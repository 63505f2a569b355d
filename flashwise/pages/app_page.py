from nicegui import ui, app, run
from sqlalchemy.exc import SQLAlchemyError
from flashwise.core.locale_manager import T
from flashwise.core.helpers import get_category_name, get_category_icon
from flashwise.core.mastery import calculate_mastery
from flashwise.models import Category
from flashwise.pages.common import setup_page, create_navbar, current_user_id, report_error
from flashwise.services.flashcard_service import list_flashcards

@ui.page('/app')
async def app_page():
    if not setup_page(restricted=True):
        return
    create_navbar()

    with ui.column().classes('w-screen min-h-screen gradient-bg text-white p-8 overflow-y-auto'):

        with ui.column().classes('w-full items-center text-center max-w-3xl mx-auto mb-10'):
            ui.label(T("dashboard_title", username=app.storage.user.get("name"))).classes('text-5xl font-extrabold text-indigo-400 mt-12')
            ui.label(T("dashboard_subtitle")).classes('text-xl text-gray-400 mt-2')

        ui.separator().classes('w-1/2 mx-auto bg-white/70 mb-10')

        grid = ui.grid(columns='1').classes('w-full max-w-5xl mx-auto md:grid-cols-3 gap-8')

        with ui.column().classes('w-full items-center text-center mt-12 gap-4'):
            ui.button(T("start_quick_quiz"), icon='bolt', on_click=lambda: ui.navigate.to('/app/quiz')) \
                .classes('bg-indigo-600 hover:bg-indigo-500 text-white font-bold px-8')
            ui.label(T("happy_learning")).classes('text-2xl font-semibold text-gray-500')

    try:
        cards = await run.io_bound(list_flashcards, current_user_id())
    except SQLAlchemyError as e:
        report_error("Failed to load dashboard cards", e, "error_loading_cards")
        return

    with grid:
        for category in Category:
            category_cards = [c for c in cards if c.category == category.value]
            render_category_card(category, len(category_cards), calculate_mastery(category_cards)["percentage"])

def render_category_card(category: Category, count: int, mastery: int):
    with ui.card().classes('bg-black/30 p-6 rounded-xl shadow-2xl border border-indigo-600/50 hover:border-indigo-500 transition-all duration-300 gap-3'):
        with ui.row().classes('items-center gap-3'):
            ui.label(get_category_icon(category)).classes('text-4xl')
            ui.label(get_category_name(category)).classes('text-xl font-bold text-white')

        ui.label(T("card_count_info", count=count)).classes('text-sm text-gray-400')

        with ui.row().classes('w-full justify-between text-sm'):
            ui.label(T("mastery")).classes('text-gray-400')
            ui.label(f"{mastery}%").classes('font-bold text-indigo-300')
        ui.linear_progress(value=mastery / 100, show_value=False) \
            .props('size="8px" color="indigo-400" track-color="grey-8" rounded')

        with ui.row().classes('w-full justify-between mt-2'):
            ui.button(T("view_cards"), on_click=lambda: ui.navigate.to(f'/app/flashcards/{category.value}')) \
                .props('flat no-caps color=white').classes('border border-white/20')
            ui.button(T("start_quiz"), icon='play_arrow', on_click=lambda: ui.navigate.to(f'/app/quiz/{category.value}')) \
                .props('dense color=green-7 text-color=white no-caps').classes('px-4 font-semibold')
