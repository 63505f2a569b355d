from functools import partial
from typing import Optional
from nicegui import ui, run
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from flashwise.core.helpers import get_category_name, get_category_icon, percentage, time_ago
from flashwise.core.locale_manager import T
from flashwise.core.log_manager import logger
from flashwise.core.mastery import is_mastered
from flashwise.models import Category, Flashcard
from flashwise.pages.common import setup_page, create_navbar, current_user_id, report_error
from flashwise.schemas import FlashcardCreateDTO, FlashcardUpdateDTO
from flashwise.services.user_service import NotAuthenticatedError
from flashwise.services.flashcard_service import (
    list_flashcards,
    create_flashcard,
    update_flashcard,
    delete_flashcard,
    search_flashcards,
    sort_flashcards,
    SORT_OPTIONS,
)

@ui.page('/app/flashcards')
async def all_flashcards_page():
    await flashcards_page(None)

@ui.page('/app/flashcards/{category}')
async def category_flashcards_page(category: str):
    if category not in {c.value for c in Category}:
        ui.navigate.to('/app/flashcards')
        return
    await flashcards_page(Category(category))

def _first_error(error: ValidationError) -> str:
    message = error.errors()[0].get('msg', str(error))
    # pydantic prefixes custom ValueErrors with "Value error, "
    return message.split(', ', 1)[-1] if message.startswith('Value error') else message

async def flashcards_page(category: Optional[Category]):
    if not setup_page(restricted=True):
        return
    create_navbar()

    user_id = current_user_id()

    # --- State ---
    state = {"cards": [], "search": "", "sort_by": "newest"}
    form_state = {"editing": None}   # Flashcard being edited, None when creating
    deletion_state = {"id": None}

    async def load_cards():
        try:
            state["cards"] = await run.io_bound(list_flashcards, user_id, category)
        except SQLAlchemyError as e:
            report_error("Failed to load flashcards", e, "error_loading_cards")
        card_list.refresh()

    # --- Create / Edit Dialog ---
    with ui.dialog() as form_dialog, ui.card().classes('bg-gray-900 border border-white/10 w-full max-w-lg'):
        form_title = ui.label().classes('text-xl font-bold text-white')
        category_input = ui.select(
            {c.value: get_category_name(c) for c in Category},
            label=T("category"),
            value=(category or Category.FULLSTACK).value,
        ).classes('w-full').props('outlined dark')
        question_input = ui.textarea(T("question"), placeholder=T("question_placeholder")) \
            .classes('w-full').props('outlined dark autogrow')
        answer_input = ui.textarea(T("answer"), placeholder=T("answer_placeholder")) \
            .classes('w-full').props('outlined dark autogrow')
        form_error = ui.label().classes('text-sm text-red-400')

        with ui.row().classes('w-full justify-end gap-4 mt-4'):
            ui.button(T("cancel"), on_click=form_dialog.close).props('flat color=white')
            save_button = ui.button(T("save"), icon='save').props('color=indigo-6')

    def open_form(card: Optional[Flashcard] = None):
        form_state["editing"] = card
        form_error.set_text("")
        if card:
            form_title.set_text(T("edit_flashcard"))
            category_input.value = card.category
            question_input.value = card.question
            answer_input.value = card.answer
        else:
            form_title.set_text(T("create_flashcard"))
            category_input.value = (category or Category.FULLSTACK).value
            question_input.value = ""
            answer_input.value = ""
        form_dialog.open()

    async def submit_form():
        editing = form_state["editing"]
        data = {
            "question": question_input.value or "",
            "answer": answer_input.value or "",
            "category": category_input.value,
        }
        try:
            dto = FlashcardUpdateDTO(**data) if editing else FlashcardCreateDTO(**data)
        except ValidationError as e:
            # Inline feedback; nothing is sent to the database
            form_error.set_text(_first_error(e))
            return

        save_button.disable()
        try:
            if editing:
                updated = await run.io_bound(update_flashcard, user_id, editing.id, dto)
                if not updated:
                    ui.notify(T("flashcard_not_found"), type='warning')
                else:
                    ui.notify(T("flashcard_updated"), type='positive')
            else:
                await run.io_bound(create_flashcard, user_id, dto)
                ui.notify(T("flashcard_created"), type='positive')
            form_dialog.close()
            await load_cards()
        except NotAuthenticatedError:
            ui.notify(T("access_denied_login_required"), type='negative')
            ui.navigate.to('/')
        except SQLAlchemyError as e:
            report_error("Saving flashcard failed", e, "error_saving_card")
        finally:
            save_button.enable()

    save_button.on_click(submit_form)

    # --- Delete Dialog ---
    with ui.dialog() as delete_dialog, ui.card().classes('bg-gray-900 border border-white/10'):
        ui.label(T("confirm_delete_flashcard_title")).classes('text-xl font-bold text-white')
        ui.label(T("confirm_delete_flashcard_message")).classes('text-gray-400')
        with ui.row().classes('w-full justify-end gap-4 mt-6'):
            ui.button(T("cancel"), on_click=delete_dialog.close).props('flat color=white')
            confirm_delete_button = ui.button(T("confirm_delete"), color='red').props('raised')

    def open_delete_dialog(card_id: int):
        deletion_state["id"] = card_id
        delete_dialog.open()

    async def execute_deletion():
        card_id = deletion_state["id"]
        if not card_id:
            return
        delete_dialog.close()
        try:
            deleted = await run.io_bound(delete_flashcard, user_id, card_id)
        except NotAuthenticatedError:
            ui.notify(T("access_denied_login_required"), type='negative')
            ui.navigate.to('/')
            return
        except SQLAlchemyError as e:
            report_error("Deletion error", e, "error_deleting_card")
            return

        if deleted:
            ui.notify(T("flashcard_deleted"), type='positive')
            await load_cards()
        else:
            logger.warning(f"Flashcard {card_id} could not be deleted for User {user_id}.")
            ui.notify(T("flashcard_not_found"), type='warning')

    confirm_delete_button.on_click(execute_deletion)

    # --- Handlers ---

    def change_category(value: str):
        ui.navigate.to('/app/flashcards' if value == 'all' else f'/app/flashcards/{value}')

    def change_search(e):
        state["search"] = e.value or ""
        card_list.refresh()

    def change_sort(e):
        state["sort_by"] = e.value
        card_list.refresh()

    # --- Rendering ---

    @ui.refreshable
    def card_list():
        visible = sort_flashcards(search_flashcards(state["cards"], state["search"]), state["sort_by"])

        if not visible:
            with ui.column().classes('w-full items-center justify-center py-12 opacity-70'):
                ui.icon('style', size='4rem').classes('text-gray-600')
                message = T("no_search_results") if state["search"] else T("no_flashcards_yet")
                ui.label(message).classes('text-lg text-gray-400 mt-4 text-center max-w-md')
                ui.button(T("create_flashcard"), icon='add', on_click=lambda: open_form()) \
                    .classes('mt-4 border border-indigo-500 text-indigo-300 transparent')
            return

        with ui.grid(columns='1').classes('w-full sm:grid-cols-2 lg:grid-cols-3 gap-6'):
            for card in visible:
                render_flashcard(card)

    def render_flashcard(card: Flashcard):
        mastered = is_mastered(card)
        border_class = 'border-green-500/50' if mastered else 'border-white/10'

        with ui.card().classes(f'bg-black/40 border {border_class} hover:border-indigo-400 transition-all duration-300 flex flex-col gap-2'):
            with ui.row().classes('w-full justify-between items-center'):
                with ui.row().classes('items-center gap-1 bg-black/40 px-2 py-0.5 rounded text-xs text-gray-400 border border-white/5'):
                    ui.label(get_category_icon(card.category))
                    ui.label(get_category_name(card.category))

                with ui.button(icon='more_vert').props('flat round dense').classes('text-gray-500 hover:text-white'):
                    with ui.menu().classes('bg-gray-900 border border-white/10'):
                        ui.menu_item(T("edit"), on_click=partial(open_form, card))
                        ui.menu_item(T("delete"), on_click=partial(open_delete_dialog, card.id)).classes('text-red-400')

            ui.markdown(card.question).classes('text-lg font-bold text-gray-100')
            with ui.expansion(T("show_answer"), icon='visibility').classes('w-full text-gray-300'):
                ui.markdown(card.answer).classes('text-sm text-gray-300')

            with ui.row().classes('w-full mt-auto gap-4 text-xs text-gray-500'):
                ui.label(T("times_reviewed_info", count=card.times_reviewed or 0))
                ui.label(T("accuracy_info", value=percentage(card.times_correct or 0, card.times_reviewed or 0)))
                ui.label(T("last_reviewed_info", when=time_ago(card.last_reviewed)))
                if mastered:
                    ui.badge(T("mastered"), color='green-8')

    # --- Layout ---
    with ui.column().classes('w-screen min-h-screen gradient-bg overflow-auto pb-10 pt-6'):
        with ui.column().classes('w-full max-w-6xl mx-auto p-6 gap-6'):
            with ui.column().classes('w-full mb-2'):
                title = get_category_name(category) if category else T("all_flashcards")
                ui.label(title).classes('text-4xl font-bold text-white')
                ui.label(T("flashcards_page_subtitle")).classes('text-gray-400')

            with ui.row().classes('w-full items-center gap-4'):
                ui.select(
                    {"all": T("all_categories"), **{c.value: get_category_name(c) for c in Category}},
                    value=category.value if category else "all",
                    on_change=lambda e: change_category(e.value),
                ).props('outlined dark dense').classes('w-64')
                ui.select(
                    {option: T(f"sort_{option}") for option in SORT_OPTIONS},
                    value=state["sort_by"],
                    on_change=change_sort,
                ).props('outlined dark dense').classes('w-48')
                ui.input(placeholder=T("search_placeholder"), on_change=change_search) \
                    .props('outlined dark dense clearable').classes('flex-grow')
                ui.button(T("add"), icon='add', on_click=lambda: open_form()) \
                    .props('color=indigo-6')

            card_list()

    await load_cards()
