from datetime import datetime
from typing import Callable, Optional
from nicegui import ui, run, events, background_tasks
from sqlalchemy.exc import SQLAlchemyError

from flashwise.core.helpers import get_category_name, format_quiz_duration
from flashwise.core.locale_manager import T
from flashwise.core.log_manager import logger
from flashwise.core.quiz_engine import QuizSession, QuizPhase
from flashwise.models import Category
from flashwise.pages.common import setup_page, create_navbar, current_user_id, report_error
from flashwise.schemas import QuizResultDraft
from flashwise.services.user_service import NotAuthenticatedError
from flashwise.services.flashcard_service import list_flashcards, record_review
from flashwise.services.quiz_service import create_quiz_result

@ui.page('/app/quiz')
async def quick_quiz_page():
    await quiz_page(None)

@ui.page('/app/quiz/{category}')
async def category_quiz_page(category: str):
    if category not in {c.value for c in Category}:
        ui.navigate.to('/app/quiz')
        return
    await quiz_page(Category(category))

class QuizPageState:
    def __init__(self):
        self.is_revealed: bool = False
        self.result_saved: Optional[bool] = None  # None while the save is in flight
        self.closed: bool = False  # set once the client has disconnected

    def close(self):
        self.closed = True

    def update_ui(self, container, callback: Callable[[], None]) -> bool:
        """Runs `callback` inside `container` unless the page is gone. Returns whether it ran."""
        if self.closed:
            return False
        with container:
            callback()
        return True

async def quiz_page(category: Optional[Category]):
    if not setup_page(restricted=True):
        return
    create_navbar()

    user_id = current_user_id()
    state = QuizPageState()

    # --- PERSISTENCE (fire-and-forget) ---
    # Background tasks have no UI slot of their own, so notifications are sent inside `root`.
    # They may finish after the client left; the UI is only touched while the page is open.

    async def persist_review(card_id: int, correct: bool, reviewed_at: datetime):
        context = f"Saving review for Flashcard {card_id} failed"
        try:
            await run.io_bound(record_review, user_id, card_id, correct, reviewed_at)
        except (SQLAlchemyError, NotAuthenticatedError) as e:
            if not state.update_ui(root, lambda: report_error(context, e, "error_saving_review")):
                logger.error(f"{context}: {e}")

    async def persist_result(draft: QuizResultDraft):
        context = "Saving quiz result failed"
        try:
            await run.io_bound(create_quiz_result, user_id, draft)
            state.result_saved = True
        except (SQLAlchemyError, NotAuthenticatedError) as e:
            state.result_saved = False
            if not state.update_ui(root, lambda: report_error(context, e, "error_saving_result")):
                logger.error(f"{context}: {e}")
        state.update_ui(root, quiz_view.refresh)

    def on_review(card_id: int, correct: bool, reviewed_at: datetime):
        background_tasks.create(persist_review(card_id, correct, reviewed_at), name=f'quiz-review-{card_id}')

    def on_complete(draft: QuizResultDraft):
        timer.deactivate()
        state.result_saved = None
        background_tasks.create(persist_result(draft), name='quiz-result')

    session = QuizSession(category, on_review=on_review, on_complete=on_complete)

    # --- DATA ---

    async def fetch_candidates():
        return await run.io_bound(list_flashcards, user_id, category)

    async def start_quiz():
        try:
            cards = await fetch_candidates()
        except SQLAlchemyError as e:
            report_error("Loading quiz cards failed", e, "error_loading_cards")
            return
        state.is_revealed = False
        session.restart(cards)
        if session.phase is QuizPhase.IN_PROGRESS:
            timer.activate()
        else:
            timer.deactivate()
        quiz_view.refresh()

    # --- ACTIONS ---

    def reveal():
        if state.is_revealed or session.phase is not QuizPhase.IN_PROGRESS:
            return
        state.is_revealed = True
        quiz_view.refresh()

    def submit_answer(correct: bool):
        card = session.current_card
        if card is None:
            logger.warning("Attempted to submit answer with no current card.")
            return
        if session.answer(card.id, correct):
            state.is_revealed = False
            quiz_view.refresh()

    def navigate(step: int):
        if step > 0:
            session.go_to_next()
        else:
            session.go_to_previous()
        state.is_revealed = False
        quiz_view.refresh()

    def tick():
        # Display only; the stored duration is read from the clock at completion
        elapsed_label.set_text(format_quiz_duration(session.elapsed_seconds()))

    def teardown():
        state.close()
        timer.cancel()
        session.abandon()

    # --- KEYBOARD ---
    def handle_key(e: events.KeyEventArguments):
        if session.phase is not QuizPhase.IN_PROGRESS or not e.action.keydown:
            return
        if e.key == ' ':
            reveal()
        elif e.key == 'ArrowRight' and not state.is_revealed:
            navigate(1)
        elif e.key == 'ArrowLeft' and not state.is_revealed:
            navigate(-1)
        elif state.is_revealed and e.key == '1':
            submit_answer(False)
        elif state.is_revealed and e.key == '2':
            submit_answer(True)

    ui.keyboard(on_key=handle_key)

    # --- VIEWS ---

    def render_empty():
        with ui.column().classes('w-full items-center justify-center py-12'):
            ui.icon('help_outline', size='4rem').classes('text-gray-500')
            ui.label(T("no_flashcards_available")).classes('text-xl font-bold mt-4')
            ui.label(T("no_flashcards_available_desc")).classes('text-gray-400 text-center max-w-md')
            target = f'/app/flashcards/{category.value}' if category else '/app/flashcards'
            ui.button(T("create_flashcards"), icon='add', on_click=lambda: ui.navigate.to(target)) \
                .classes('mt-6 bg-indigo-600 text-white')

    def render_arena():
        card = session.current_card

        with ui.row().classes('w-full justify-between items-center mb-2'):
            ui.label(T("question_counter", current=session.current_index + 1, total=session.total)) \
                .classes('text-sm font-medium text-gray-300')
            with ui.row().classes('items-center gap-2 text-gray-400'):
                ui.icon('schedule', size='xs')
                ui.label().bind_text_from(elapsed_label, 'text')

        with ui.row().classes('w-full justify-between text-sm text-gray-400'):
            ui.label(T("progress"))
            ui.label(f"{session.progress_percentage}%")
        ui.linear_progress(value=session.progress_percentage / 100, show_value=False) \
            .props('size="10px" color="indigo-400" track-color="grey-8" rounded').classes('mb-4')

        with ui.card().classes('w-full min-h-[320px] bg-gray-900 border border-white/20 flex flex-col items-center justify-center p-8 relative'):
            if session.is_answered(card.id):
                outcome = session.outcomes[card.id]
                ui.badge(T("answered_correct") if outcome else T("answered_incorrect"),
                         color='green-8' if outcome else 'red-8').classes('absolute top-4 right-4')

            ui.markdown(card.question).classes('text-xl text-center text-white')

            if state.is_revealed:
                ui.separator().classes('w-1/2 my-6 opacity-30')
                ui.markdown(card.answer).classes('text-lg text-center text-gray-300 fade-in')

        with ui.row().classes('w-full justify-center gap-4 mt-6'):
            if not state.is_revealed:
                ui.button(T("reveal_answer"), on_click=reveal) \
                    .props('size=lg color=indigo-600').classes('w-full max-w-sm font-bold tracking-widest')
            else:
                ui.button(T("incorrect"), icon='close', on_click=lambda: submit_answer(False)) \
                    .props('color=red-9 size=lg').classes('border border-red-500')
                ui.button(T("correct"), icon='check', on_click=lambda: submit_answer(True)) \
                    .props('color=green-9 size=lg').classes('border border-green-500')

        with ui.row().classes('w-full justify-between mt-6'):
            previous_button = ui.button(T("previous"), icon='chevron_left', on_click=lambda: navigate(-1)) \
                .props('outline color=white')
            next_button = ui.button(T("next"), on_click=lambda: navigate(1)) \
                .props('outline color=white icon-right=chevron_right')
            if session.current_index == 0:
                previous_button.disable()
            if session.current_index >= session.total - 1:
                next_button.disable()

    def render_summary():
        result = session.result
        with ui.column().classes('w-full items-center text-center gap-6 py-6'):
            ui.icon('local_fire_department', size='5rem').classes('text-orange-400')
            ui.label(T("quiz_complete")).classes('text-3xl font-black text-white')
            ui.label(T("quiz_complete_desc")).classes('text-gray-400')

            with ui.grid(columns=2).classes('w-full max-w-md gap-4'):
                for label, value in (
                    (T("score"), f"{session.score_percentage}%"),
                    (T("time"), format_quiz_duration(result.time_spent)),
                    (T("correct"), f"{result.correct_answers}/{result.total_questions}"),
                    (T("completion"), "100%"),
                ):
                    with ui.column().classes('bg-black/30 rounded-xl p-4 gap-0'):
                        ui.label(label).classes('text-sm text-gray-400')
                        ui.label(value).classes('text-2xl font-medium text-white')

            if state.result_saved is None:
                ui.label(T("saving_result")).classes('text-sm text-gray-500 animate-pulse')
            elif state.result_saved is False:
                ui.label(T("result_not_saved")).classes('text-sm text-red-400')

            with ui.row().classes('w-full max-w-md gap-3'):
                ui.button(T("retry_quiz"), icon='refresh', on_click=start_quiz) \
                    .props('outline color=white').classes('flex-1')
                ui.button(T("view_results"), on_click=lambda: ui.navigate.to('/app/results')) \
                    .classes('flex-1 bg-indigo-600 text-white')

    @ui.refreshable
    def quiz_view():
        if session.phase is QuizPhase.NO_CARDS:
            render_empty()
        elif session.phase is QuizPhase.COMPLETE:
            render_summary()
        elif session.phase is QuizPhase.IN_PROGRESS:
            render_arena()
        else:
            ui.spinner('dots', size='lg', color='primary')

    # --- LAYOUT ---
    with ui.column().classes('w-screen min-h-screen gradient-bg text-white items-center p-4') as root:
        title = T("quiz_title", category=get_category_name(category)) if category else T("quick_quiz")
        ui.label(title).classes('text-3xl font-extrabold text-indigo-300 mt-6 mb-8 text-center')

        # Hidden source of truth for the clock display; the arena binds to it
        elapsed_label = ui.label(format_quiz_duration(0)).classes('hidden')

        with ui.column().classes('w-full sm:max-w-2xl bg-black/30 border border-white/10 sm:rounded-xl shadow-2xl p-6'):
            quiz_view()

    timer = ui.timer(1.0, tick, active=False)
    ui.context.client.on_disconnect(teardown)

    await start_quiz()
