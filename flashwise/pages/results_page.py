from nicegui import ui, run
from sqlalchemy.exc import SQLAlchemyError
from flashwise.core.helpers import get_category_name, format_quiz_duration, as_utc
from flashwise.core.locale_manager import T
from flashwise.core.progress import (
    accuracy_percentage,
    get_progress_over_time,
    result_score,
    score_band,
    sort_results_newest_first,
    summarize_results,
)
from flashwise.models import Category
from flashwise.pages.common import setup_page, create_navbar, current_user_id, report_error
from flashwise.services.quiz_service import list_quiz_results
from flashwise.services.metrics_service import list_study_metrics

BAND_COLORS = {"high": "bg-green-500", "medium": "bg-yellow-500", "low": "bg-red-500"}

def build_chart_options(results, variant: str) -> dict:
    points = list(get_progress_over_time(results))
    return {
        "tooltip": {"trigger": "axis"},
        "grid": {"left": 40, "right": 20, "top": 20, "bottom": 30},
        "xAxis": {"type": "category", "data": [p["date"] for p in points]},
        "yAxis": {"type": "value", "min": 0, "max": 100},
        "series": [{
            "name": T("score"),
            "type": variant,
            "smooth": variant == "line",
            "data": [p["score"] for p in points],
        }],
    }

@ui.page('/app/results')
async def results_page():
    if not setup_page(restricted=True):
        return
    create_navbar()

    user_id = current_user_id()
    state = {"results": [], "metrics": {}, "category": "all", "variant": "line"}

    def filtered_results():
        if state["category"] == "all":
            return state["results"]
        return [r for r in state["results"] if r.category == state["category"]]

    def change_category(e):
        state["category"] = e.value
        results_view.refresh()

    def change_variant(e):
        state["variant"] = e.value
        results_view.refresh()

    def start_quiz():
        if state["category"] == "all":
            ui.navigate.to('/app/quiz')
        else:
            ui.navigate.to(f'/app/quiz/{state["category"]}')

    def render_stat(label: str, value: str):
        with ui.card().classes('bg-black/30 border border-white/10 p-4 gap-1'):
            ui.label(label).classes('text-xs text-gray-400 uppercase')
            ui.label(value).classes('text-2xl font-bold text-white')

    def render_metrics():
        rows = state["metrics"]
        if not rows:
            return
        ui.label(T("study_metrics")).classes('text-xl font-bold text-gray-200 mt-4')
        with ui.grid(columns='1').classes('w-full md:grid-cols-3 gap-4'):
            for category in Category:
                row = rows.get(category.value)
                if row is None:
                    continue
                with ui.card().classes('bg-black/30 border border-white/10 p-4 gap-1'):
                    ui.label(get_category_name(category)).classes('font-bold text-indigo-200')
                    ui.label(T("metrics_accuracy", value=accuracy_percentage(row.average_accuracy))).classes('text-sm text-gray-300')
                    ui.label(T("metrics_cards_reviewed", count=row.cards_reviewed)).classes('text-sm text-gray-300')
                    ui.label(T("metrics_study_time", duration=format_quiz_duration(row.total_study_time))).classes('text-sm text-gray-300')

    def render_history(results):
        ui.label(T("quiz_history")).classes('text-xl font-bold text-gray-200 mt-4')
        if not results:
            ui.label(T("no_results_yet")).classes('text-gray-500 italic')
            return

        with ui.column().classes('w-full gap-2'):
            for result in sort_results_newest_first(results):
                score = result_score(result)
                band = BAND_COLORS[score_band(result.correct_answers, result.total_questions)]
                with ui.row().classes('w-full items-center justify-between bg-black/30 rounded-lg px-4 py-2 border border-white/5'):
                    ui.label(as_utc(result.date).strftime("%b %d, %Y")).classes('w-32 text-gray-300')
                    ui.label(get_category_name(result.category)).classes('w-56 text-gray-300')
                    with ui.row().classes('items-center gap-2 w-40'):
                        ui.label(f"{score}%").classes('font-bold text-white w-12')
                        with ui.element('div').classes('w-16 h-2 rounded-full bg-white/10'):
                            ui.element('div').classes(f'h-full rounded-full {band}').style(f'width: {score}%')
                    ui.label(f"{result.correct_answers} / {result.total_questions}").classes('w-20 text-gray-400')
                    ui.label(format_quiz_duration(result.time_spent)).classes('w-20 text-gray-400')

    @ui.refreshable
    def results_view():
        results = filtered_results()
        summary = summarize_results(results)

        with ui.grid(columns='1').classes('w-full md:grid-cols-4 gap-4'):
            render_stat(T("average_score"), f"{summary['average_score']}%")
            render_stat(T("quizzes_taken"), str(summary["quizzes_taken"]))
            render_stat(T("questions_answered"), str(summary["questions_answered"]))
            render_stat(T("time_studied"), format_quiz_duration(summary["time_spent"]))

        with ui.card().classes('w-full bg-black/30 border border-white/10 p-4'):
            with ui.row().classes('w-full justify-between items-center'):
                ui.label(T("score_over_time")).classes('text-lg font-bold text-white')
                ui.toggle({"line": T("chart_line"), "bar": T("chart_bar")}, value=state["variant"], on_change=change_variant)
            if results:
                ui.echart(build_chart_options(results, state["variant"])).classes('w-full h-64')
            else:
                ui.label(T("no_results_yet")).classes('text-gray-500 italic')

        render_metrics()
        render_history(results)

    with ui.column().classes('w-screen min-h-screen gradient-bg overflow-auto pb-10 pt-6'):
        with ui.column().classes('w-full max-w-6xl mx-auto p-6 gap-6'):
            with ui.row().classes('w-full justify-between items-end'):
                with ui.column().classes('gap-1'):
                    ui.label(T("results_page_title")).classes('text-4xl font-bold text-white')
                    ui.label(T("results_page_subtitle")).classes('text-gray-400')
                with ui.row().classes('items-center gap-4'):
                    ui.select(
                        {"all": T("all_categories"), **{c.value: get_category_name(c) for c in Category}},
                        value="all",
                        on_change=change_category,
                    ).props('outlined dark dense').classes('w-64')
                    ui.button(T("start_new_quiz"), icon='play_arrow', on_click=start_quiz).props('color=indigo-6')

            results_view()

    try:
        state["results"] = await run.io_bound(list_quiz_results, user_id)
        metrics = await run.io_bound(list_study_metrics, user_id)
        state["metrics"] = {row.category: row for row in metrics}
    except SQLAlchemyError as e:
        report_error("Failed to load results", e, "error_loading_results")
        return
    results_view.refresh()
