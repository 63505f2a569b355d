# core/progress.py
"""
Reporting over quiz history. Everything here is filter-agnostic:
callers pass whatever (already filtered) collection they want summarised.
"""
from typing import Iterable, Iterator, List, Optional

from flashwise.core.helpers import as_utc, percentage, round_half_up
from flashwise.schemas import ProgressPoint, StudyMetricsData

def result_score(result) -> int:
    return percentage(result.correct_answers, result.total_questions)

def get_average_score(results: Iterable) -> int:
    """
    Mean of the per-quiz percentages, rounded. 0 for no results.
    e.g. 3/5, 5/5, 3/4 -> (60 + 100 + 75) / 3 = 78.33 -> 78
    """
    results = list(results)
    if not results:
        return 0

    total_percentage = sum(
        result.correct_answers / result.total_questions * 100 for result in results
    )
    return round_half_up(total_percentage / len(results))

def total_questions_answered(results: Iterable) -> int:
    return sum(result.total_questions for result in results)

def sort_results_newest_first(results: Iterable) -> list:
    return sorted(results, key=lambda r: as_utc(r.date), reverse=True)

def score_band(correct_answers: int, total_questions: int) -> str:
    """'high' from 80%, 'medium' from 60%, 'low' below."""
    ratio = correct_answers / total_questions if total_questions else 0
    if ratio >= 0.8:
        return "high"
    if ratio >= 0.6:
        return "medium"
    return "low"


class ProgressSeries:
    """
    Score-over-time series for charting.
    Iterating sorts by the real timestamp each time, so the series can be walked again
    and always reflects the collection it wraps.
    """

    def __init__(self, results: Iterable, date_format: str = "%x"):
        self._results = list(results)
        self._date_format = date_format

    def __iter__(self) -> Iterator[ProgressPoint]:
        for result in sorted(self._results, key=lambda r: as_utc(r.date)):
            yield {
                "date": as_utc(result.date).strftime(self._date_format),
                "score": result_score(result),
            }

    def __len__(self) -> int:
        return len(self._results)

def get_progress_over_time(results: Iterable, date_format: str = "%x") -> ProgressSeries:
    return ProgressSeries(results, date_format)


# --- STUDY METRICS ---

def merge_study_metrics(prior: Optional[StudyMetricsData], result) -> StudyMetricsData:
    """
    Folds one finished quiz into the running per-category aggregate.

    average_accuracy is weighted by cards reviewed:
        (old_avg * old_count + accuracy * count) / (old_count + count)
    With no prior row the quiz itself becomes the initial aggregate.
    """
    count = result.total_questions
    accuracy = result.correct_answers / count if count else 0.0

    if prior is None:
        return {
            "total_study_time": result.time_spent,
            "cards_reviewed": count,
            "average_accuracy": accuracy,
            "last_study_date": result.date,
        }

    old_count = prior["cards_reviewed"] or 0
    old_avg = prior["average_accuracy"] or 0.0
    combined = old_count + count

    if combined:
        average = (old_avg * old_count + accuracy * count) / combined
    else:
        average = 0.0

    return {
        "total_study_time": (prior["total_study_time"] or 0) + result.time_spent,
        "cards_reviewed": combined,
        "average_accuracy": average,
        "last_study_date": result.date,
    }

def accuracy_percentage(average_accuracy: Optional[float]) -> int:
    """StudyMetrics accuracy (0..1) as a whole percentage, rounded like every other score."""
    return round_half_up((average_accuracy or 0.0) * 100)

def summarize_results(results: Iterable) -> dict:
    """Headline numbers for the results page."""
    results: List = list(results)
    return {
        "quizzes_taken": len(results),
        "average_score": get_average_score(results),
        "questions_answered": total_questions_answered(results),
        "time_spent": sum(result.time_spent for result in results),
    }
