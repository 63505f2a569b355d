from contextlib import nullcontext

from flashwise.pages.quiz_page import QuizPageState


def test_ui_updates_run_while_the_page_is_open():
    state = QuizPageState()
    calls = []

    assert state.update_ui(nullcontext(), lambda: calls.append("refresh")) is True
    assert calls == ["refresh"]


def test_ui_updates_are_skipped_after_disconnect():
    state = QuizPageState()
    calls = []

    state.close()
    assert state.closed
    assert state.update_ui(nullcontext(), lambda: calls.append("refresh")) is False
    assert calls == []


def test_closed_page_never_enters_the_container():
    class DeletedContainer:
        def __enter__(self):
            raise AssertionError("container used after disconnect")

        def __exit__(self, *exc):
            return False

    state = QuizPageState()
    state.close()
    assert state.update_ui(DeletedContainer(), lambda: None) is False
