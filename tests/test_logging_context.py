"""Tests for logging context propagation."""

import threading

import pytest

from ibbi_tracker.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_log_context()
    yield
    clear_log_context()


class TestLogContext:
    """Tests for push/pop and the context manager."""

    def test_push_and_pop(self):
        token = push_log_context(run_id="abc")
        assert get_log_context() == {"run_id": "abc"}

        pop_log_context(token)
        assert get_log_context() == {}

    def test_nested_scopes_merge_and_restore(self):
        with log_context(run_id="abc"):
            with log_context(extractor="assignments"):
                assert get_log_context() == {"run_id": "abc", "extractor": "assignments"}
            assert get_log_context() == {"run_id": "abc"}
        assert get_log_context() == {}

    def test_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with log_context(run_id="abc"):
                raise RuntimeError("boom")

        assert get_log_context() == {}

    def test_returned_copy_is_detached(self):
        with log_context(run_id="abc"):
            get_log_context()["run_id"] = "changed"

            assert get_log_context()["run_id"] == "abc"

    def test_new_threads_start_without_context(self):
        seen = []

        with log_context(run_id="abc"):
            worker = threading.Thread(target=lambda: seen.append(get_log_context()))
            worker.start()
            worker.join()

        assert seen == [{}]
