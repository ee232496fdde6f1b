"""Tests for logging context propagation."""

import threading

import pytest

from jobmatch.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_context_starts_empty():
    assert get_log_context() == {}


def test_push_and_pop_restore_previous_layer():
    outer = push_log_context(run_id="run-1")
    inner = push_log_context(job_id="job-7", user_id="user-3")

    assert get_log_context() == {"run_id": "run-1", "job_id": "job-7", "user_id": "user-3"}

    pop_log_context(inner)
    assert get_log_context() == {"run_id": "run-1"}

    pop_log_context(outer)
    assert get_log_context() == {}


def test_inner_layer_overrides_same_key():
    with log_context(job_id="job-1"):
        with log_context(job_id="job-2"):
            assert get_log_context() == {"job_id": "job-2"}
        assert get_log_context() == {"job_id": "job-1"}


def test_context_manager_restores_on_exception():
    with pytest.raises(RuntimeError):
        with log_context(run_id="run-1"):
            raise RuntimeError("dispatch failed")

    assert get_log_context() == {}


def test_context_manager_does_not_swallow_exceptions():
    with pytest.raises(KeyError):
        with log_context(run_id="run-1"):
            raise KeyError("missing")


def test_clear_context():
    push_log_context(run_id="run-1", job_id="job-1")
    clear_log_context()
    assert get_log_context() == {}


def test_returned_context_is_a_copy():
    with log_context(run_id="run-1"):
        snapshot = get_log_context()
        snapshot["job_id"] = "tampered"
        assert get_log_context() == {"run_id": "run-1"}


def test_context_is_isolated_per_thread():
    seen = {}

    def worker():
        seen["worker"] = get_log_context()

    with log_context(run_id="main-thread"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

    assert seen["worker"] == {}
