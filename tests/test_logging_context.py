"""Tests for the per-message logging scope."""

import threading

import pytest

from notifier.logging.context import get_log_context, log_context

EVENT_ID = "https://repo.example.org/events/e1"


def test_empty_outside_any_scope():
    assert get_log_context() == {}


def test_scope_yields_its_fields():
    with log_context(event_id=EVENT_ID, message_id="m-1") as fields:
        assert fields == {"event_id": EVENT_ID, "message_id": "m-1"}
        assert get_log_context() == fields

    assert get_log_context() == {}


def test_nested_scopes_inherit_outer_fields():
    with log_context(message_id="m-1"):
        with log_context(event_id=EVENT_ID):
            assert get_log_context() == {"message_id": "m-1", "event_id": EVENT_ID}

        assert get_log_context() == {"message_id": "m-1"}

    assert get_log_context() == {}


def test_inner_value_wins_until_block_exits():
    with log_context(event_id="first"):
        with log_context(event_id="second"):
            assert get_log_context() == {"event_id": "second"}

        assert get_log_context() == {"event_id": "first"}


def test_scope_restored_after_exception():
    with pytest.raises(ValueError):
        with log_context(event_id=EVENT_ID):
            raise ValueError("dispatch failed")

    assert get_log_context() == {}


def test_returned_fields_are_a_copy():
    with log_context(event_id=EVENT_ID):
        get_log_context()["message_id"] = "modified"

        assert get_log_context() == {"event_id": EVENT_ID}


def test_scope_is_per_thread():
    """A listener worker does not see the fields of another thread."""
    seen = {}

    def worker():
        seen["before"] = get_log_context()
        with log_context(message_id="worker"):
            seen["inside"] = get_log_context()

    with log_context(message_id="main"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()
        assert get_log_context() == {"message_id": "main"}

    assert seen["before"] == {}
    assert seen["inside"] == {"message_id": "worker"}
