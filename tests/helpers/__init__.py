"""Test helper utilities for Submission Notifier tests."""

from .fixture_store import FixtureResourceStore, RecordingTransport, load_fixture_resources
from .records import (
    ALL_NOTIFICATION_TYPES,
    EVENT_ID,
    GLOBAL_CC,
    INLINE_TEMPLATES,
    PREPARER,
    SECOND_PREPARER,
    SENDER,
    SUBMISSION_ID,
    SUBMITTER,
    make_config_data,
)

__all__ = [
    "ALL_NOTIFICATION_TYPES",
    "EVENT_ID",
    "FixtureResourceStore",
    "GLOBAL_CC",
    "INLINE_TEMPLATES",
    "PREPARER",
    "RecordingTransport",
    "SECOND_PREPARER",
    "SENDER",
    "SUBMISSION_ID",
    "SUBMITTER",
    "load_fixture_resources",
    "make_config_data",
]
