"""Shared fixtures for Submission Notifier tests."""

import pytest

from notifier.config.holder import ConfigHolder
from notifier.config.models import AppConfig
from notifier.domain.models import Submission, SubmissionEvent
from tests.helpers import (
    EVENT_ID,
    PREPARER,
    SECOND_PREPARER,
    SUBMISSION_ID,
    SUBMITTER,
    FixtureResourceStore,
    RecordingTransport,
    make_config_data,
)


@pytest.fixture
def app_config():
    """Production config: no whitelist, one global CC, inline templates."""
    return AppConfig.model_validate(make_config_data())


@pytest.fixture
def config_holder(app_config):
    return ConfigHolder(app_config)


@pytest.fixture
def submission():
    """Submission with a submitter and two preparers."""
    return Submission(
        id=SUBMISSION_ID,
        submitter=SUBMITTER,
        preparers=[PREPARER, SECOND_PREPARER],
        metadata='{"title": "Article title"}',
    )


@pytest.fixture
def make_event():
    """Factory for submission events of a given type."""

    def _make(event_type="approval-requested", **fields):
        data = {
            "id": EVENT_ID,
            "submission": SUBMISSION_ID,
            "event_type": event_type,
            "performed_by": PREPARER,
            "comment": "How does this look?",
            "link": "https://ui.example.org/submissions/s1",
        }
        data.update(fields)
        return SubmissionEvent(**data)

    return _make


@pytest.fixture
def resource_store(submission):
    """Store holding the submission fixture and an approval-requested event."""
    store = FixtureResourceStore()
    store.add(
        SUBMISSION_ID,
        submitter=submission.submitter,
        preparers=list(submission.preparers),
        metadata=submission.metadata,
    )
    store.add(
        EVENT_ID,
        submission=SUBMISSION_ID,
        eventType="approval-requested",
        performedBy=PREPARER,
        comment="How does this look?",
        link="https://ui.example.org/submissions/s1",
    )
    return store


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock required environment variables for testing."""
    for name in (
        "SMTP_USER",
        "SMTP_PASS",
        "SMTP_TIMEOUT",
        "NOTIFICATION_MODE",
        "RESOURCE_STORE_USER",
        "RESOURCE_STORE_PASS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SMTP_HOST", "smtp.test.com")
    monkeypatch.setenv("SMTP_PORT", "587")
    monkeypatch.setenv("SMTP_USER", "user@test.com")
    monkeypatch.setenv("SMTP_PASS", "testpass123")
