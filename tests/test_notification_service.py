"""Unit tests for the notification service.

Tests the NotificationService for:
- Complete notification flow (event -> submission -> compose -> dispatch)
- Self-submission suppression
- Use of a single configuration snapshot per event
- Error propagation
"""

from pathlib import Path
from unittest.mock import Mock

import pytest

from notifier.config.holder import ConfigHolder
from notifier.config.models import AppConfig
from notifier.dispatch.exceptions import DispatchError
from notifier.dispatch.resolvers import default_resolver
from notifier.domain.models import NotificationType, Submission
from notifier.notifications.models import UnsupportedEventTypeError
from notifier.notifications.service import NotificationService, is_self_submission
from notifier.resources.exceptions import ResourceNotFoundError
from tests.helpers import (
    EVENT_ID,
    GLOBAL_CC,
    PREPARER,
    SUBMISSION_ID,
    SUBMITTER,
    FixtureResourceStore,
    RecordingTransport,
    make_config_data,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def service(config_holder, resource_store, transport):
    return NotificationService(
        config_holder=config_holder,
        resource_store=resource_store,
        transport=transport,
        resolver=default_resolver(),
    )


class TestNotify:
    """End-to-end flow with in-memory collaborators."""

    def test_notify_sends_email(self, service, resource_store, transport):
        result = service.notify(EVENT_ID)

        assert result.is_sent()
        assert result.event_id == EVENT_ID
        assert result.notification_type == NotificationType.SUBMISSION_APPROVAL_REQUESTED
        assert result.delivery_id == "<message-1@test>"

        assert resource_store.reads == [EVENT_ID, SUBMISSION_ID]
        message = transport.last
        assert message["To"] == "submitter@example.org"
        assert message["Cc"] == GLOBAL_CC
        assert message["Subject"] == "Submission Article title"
        assert message.get_content().startswith(f"Dear {SUBMITTER},\n\nHow does this look?")

    def test_notify_with_bundled_templates(self, resource_store, transport):
        templates = [
            {
                "notification_type": "SUBMISSION_APPROVAL_REQUESTED",
                "refs": {
                    "subject": "classpath:approval-requested-subject.j2",
                    "body": "classpath:approval-requested-body.j2",
                    "footer": "classpath:footer.j2",
                },
            }
        ]
        holder = ConfigHolder(AppConfig.model_validate(make_config_data(templates=templates)))
        service = NotificationService(holder, resource_store, transport, default_resolver())

        service.notify(EVENT_ID)

        message = transport.last
        assert message["Subject"] == 'Submission "Article title" awaiting your approval'
        body = message.get_content()
        assert 'with comment "How does this look?"' in body
        assert "https://ui.example.org/submissions/s1" in body
        assert "automated message" in body

    @pytest.mark.parametrize(
        "preparers",
        [[], None, [SUBMITTER], [SUBMITTER.upper()]],
    )
    def test_self_submission_is_suppressed(self, service, resource_store, transport, preparers):
        resource_store.records[SUBMISSION_ID]["preparers"] = preparers

        result = service.notify(EVENT_ID)

        assert result.status == "suppressed"
        assert result.reason == "self_submission"
        assert not result.is_sent()
        assert transport.sent == []

    def test_missing_event_propagates(self, service):
        with pytest.raises(ResourceNotFoundError):
            service.notify("https://repo.example.org/events/missing")

    def test_unknown_event_type_propagates(self, service, resource_store, transport):
        resource_store.records[EVENT_ID]["eventType"] = "archived"

        with pytest.raises(UnsupportedEventTypeError):
            service.notify(EVENT_ID)

        assert transport.sent == []

    def test_dispatch_failure_propagates(self, config_holder, resource_store):
        transport = RecordingTransport(error=OSError("relay down"))
        service = NotificationService(config_holder, resource_store, transport, default_resolver())

        with pytest.raises(DispatchError) as exc_info:
            service.notify(EVENT_ID)

        assert isinstance(exc_info.value.root_cause, OSError)

    def test_reads_config_snapshot_once_per_event(self, app_config, resource_store, transport):
        holder = Mock()
        holder.get.return_value = app_config
        service = NotificationService(holder, resource_store, transport, default_resolver())

        service.notify(EVENT_ID)

        holder.get.assert_called_once_with()

    def test_swapped_config_applies_to_next_event(self, config_holder, service, transport):
        demo = AppConfig.model_validate(
            make_config_data(mode="demo", whitelist=["mailto:nobody@example.org"])
        )

        service.notify(EVENT_ID)
        config_holder.swap(demo)

        with pytest.raises(DispatchError, match="missing recipient"):
            service.notify(EVENT_ID)

        assert len(transport.sent) == 1


class TestIsSelfSubmission:
    """Suppression predicate."""

    def test_other_preparers_are_not_self_submission(self):
        submission = Submission(id=SUBMISSION_ID, submitter=SUBMITTER, preparers=[PREPARER])

        assert not is_self_submission(submission)

    def test_submitter_among_other_preparers_is_not_self_submission(self):
        submission = Submission(
            id=SUBMISSION_ID, submitter=SUBMITTER, preparers=[SUBMITTER, PREPARER]
        )

        assert not is_self_submission(submission)

    def test_no_preparers_is_self_submission(self):
        assert is_self_submission(Submission(id=SUBMISSION_ID, submitter=SUBMITTER))


class TestNotifyFromFixture:
    """Records loaded from tests/fixtures/resources.yaml."""

    def test_changes_requested_reaches_preparers(self, config_holder, transport):
        store = FixtureResourceStore.from_fixture(FIXTURES_DIR / "resources.yaml")
        service = NotificationService(config_holder, store, transport, default_resolver())

        result = service.notify(EVENT_ID)

        assert result.notification_type == NotificationType.SUBMISSION_CHANGES_REQUESTED
        message = transport.last
        assert {a.addr_spec for a in message["To"].addresses} == {
            "approver@example.org",
            "preparer@example.org",
        }
        assert "Please fix the abstract" in message.get_content()
        assert store.reads[-1] == "https://repo.example.org/users/1"
