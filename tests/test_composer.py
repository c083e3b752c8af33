"""Unit tests for the notification composer."""

import json
import logging

import pytest

from notifier.config.exceptions import MissingRecipientConfigError
from notifier.config.models import AppConfig
from notifier.domain.models import NotificationType, Param, Submission
from notifier.notifications.composer import Composer
from notifier.notifications.models import UnsupportedEventTypeError
from tests.helpers import (
    EVENT_ID,
    GLOBAL_CC,
    PREPARER,
    SECOND_PREPARER,
    SENDER,
    SUBMISSION_ID,
    SUBMITTER,
    make_config_data,
)


def composer_for(**config_kwargs) -> Composer:
    return Composer(AppConfig.model_validate(make_config_data(**config_kwargs)))


class TestComposeTypes:
    """Event type to notification type mapping."""

    @pytest.mark.parametrize(
        "event_type,expected",
        [
            ("approval-requested-newuser", NotificationType.SUBMISSION_APPROVAL_INVITE),
            ("approval-requested", NotificationType.SUBMISSION_APPROVAL_REQUESTED),
            ("changes-requested", NotificationType.SUBMISSION_CHANGES_REQUESTED),
            ("submitted", NotificationType.SUBMISSION_SUBMISSION_SUBMITTED),
            ("cancelled", NotificationType.SUBMISSION_SUBMISSION_CANCELLED),
        ],
    )
    def test_event_type_maps_to_notification_type(
        self, app_config, submission, make_event, event_type, expected
    ):
        intent = Composer(app_config).compose(submission, make_event(event_type))

        assert intent.type == expected

    def test_unknown_event_type_raises(self, app_config, submission, make_event):
        with pytest.raises(UnsupportedEventTypeError):
            Composer(app_config).compose(submission, make_event("withdrawn"))


class TestComposeContent:
    """Fields and parameters of the composed intent."""

    def test_sender_cc_and_references(self, app_config, submission, make_event):
        intent = Composer(app_config).compose(submission, make_event("submitted"))

        assert intent.sender == SENDER
        assert intent.param(Param.FROM) == SENDER
        assert intent.cc == (GLOBAL_CC,)
        assert intent.param(Param.CC) == GLOBAL_CC
        assert intent.event_ref == EVENT_ID
        assert intent.resource_ref == SUBMISSION_ID

    def test_to_parameter_is_sorted_and_comma_joined(self, app_config, submission, make_event):
        intent = Composer(app_config).compose(submission, make_event("changes-requested"))

        assert intent.recipients == frozenset({PREPARER, SECOND_PREPARER})
        assert intent.param(Param.TO) == ",".join(sorted([PREPARER, SECOND_PREPARER]))

    def test_metadata_parameters(self, app_config, submission, make_event):
        intent = Composer(app_config).compose(submission, make_event("approval-requested"))

        assert intent.param(Param.RESOURCE_METADATA) == submission.metadata
        event_metadata = json.loads(intent.param(Param.EVENT_METADATA))
        assert event_metadata["comment"] == "How does this look?"
        assert event_metadata["event_type"] == "approval-requested"

    def test_missing_resource_metadata_is_empty_string(self, app_config, make_event):
        submission = Submission(id=SUBMISSION_ID, submitter=SUBMITTER, preparers=[PREPARER])

        intent = Composer(app_config).compose(submission, make_event("approval-requested"))

        assert intent.param(Param.RESOURCE_METADATA) == ""

    @pytest.mark.parametrize(
        "event_type,rel",
        [
            ("approval-requested-newuser", "submission-review-invite"),
            ("approval-requested", "submission-review"),
            ("changes-requested", "submission-review"),
            ("submitted", "submission-view"),
            ("cancelled", "submission-view"),
        ],
    )
    def test_links_parameter(self, app_config, submission, make_event, event_type, rel):
        intent = Composer(app_config).compose(submission, make_event(event_type))

        links = json.loads(intent.param(Param.LINKS))
        assert links == [{"rel": rel, "href": "https://ui.example.org/submissions/s1"}]

    def test_no_links_without_event_link(self, app_config, submission, make_event):
        intent = Composer(app_config).compose(submission, make_event("submitted", link=None))

        assert Param.LINKS not in intent.parameters

    def test_no_cc_parameter_without_global_cc(self, submission, make_event):
        intent = composer_for(global_cc=[]).compose(submission, make_event("submitted"))

        assert intent.cc == ()
        assert Param.CC not in intent.parameters


class TestComposeWhitelist:
    """Recipient policy during composition."""

    def test_approval_invite_keeps_mailto_reference(self, make_event):
        submission = Submission(
            id=SUBMISSION_ID, submitter="mailto:jane@x.edu", preparers=[PREPARER]
        )
        composer = composer_for(whitelist=[])

        intent = composer.compose(submission, make_event("approval-requested-newuser"))

        assert intent.param(Param.TO) == "mailto:jane@x.edu"
        assert intent.recipients == frozenset({"mailto:jane@x.edu"})
        assert intent.type == NotificationType.SUBMISSION_APPROVAL_INVITE

    def test_whitelist_restricts_preparers(self, submission, make_event):
        composer = composer_for(mode="demo", whitelist=[PREPARER])

        intent = composer.compose(submission, make_event("changes-requested"))

        assert intent.recipients == frozenset({PREPARER})
        assert intent.param(Param.TO) == PREPARER

    def test_global_cc_bypasses_whitelist(self, submission, make_event):
        composer = composer_for(mode="demo", whitelist=["mailto:someone-else@example.org"])

        intent = composer.compose(submission, make_event("submitted"))

        assert intent.recipients == frozenset()
        assert intent.param(Param.TO) == ""
        assert intent.cc == (GLOBAL_CC,)


class TestComposeErrors:
    """Invalid input and configuration."""

    def test_none_arguments_raise(self, app_config, submission, make_event):
        composer = Composer(app_config)

        with pytest.raises(ValueError, match="Submission"):
            composer.compose(None, make_event())
        with pytest.raises(ValueError, match="SubmissionEvent"):
            composer.compose(submission, None)

    def test_none_config_raises(self):
        with pytest.raises(ValueError):
            Composer(None)

    def test_missing_recipient_config_for_mode(self, submission, make_event):
        data = make_config_data()
        data["mode"] = "demo"
        composer = Composer(AppConfig.model_validate(data))

        with pytest.raises(MissingRecipientConfigError, match="demo"):
            composer.compose(submission, make_event())

    def test_mismatched_submission_only_warns(self, app_config, submission, make_event, caplog):
        event = make_event("submitted", submission="https://repo.example.org/submissions/other")

        with caplog.at_level(logging.WARNING):
            intent = Composer(app_config).compose(submission, event)

        assert intent.resource_ref == SUBMISSION_ID
        assert any(
            getattr(r, "event", None) == "composer.resource_mismatch" for r in caplog.records
        )
