"""Tests for acknowledgment tracking against the database."""

import sys

import pytest

sys.path.append("src")

from herald.exceptions import AlertStateError, NotFoundError
from herald.ormdb.repositories import AcknowledgmentRepository, AlertRepository
from herald.services.notification import AcknowledgmentTracker


@pytest.fixture
def creator(make_user):
    return make_user(role="admin")


@pytest.fixture
def make_alert(db_session, creator):
    def _make_alert(status="sent"):
        return AlertRepository(db_session).create_alert(
            title="Gas leak",
            message="Evacuate floor 3",
            severity="critical",
            channels=["email"],
            targeting={"all": True, "roles": [], "specific": []},
            created_by=creator.id,
            status=status,
        )

    return _make_alert


class TestAcknowledgmentTracker:
    def test_first_acknowledgment_is_created(self, db_session, make_alert, make_user):
        alert = make_alert()
        responder = make_user()

        result = AcknowledgmentTracker(db_session).acknowledge(alert.id, responder.id, "on it")

        assert result.created is True
        assert result.total == 1
        assert result.record.notes == "on it"
        assert result.record.acknowledged_at is not None

    def test_repeat_acknowledgment_returns_original(self, db_session, make_alert, make_user):
        alert = make_alert()
        responder = make_user()
        tracker = AcknowledgmentTracker(db_session)

        first = tracker.acknowledge(alert.id, responder.id, "first")
        second = tracker.acknowledge(alert.id, responder.id, "second")

        assert (first.created, second.created) == (True, False)
        assert second.record.id == first.record.id
        assert second.record.notes == "first"
        assert tracker.stats(alert.id) == {"total": 1}

    def test_counts_distinct_users(self, db_session, make_alert, make_user):
        alert = make_alert()
        tracker = AcknowledgmentTracker(db_session)

        for _ in range(3):
            tracker.acknowledge(alert.id, make_user().id)

        assert tracker.stats(alert.id) == {"total": 3}
        assert len(tracker.list_acknowledgments(alert.id)) == 3

    @pytest.mark.parametrize("status", ["pending", "cancelled", "failed"])
    def test_only_sent_alerts_accept_acknowledgments(
        self, db_session, make_alert, make_user, status
    ):
        alert = make_alert(status=status)

        with pytest.raises(AlertStateError) as exc_info:
            AcknowledgmentTracker(db_session).acknowledge(alert.id, make_user().id)

        assert exc_info.value.status_code == 409
        assert AcknowledgmentRepository(db_session).count_for_alert(alert.id) == 0

    def test_unknown_alert(self, db_session, make_user):
        with pytest.raises(NotFoundError):
            AcknowledgmentTracker(db_session).acknowledge(999, make_user().id)

    def test_unknown_user(self, db_session, make_alert):
        with pytest.raises(NotFoundError) as exc_info:
            AcknowledgmentTracker(db_session).acknowledge(make_alert().id, 999)
        assert exc_info.value.resource == "User"

    def test_stats_for_unknown_alert(self, db_session):
        with pytest.raises(NotFoundError):
            AcknowledgmentTracker(db_session).stats(12345)


class TestAcknowledgmentRepository:
    def test_constraint_violation_returns_existing(self, db_session, make_alert, creator):
        alert = make_alert()
        repo = AcknowledgmentRepository(db_session)

        record, created = repo.insert_acknowledgment(alert.id, creator.id)
        again, created_again = repo.insert_acknowledgment(alert.id, creator.id, "dup")

        assert created is True
        assert created_again is False
        assert again.id == record.id
        assert repo.count_for_alert(alert.id) == 1
