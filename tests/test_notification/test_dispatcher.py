"""Tests for alert fan-out across recipients and channels."""

import itertools
import sys
from types import SimpleNamespace

import pytest

sys.path.append("src")

from herald.config.settings import get_settings
from herald.services.notification import (
    Channel,
    ChannelOutcome,
    ChannelSettings,
    Dispatcher,
    OutgoingAlert,
    Provider,
    RecipientResolver,
    Severity,
    Targeting,
    is_eligible,
    reduce_attempts,
)

from conftest import RecordingAdapter, make_recipient


def outgoing(channels, alert_id=1):
    return OutgoingAlert(
        id=alert_id,
        title="Evacuate",
        message="Leave building B now",
        severity=Severity.CRITICAL,
        channels=tuple(channels),
        created_by=1,
    )


def recording_dispatcher():
    adapters = {channel: RecordingAdapter() for channel in Channel}
    return Dispatcher(adapters), adapters


class TestDispatchPairs:
    @pytest.mark.asyncio
    async def test_one_attempt_per_enabled_addressable_channel(self):
        dispatcher, adapters = recording_dispatcher()
        recipients = [
            make_recipient(1, email="a@example.com"),
            make_recipient(2, sms="+15550000002"),
        ]

        attempts = await dispatcher.dispatch(outgoing([Channel.EMAIL, Channel.SMS]), recipients)

        assert sorted((a.recipient_id, a.channel) for a in attempts) == [
            (1, Channel.EMAIL),
            (2, Channel.SMS),
        ]
        assert len(adapters[Channel.EMAIL].calls) == 1
        assert len(adapters[Channel.SMS].calls) == 1

    @pytest.mark.asyncio
    async def test_attempt_count_matches_eligible_pairs(self):
        recipients = [
            make_recipient(1, email="a@example.com", sms="+15550000001"),
            make_recipient(2, email="b@example.com", enabled=["sms"]),
            make_recipient(3, push="ExpoPushToken[c]", enabled=["push", "email"]),
            make_recipient(4, sms="bad-number"),
            make_recipient(5),
        ]

        for size in range(1, 4):
            for channels in itertools.combinations(list(Channel), size):
                dispatcher, _ = recording_dispatcher()
                expected = sum(
                    1 for r in recipients for c in channels if is_eligible(r, c)
                )

                attempts = await dispatcher.dispatch(outgoing(channels), recipients)

                assert len(attempts) == expected, channels

    @pytest.mark.asyncio
    async def test_alert_channel_not_enabled_by_anyone(self):
        dispatcher, adapters = recording_dispatcher()
        recipients = [make_recipient(1, email="a@example.com")]

        attempts = await dispatcher.dispatch(outgoing([Channel.PUSH]), recipients)

        assert attempts == []
        assert adapters[Channel.PUSH].calls == []

    @pytest.mark.asyncio
    async def test_adapter_receives_address_and_metadata(self):
        dispatcher, adapters = recording_dispatcher()
        recipient = make_recipient(9, sms="+15550000009")

        await dispatcher.dispatch(outgoing([Channel.SMS], alert_id=33), [recipient])

        address, message, metadata = adapters[Channel.SMS].calls[0]
        assert address == "+15550000009"
        assert message.title == "Evacuate"
        assert message.severity is Severity.CRITICAL
        assert metadata == {"alert_id": 33, "recipient_id": 9, "severity": "critical"}


class TestDispatchFailures:
    @pytest.mark.asyncio
    async def test_adapter_exception_becomes_failed_attempt(self):
        broken = RecordingAdapter(error=RuntimeError("adapter blew up"))
        dispatcher = Dispatcher(
            {Channel.EMAIL: RecordingAdapter(), Channel.SMS: broken}
        )
        recipient = make_recipient(1, email="a@example.com", sms="+15550000001")

        attempts = await dispatcher.dispatch(outgoing([Channel.EMAIL, Channel.SMS]), [recipient])

        by_channel = {a.channel: a for a in attempts}
        assert by_channel[Channel.EMAIL].success is True
        assert by_channel[Channel.SMS].success is False
        assert by_channel[Channel.SMS].reason == "adapter_error"
        assert by_channel[Channel.SMS].error == "adapter blew up"

    @pytest.mark.asyncio
    async def test_failed_outcome_is_recorded(self):
        failing = RecordingAdapter(
            outcome=ChannelOutcome(success=False, reason="missing_or_invalid_address")
        )
        dispatcher = Dispatcher({Channel.EMAIL: failing})

        attempts = await dispatcher.dispatch(
            outgoing([Channel.EMAIL]), [make_recipient(1, email="a@example.com")]
        )

        assert reduce_attempts(attempts).failed == 1


class TestSimulatedDispatchScenarios:
    """End-to-end resolution, dispatch and reduction with no provider credentials."""

    @pytest.fixture
    def dispatcher(self):
        return Dispatcher.from_channel_settings(ChannelSettings.from_settings(get_settings()))

    @pytest.mark.asyncio
    async def test_sms_to_admin_without_credentials_is_simulated(self, dispatcher):
        users = [
            SimpleNamespace(
                id=1,
                role="admin",
                email="admin@example.com",
                channels={"email": False, "sms": True, "push": False},
                phone_number="+15551234567",
                push_token=None,
                push_token_kind=None,
            ),
            SimpleNamespace(
                id=2,
                role="subscriber",
                email="sub@example.com",
                channels={"email": True, "sms": True, "push": False},
                phone_number="+15557654321",
                push_token=None,
                push_token_kind=None,
            ),
        ]
        recipients = RecipientResolver().resolve(Targeting(roles=("admin",)), users)

        attempts = await dispatcher.dispatch(outgoing([Channel.SMS]), recipients)

        assert len(attempts) == 1
        assert attempts[0].success is True
        assert attempts[0].provider is Provider.SIMULATED
        assert reduce_attempts(attempts).to_dict() == {
            "total": 1,
            "sent": 1,
            "failed": 0,
            "pending": 0,
        }

    @pytest.mark.asyncio
    async def test_everyone_with_no_users_is_empty_not_an_error(self, dispatcher):
        recipients = RecipientResolver().resolve(Targeting(all=True), [])

        attempts = await dispatcher.dispatch(outgoing([Channel.EMAIL]), recipients)

        assert recipients == []
        assert attempts == []
        assert reduce_attempts(attempts).to_dict() == {
            "total": 0,
            "sent": 0,
            "failed": 0,
            "pending": 0,
        }

    def test_channel_status_reports_simulation(self, dispatcher):
        status = dispatcher.channel_status()
        assert {name: info["live"] for name, info in status.items()} == {
            "email": False,
            "sms": False,
            "push": False,
        }
