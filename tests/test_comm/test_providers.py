"""Tests for the hosted provider clients."""

import sys
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from exponent_server_sdk import PushTicketError
from twilio.base.exceptions import TwilioRestException

sys.path.append("src")

from herald.comm import ExpoPushClient, ProviderResponseError, SendGridClient, TwilioClient


class TestTwilioClient:
    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            TwilioClient("AC123", "", "+15550000000")

    @pytest.mark.asyncio
    async def test_send_sms(self):
        with patch("herald.comm.twilio.Client") as client_cls:
            client_cls.return_value.messages.create.return_value = SimpleNamespace(sid="SM42")
            client = TwilioClient("AC123", "secret", "+15550000000")

            sid = await client.send_sms(to="+15551234567", body="ALERT [HIGH]: Flood")

        assert sid == "SM42"
        client_cls.assert_called_once_with("AC123", "secret")
        client_cls.return_value.messages.create.assert_called_once_with(
            to="+15551234567", from_="+15550000000", body="ALERT [HIGH]: Flood"
        )

    @pytest.mark.asyncio
    async def test_rejection_raises_provider_error(self):
        with patch("herald.comm.twilio.Client") as client_cls:
            client_cls.return_value.messages.create.side_effect = TwilioRestException(
                400, "/Messages.json", msg="Invalid 'To' number"
            )
            client = TwilioClient("AC123", "secret", "+15550000000")

            with pytest.raises(ProviderResponseError) as exc_info:
                await client.send_sms(to="+15551234567", body="hi")

        assert exc_info.value.status == 400
        assert "Invalid 'To' number" in exc_info.value.message


class TestSendGridClient:
    @pytest.mark.asyncio
    async def test_send_email(self):
        with patch("herald.comm.sendgrid.SendGridAPIClient") as api_cls:
            api_cls.return_value.send.return_value = SimpleNamespace(
                status_code=202, headers={"X-Message-Id": "sg-9"}, body=b""
            )
            client = SendGridClient("key", "alerts@example.com")

            message_id = await client.send_email(
                to="ops@example.com", subject="ALERT: Fire", text="Evacuate", html="<p>Evacuate</p>"
            )

        assert message_id == "sg-9"
        mail = api_cls.return_value.send.call_args.args[0]
        assert mail.get()["subject"] == "ALERT: Fire"

    @pytest.mark.asyncio
    async def test_sdk_error_raises_provider_error(self):
        error = Exception("Forbidden")
        error.status_code = 403
        with patch("herald.comm.sendgrid.SendGridAPIClient") as api_cls:
            api_cls.return_value.send.side_effect = error
            client = SendGridClient("key", "alerts@example.com")

            with pytest.raises(ProviderResponseError) as exc_info:
                await client.send_email(to="ops@example.com", subject="s", text="t")

        assert exc_info.value.status == 403


class TestExpoPushClient:
    @pytest.mark.asyncio
    async def test_send_push(self):
        ticket = MagicMock(id="ticket-7")
        with patch("herald.comm.expo.PushClient") as push_cls:
            push_cls.return_value.publish.return_value = ticket
            client = ExpoPushClient(access_token="expo-token")

            ticket_id = await client.send_push(
                token="ExponentPushToken[abc]", title="ALERT: Fire", body="Evacuate", data={"alertId": 1}
            )

        assert ticket_id == "ticket-7"
        message = push_cls.return_value.publish.call_args.args[0]
        assert message.to == "ExponentPushToken[abc]"
        assert message.data == {"alertId": 1}
        session = push_cls.call_args.kwargs["session"]
        assert session.headers["Authorization"] == "Bearer expo-token"

    @pytest.mark.asyncio
    async def test_ticket_error_raises_provider_error(self):
        ticket = MagicMock()
        ticket.validate_response.side_effect = PushTicketError(
            SimpleNamespace(message="DeviceNotRegistered")
        )
        with patch("herald.comm.expo.PushClient") as push_cls:
            push_cls.return_value.publish.return_value = ticket

            with pytest.raises(ProviderResponseError) as exc_info:
                await ExpoPushClient().send_push(token="ExpoPushToken[x]", title="t", body="b")

        assert "DeviceNotRegistered" in exc_info.value.message
