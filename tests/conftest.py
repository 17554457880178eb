"""Shared test configuration and fixtures."""

import os
import sys
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, patch

import pytest

sys.path.append("src")

from herald.config.settings import get_settings
from herald.events import EventBus, set_event_bus
from herald.ormdb.database import create_tables, get_session_sync, reset_engine
from herald.ormdb.repositories import UserRepository
from herald.realtime.hub import set_realtime_hub
from herald.services.notification import (
    Channel,
    ChannelOutcome,
    ExpoPushToken,
    OtherPushToken,
    Provider,
    Recipient,
)

TEST_AUTH_TOKEN = "test_endpoint_token"

TEST_ENV = {
    "ENVIRONMENT": "testing",
    "DATABASE_URL": "sqlite://",
    "ENDPOINT_AUTH_TOKEN": TEST_AUTH_TOKEN,
    "SIMULATION_DELAY_SECONDS": "0",
    "CHANNEL_SEND_TIMEOUT_SECONDS": "1",
    "LOG_FILE_ENABLED": "false",
    # No provider credentials: every channel runs in simulation mode
    "SENDGRID_API_KEY": "",
    "TWILIO_ACCOUNT_SID": "",
    "TWILIO_AUTH_TOKEN": "",
    "TWILIO_PHONE_NUMBER": "",
    "EXPO_PUSH_ENABLED": "false",
}


@pytest.fixture(autouse=True)
def test_env():
    """Isolated settings, in-memory database and fresh event plumbing per test."""
    with patch.dict(os.environ, TEST_ENV):
        get_settings.cache_clear()
        reset_engine()
        create_tables()
        set_event_bus(None)
        set_realtime_hub(None)

        yield TEST_ENV

        reset_engine()
        get_settings.cache_clear()
        set_event_bus(None)
        set_realtime_hub(None)


@pytest.fixture
def db_session():
    """Session bound to the per-test in-memory database."""
    session = get_session_sync()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session):
    """Factory creating stored users with sensible defaults."""
    counter = {"n": 0}

    def _make_user(
        role: str = "subscriber",
        channels: Optional[Dict[str, bool]] = None,
        phone_number: Optional[str] = None,
        push_token: Optional[str] = None,
        push_token_kind: Optional[str] = None,
        **overrides: Any,
    ):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "username": f"user{n}",
            "email": f"user{n}@example.com",
            "role": role,
            "channels": channels or {"email": True, "sms": False, "push": False},
            "phone_number": phone_number,
            "push_token": push_token,
            "push_token_kind": push_token_kind,
        }
        fields.update(overrides)
        return UserRepository(db_session).create_user(**fields)

    return _make_user


@pytest.fixture
def mock_event_bus():
    """Event bus whose publish is recorded instead of executed."""
    bus = EventBus("test")
    bus.publish = AsyncMock(return_value={"handlers_executed": 0})
    return bus


def make_recipient(
    recipient_id: int,
    role: str = "subscriber",
    email: Optional[str] = None,
    sms: Optional[str] = None,
    push: Optional[str] = None,
    enabled: Optional[List[str]] = None,
) -> Recipient:
    """Build a Recipient; channels default to enabled wherever an address is given."""
    if enabled is None:
        enabled = [
            name for name, value in (("email", email), ("sms", sms), ("push", push)) if value
        ]
    push_token = None
    if push:
        push_token = ExpoPushToken(push) if push.startswith("Expo") else OtherPushToken(push)
    return Recipient(
        id=recipient_id,
        role=role,
        channels={channel: channel.value in enabled for channel in Channel},
        email=email,
        phone_number=sms,
        push_token=push_token,
    )


class RecordingAdapter:
    """Channel adapter double that records every call."""

    def __init__(self, outcome: Optional[ChannelOutcome] = None, error: Exception = None):
        self.outcome = outcome or ChannelOutcome(success=True, provider=Provider.SIMULATED)
        self.error = error
        self.calls = []
        self.is_live = False

    async def send(self, address, message, metadata=None):
        self.calls.append((address, message, metadata))
        if self.error is not None:
            raise self.error
        return self.outcome
