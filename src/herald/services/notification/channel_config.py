"""Explicit per-channel configuration handed to each adapter."""

from dataclasses import dataclass
from typing import Optional

from ...config.settings import Settings


@dataclass(frozen=True)
class DeliveryTiming:
    """Bounds shared by all adapters."""

    timeout_seconds: float = 5.0
    simulation_delay_seconds: float = 0.1


@dataclass(frozen=True)
class EmailChannelConfig:
    api_key: Optional[str] = None
    from_email: str = "alerts@herald.local"
    timing: DeliveryTiming = DeliveryTiming()

    @property
    def is_live(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class SmsChannelConfig:
    account_sid: Optional[str] = None
    auth_token: Optional[str] = None
    from_number: Optional[str] = None
    timing: DeliveryTiming = DeliveryTiming()

    @property
    def is_live(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)


@dataclass(frozen=True)
class PushChannelConfig:
    enabled: bool = False
    access_token: Optional[str] = None
    timing: DeliveryTiming = DeliveryTiming()

    @property
    def is_live(self) -> bool:
        # Expo accepts unauthenticated sends; the access token is optional
        return self.enabled


@dataclass(frozen=True)
class ChannelSettings:
    """Configuration for all three channels."""

    email: EmailChannelConfig
    sms: SmsChannelConfig
    push: PushChannelConfig

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChannelSettings":
        timing = DeliveryTiming(
            timeout_seconds=settings.channel_send_timeout_seconds,
            simulation_delay_seconds=settings.simulation_delay_seconds,
        )
        return cls(
            email=EmailChannelConfig(
                api_key=settings.sendgrid_api_key,
                from_email=settings.sendgrid_from_email,
                timing=timing,
            ),
            sms=SmsChannelConfig(
                account_sid=settings.twilio_account_sid,
                auth_token=settings.twilio_auth_token,
                from_number=settings.twilio_phone_number,
                timing=timing,
            ),
            push=PushChannelConfig(
                enabled=settings.expo_push_enabled,
                access_token=settings.expo_access_token,
                timing=timing,
            ),
        )
