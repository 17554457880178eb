"""Channel address validation and push token classification."""

import re
from typing import Any, Optional

from .models import Channel, ExpoPushToken, OtherPushToken, PushToken

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
EXPO_TOKEN_PATTERN = re.compile(r"^Expo(nent)?PushToken\[[^\[\]\s]+\]$")
# FCM / APNs style opaque tokens
OTHER_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_:\-.]{32,4096}$")


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_PATTERN.match(value) is not None


def is_valid_phone_number(value: Optional[str]) -> bool:
    """E.164 only: leading '+', no separators."""
    return bool(value) and E164_PATTERN.match(value) is not None


def parse_push_token(raw: Optional[str]) -> Optional[PushToken]:
    """
    Classify a raw push token at registration time.

    Returns:
        ExpoPushToken or OtherPushToken, or None when the token matches
        neither recognized shape
    """
    if not raw:
        return None

    raw = raw.strip()
    if EXPO_TOKEN_PATTERN.match(raw):
        return ExpoPushToken(raw)
    if OTHER_TOKEN_PATTERN.match(raw):
        return OtherPushToken(raw)
    return None


def is_valid_push_token(value: Any) -> bool:
    return isinstance(value, (ExpoPushToken, OtherPushToken)) and bool(value.value)


def is_valid_address(channel: Channel, address: Any) -> bool:
    """Whether ``address`` is usable for ``channel``."""
    if channel is Channel.EMAIL:
        return isinstance(address, str) and is_valid_email(address)
    if channel is Channel.SMS:
        return isinstance(address, str) and is_valid_phone_number(address)
    if channel is Channel.PUSH:
        return is_valid_push_token(address)
    return False
