"""Recipient resolution from alert targeting."""

from typing import Any, Dict, Iterable, List

from ...config.logging import get_logger
from ...exceptions import NotFoundError
from .addresses import is_valid_address
from .models import (
    Channel,
    ExpoPushToken,
    OtherPushToken,
    PushTokenKind,
    Recipient,
    Targeting,
)

logger = get_logger(__name__)


def recipient_from_user(user: Any) -> Recipient:
    """Project a stored user onto the fields delivery needs."""
    stored_channels = user.channels or {}
    channels = {channel: bool(stored_channels.get(channel.value)) for channel in Channel}

    push_token = None
    if user.push_token:
        if user.push_token_kind == PushTokenKind.EXPO.value:
            push_token = ExpoPushToken(user.push_token)
        else:
            push_token = OtherPushToken(user.push_token)

    return Recipient(
        id=user.id,
        role=user.role,
        channels=channels,
        email=user.email,
        phone_number=user.phone_number,
        push_token=push_token,
    )


def is_eligible(recipient: Recipient, channel: Channel) -> bool:
    """A recipient gets a channel only if it is enabled and addressable."""
    return recipient.has_enabled(channel) and is_valid_address(
        channel, recipient.address_for(channel)
    )


class RecipientResolver:
    """Expands targeting into a de-duplicated recipient list."""

    def resolve(
        self, targeting: Targeting, all_users: Iterable[Any], strict: bool = True
    ) -> List[Recipient]:
        """
        Resolve targeting against the known users.

        Args:
            targeting: Alert targeting criteria
            all_users: Every user known to the system
            strict: Raise for unknown specific ids instead of skipping them

        Returns:
            Recipients ordered by id, each appearing once

        Raises:
            NotFoundError: If an explicitly targeted user id does not exist
        """
        users_by_id: Dict[int, Any] = {user.id: user for user in all_users}

        missing = [uid for uid in targeting.specific if uid not in users_by_id]
        if missing:
            if strict:
                raise NotFoundError("User", ", ".join(str(uid) for uid in missing))
            logger.warning("Skipping unknown targeted users", user_ids=missing)

        selected: Dict[int, Any] = {}

        if targeting.all:
            selected.update(users_by_id)

        if targeting.roles:
            roles = set(targeting.roles)
            selected.update(
                {uid: user for uid, user in users_by_id.items() if user.role in roles}
            )

        for uid in targeting.specific:
            if uid in users_by_id:
                selected[uid] = users_by_id[uid]

        recipients = [recipient_from_user(selected[uid]) for uid in sorted(selected)]

        logger.debug(
            "Recipients resolved",
            targeting=targeting.to_dict(),
            recipient_count=len(recipients),
        )
        return recipients
