"""Tests for recipient resolution."""

import sys
from types import SimpleNamespace

import pytest

sys.path.append("src")

from herald.exceptions import NotFoundError
from herald.services.notification import (
    Channel,
    ExpoPushToken,
    OtherPushToken,
    RecipientResolver,
    Targeting,
    is_eligible,
)
from herald.services.notification.recipients import recipient_from_user

from conftest import make_recipient


def user(user_id, role="subscriber", **fields):
    defaults = {
        "email": f"u{user_id}@example.com",
        "channels": {"email": True, "sms": False, "push": False},
        "phone_number": None,
        "push_token": None,
        "push_token_kind": None,
    }
    defaults.update(fields)
    return SimpleNamespace(id=user_id, role=role, **defaults)


@pytest.fixture
def users():
    return [
        user(3, "admin"),
        user(1, "operator"),
        user(2, "subscriber"),
        user(4, "admin"),
    ]


class TestRecipientResolver:
    def test_all_selects_everyone_in_id_order(self, users):
        recipients = RecipientResolver().resolve(Targeting(all=True), users)
        assert [r.id for r in recipients] == [1, 2, 3, 4]

    def test_roles(self, users):
        recipients = RecipientResolver().resolve(Targeting(roles=("admin",)), users)
        assert [r.id for r in recipients] == [3, 4]

    def test_criteria_union_is_deduplicated(self, users):
        targeting = Targeting(roles=("admin", "operator"), specific=(3, 2))
        recipients = RecipientResolver().resolve(targeting, users)
        assert [r.id for r in recipients] == [1, 2, 3, 4]

    def test_all_plus_specific_does_not_duplicate(self, users):
        recipients = RecipientResolver().resolve(Targeting(all=True, specific=(1, 1)), users)
        assert len(recipients) == 4

    def test_all_against_no_users_is_empty(self):
        assert RecipientResolver().resolve(Targeting(all=True), []) == []

    def test_unmatched_role_is_empty(self, users):
        assert RecipientResolver().resolve(Targeting(roles=("nobody",)), users) == []

    def test_unknown_specific_user_raises(self, users):
        with pytest.raises(NotFoundError) as exc_info:
            RecipientResolver().resolve(Targeting(specific=(2, 99)), users)
        assert exc_info.value.resource == "User"
        assert exc_info.value.identifier == "99"

    def test_unknown_specific_user_skipped_when_not_strict(self, users):
        recipients = RecipientResolver().resolve(
            Targeting(specific=(2, 99)), users, strict=False
        )
        assert [r.id for r in recipients] == [2]


class TestTargeting:
    def test_from_dict_normalizes(self):
        targeting = Targeting.from_dict({"roles": ["admin", "admin"], "specific": ["5", 5]})
        assert targeting == Targeting(all=False, roles=("admin",), specific=(5,))

    def test_satisfiability(self):
        assert not Targeting().is_satisfiable
        assert not Targeting.from_dict(None).is_satisfiable
        assert Targeting(all=True).is_satisfiable
        assert Targeting(roles=("admin",)).is_satisfiable
        assert Targeting(specific=(1,)).is_satisfiable


class TestRecipientProjection:
    def test_push_token_kind_is_restored(self):
        expo = recipient_from_user(
            user(1, push_token="ExpoPushToken[a]", push_token_kind="expo")
        )
        other = recipient_from_user(user(2, push_token="x" * 40, push_token_kind="other"))

        assert expo.push_token == ExpoPushToken("ExpoPushToken[a]")
        assert other.push_token == OtherPushToken("x" * 40)

    def test_missing_channel_keys_are_disabled(self):
        recipient = recipient_from_user(user(1, channels={"sms": True}))
        assert recipient.channels == {
            Channel.EMAIL: False,
            Channel.SMS: True,
            Channel.PUSH: False,
        }


class TestEligibility:
    def test_enabled_with_valid_address(self):
        recipient = make_recipient(1, email="a@example.com")
        assert is_eligible(recipient, Channel.EMAIL)

    def test_disabled_channel(self):
        recipient = make_recipient(1, email="a@example.com", enabled=[])
        assert not is_eligible(recipient, Channel.EMAIL)

    def test_enabled_without_address(self):
        recipient = make_recipient(1, enabled=["sms"])
        assert not is_eligible(recipient, Channel.SMS)

    def test_enabled_with_malformed_address(self):
        recipient = make_recipient(1, sms="555-0100")
        assert not is_eligible(recipient, Channel.SMS)
