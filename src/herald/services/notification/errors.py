"""Delivery failure taxonomy.

None of these escape a channel adapter: precondition failures become failed
outcomes, provider failures and missing providers become simulated sends.
"""


class DeliveryError(Exception):
    """Base class for per-attempt delivery problems."""

    reason = "delivery_error"


class PreconditionFailure(DeliveryError):
    """The recipient address is missing or malformed for the channel."""

    reason = "missing_or_invalid_address"


class ProviderUnavailable(DeliveryError):
    """No credentials are configured for the channel's provider."""

    reason = "provider_unavailable"


class ProviderFailure(DeliveryError):
    """The provider call raised, timed out or reported an error."""

    reason = "provider_failure"
