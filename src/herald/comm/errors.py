"""Errors raised by hosted provider clients."""

from typing import Optional

from ..exceptions import ExternalServiceError


class ProviderResponseError(ExternalServiceError):
    """A hosted provider rejected a request or answered with an error."""

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        super().__init__(provider, f"{message} (status={status})" if status else message)
        self.provider = provider
        self.status = status
