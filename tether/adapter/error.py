"""Adapter layer errors."""


class AdapterError(Exception):
    """Base error for calls to systems outside this service."""

    pass


class ProviderError(AdapterError):
    """An identity provider failed or returned something unusable.

    Surfaced to users only as ``error=auth_failed``.
    """

    pass
