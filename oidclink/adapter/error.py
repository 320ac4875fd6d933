"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class SessionStoreError(AdapterError):
    """Session storage error (e.g. a secret that cannot be decrypted)."""

    pass
