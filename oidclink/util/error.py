"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Missing or inconsistent issuer / plugin configuration.

    Raised before an authentication attempt starts, never converted into a
    failed login result.
    """

    pass
