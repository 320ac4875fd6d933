"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold identity-resolution rules that span repositories
    and the protocol client.
    """

    pass
