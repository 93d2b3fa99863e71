"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold logic that spans accounts and identities rather
    than belonging to a single entity.
    """

    pass
