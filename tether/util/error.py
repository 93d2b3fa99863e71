"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Settings cannot support a component, e.g. missing OAuth credentials."""

    pass
