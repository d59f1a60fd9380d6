from aibs_informatics_core.exceptions import ApplicationException


class ConfigurationError(ApplicationException):
    """A required bucket name or database credential is not configured."""


class InvalidIdentifier(ApplicationException):
    """A table identifier contains characters outside ``[A-Za-z0-9_]``."""
