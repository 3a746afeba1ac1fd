"""Exceptions raised by the wildfire package."""


class WildfireError(Exception):
    """Base class for every error raised by this package."""


class PreconditionError(WildfireError, ValueError):
    """A user action is missing something it needs, e.g. a selected token."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        # Localization key used when reporting the error to the user
        self.key = key


class DiceFormulaError(WildfireError, ValueError):
    """A dice expression could not be parsed."""
