class WeatherDishError(Exception):
    """Base class for errors raised by WeatherDish collaborators."""


class LoadError(WeatherDishError):
    """The recipe corpus could not be read, or it was empty."""


class NetworkDegraded(WeatherDishError):
    """A remote call (weather, accounts) failed; callers fall back or ask for a retry."""


class DuplicateError(WeatherDishError):
    """Registration against a username that already exists."""


class AuthMismatch(WeatherDishError):
    """Login credentials do not match a stored account."""


class InvalidCredentials(WeatherDishError):
    """Username or password cannot be used (wrong type, too long)."""


class MissingCredentials(InvalidCredentials):
    """Username or password was left empty."""
