# ecotrack/errors.py


class EcoTrackError(Exception):
    """Base class for errors raised by the EcoTrack service."""


class InvalidActivityInput(EcoTrackError, ValueError):
    """A submitted activity field is missing, non-numeric or out of range."""


class ProfileNotFound(EcoTrackError):
    pass


class DuplicateAccount(EcoTrackError):
    """Username or email is already taken by another account."""


class WeatherUnavailable(EcoTrackError):
    pass
