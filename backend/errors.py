# errors.py


class InfluencerManagerError(Exception):
    """Base class for errors surfaced to the API boundary."""


class DataProcessingError(InfluencerManagerError):
    """A collection handed to a repository is malformed (missing list, empty identity key)."""


class AuthenticationError(InfluencerManagerError):
    """Bad credentials, unknown or inactive account, or empty input."""
