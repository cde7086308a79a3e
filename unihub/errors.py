# unihub/errors.py


class UniHubError(Exception):
    """Base class for errors raised by the portal core."""


class StorageCorruption(UniHubError):
    """A persisted value could not be decoded. Never leaves the RecordStore."""


class ValidationError(UniHubError, ValueError):
    """Invalid arguments passed to a NotificationBus operation."""


class ResolutionFailure(UniHubError):
    """Resolving an assistant query failed or timed out."""
