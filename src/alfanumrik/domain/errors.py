"""Exception hierarchy shared by every layer."""


class TrackerError(Exception):
    """Base class for all tracker failures."""


class InvalidInputError(TrackerError, ValueError):
    """A numeric input would push NaN or nonsense through the pipeline."""


class InvalidRecordError(InvalidInputError):
    """An activity entry failed validation before being appended."""


class StorageError(TrackerError):
    """Persisted state could not be read back."""


class ContentUnavailableError(TrackerError):
    """The content provider had nothing matching the requested descriptors."""
