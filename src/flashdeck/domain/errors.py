"""Exception hierarchy shared by every layer."""


class FlashdeckError(Exception):
    """Base class for all flashdeck errors."""


class ConfigurationError(FlashdeckError):
    """A required credential or session parameter is missing or malformed."""


class StorageError(FlashdeckError, IOError):
    """The persistence gateway could not read or write a blob."""


class BlobNotFoundError(StorageError):
    """The requested blob key does not exist yet."""

    def __init__(self, key: str):
        super().__init__(f"Blob '{key}' not found")
        self.key = key


class CorruptCollectionError(StorageError):
    """The stored blob exists but does not decode into a card collection."""


class NoCardSelectedError(FlashdeckError):
    """An operation needing the current card was called with nothing selected."""
