class CollectionStoreError(Exception):
    """Base exception for collectionstore errors."""


class DirectoryNotFoundError(CollectionStoreError):
    """Raised when the data directory is missing or cannot be listed."""


class CollectionNotFoundError(CollectionStoreError):
    """Raised when a collection name does not match a loaded collection."""


class InvalidCollectionError(CollectionStoreError):
    """Raised when a collection file does not hold a valid list of records."""


class UnknownFormatError(CollectionStoreError):
    """Raised when a requested file format is not supported."""


class InconsistentFormatError(CollectionStoreError):
    """Raised when several files resolve to the same collection name."""
