"""
File-backed record collections validated with Pydantic.

The public API centers around :class:`CollectionStore`, which loads a
directory of collection files into memory, guards inserts with
:func:`validate_record`, and writes the collections back out on demand.
"""

from .exceptions import (
    CollectionNotFoundError,
    CollectionStoreError,
    DirectoryNotFoundError,
    InconsistentFormatError,
    InvalidCollectionError,
    UnknownFormatError,
)
from .handlers import FileHandler
from .records import Invalid, Record, Result, Status, Valid, validate_record
from .store import CollectionStore, StoreConfig

__all__ = (
    "CollectionNotFoundError",
    "CollectionStore",
    "CollectionStoreError",
    "DirectoryNotFoundError",
    "FileHandler",
    "InconsistentFormatError",
    "Invalid",
    "InvalidCollectionError",
    "Record",
    "Result",
    "Status",
    "StoreConfig",
    "UnknownFormatError",
    "Valid",
    "validate_record",
)
