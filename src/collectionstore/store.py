from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .exceptions import (
    CollectionNotFoundError,
    DirectoryNotFoundError,
    InconsistentFormatError,
    InvalidCollectionError,
    UnknownFormatError,
)
from .handlers import FileHandler, JsonHandler, YamlHandler
from .records import Invalid, Record, Result, Status, validate_record

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_OUTPUT_DIR = Path(__file__).resolve().parent / "tmp"

FORMAT_REGISTRY: Mapping[str, type[FileHandler]] = {
    "json": JsonHandler,
    ".json": JsonHandler,
    "yaml": YamlHandler,
    "yml": YamlHandler,
    ".yaml": YamlHandler,
    ".yml": YamlHandler,
}

EXTENSION_REGISTRY: Mapping[str, type[FileHandler]] = {
    suffix: handler_cls
    for handler_cls in (JsonHandler, YamlHandler)
    for suffix in handler_cls.extensions or (handler_cls.extension,)
}

_RECORD_LIST = TypeAdapter(List[Record])


def _resolve_handler(name: str) -> FileHandler:
    try:
        handler_cls = FORMAT_REGISTRY[name.lower()]
    except KeyError as exc:
        raise UnknownFormatError(f"Unsupported format '{name}'") from exc
    return handler_cls()


class StoreConfig(BaseModel):
    """Settings accepted by :meth:`CollectionStore.from_config`.

    Keys may be given either as ``data_dir``/``output_dir`` or in their
    camel-case form ``dataDir``/``outputDir``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    data_dir: Optional[Path] = Field(default=None, alias="dataDir")
    output_dir: Optional[Path] = Field(default=None, alias="outputDir")
    format: Optional[str] = None


@dataclass(frozen=True)
class _Source:
    handler: FileHandler
    suffix: str


class CollectionStore:
    """In-memory store of named record collections backed by a directory.

    Parameters
    ----------
    data_dir:
        Directory holding one file per collection. The file stem is the
        collection name. Defaults to the bundled ``data`` directory.
    output_dir:
        Directory :meth:`write` targets. Created on demand. Defaults to
        the ``tmp`` directory next to the bundled ``data`` directory.
    format:
        Optional handler name (``"json"``, ``"yaml"``) used for every file
        :meth:`write` produces. When omitted each collection is written in
        the format it was loaded from.

    Every file is read and validated during construction; the store never
    goes back to ``data_dir`` afterwards. Lookups raise on unknown
    collections while inserts report rejected records through
    :class:`Result`.
    """

    Status = Status
    StatusEnum = Status

    def __init__(
        self,
        data_dir: Path | str | None = None,
        output_dir: Path | str | None = None,
        *,
        format: str | None = None,
    ) -> None:
        self.data_dir = Path(data_dir if data_dir is not None else DEFAULT_DATA_DIR).expanduser()
        self.output_dir = Path(
            output_dir if output_dir is not None else DEFAULT_OUTPUT_DIR
        ).expanduser()
        self._format = _resolve_handler(format) if format is not None else None
        self._collections, self._sources = self._load()

    @classmethod
    def from_config(
        cls, config: StoreConfig | Mapping[str, Any] | None = None
    ) -> "CollectionStore":
        if config is None:
            config = StoreConfig()
        elif not isinstance(config, StoreConfig):
            config = StoreConfig.model_validate(config)
        return cls(config.data_dir, config.output_dir, format=config.format)

    # Queries -----------------------------------------------------------
    @property
    def collections(self) -> Tuple[str, ...]:
        return tuple(self._collections)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._collections

    def __repr__(self) -> str:
        return f"CollectionStore(data_dir={str(self.data_dir)!r}, collections={list(self._collections)!r})"

    def find(self, collection: str | None = None) -> List[Dict[str, Any]]:
        """Return a copy of every record in ``collection``, in insertion order.

        Each record is dumped into a fresh ``dict`` with its own ``titles``
        list, so callers may mutate the result freely.
        """
        records = self._get(collection)
        return [record.to_dict() for record in records]

    # Mutations ---------------------------------------------------------
    def create(self, collection: str, record: Any) -> Result:
        records = self._collections.get(collection) if isinstance(collection, str) else None
        if records is None:
            return self._reject(collection, f"unknown collection {collection!r}")
        outcome = validate_record(record, {existing.id for existing in records})
        if isinstance(outcome, Invalid):
            return self._reject(collection, outcome.reason)
        records.append(outcome.record)
        logger.debug("Created record %r in collection %r", outcome.record.id, collection)
        return Result(Status.OK)

    def add(self, collection: str, record_id: str, display_name: str) -> Result:
        return self.create(collection, {"_id": record_id, "titles": [display_name]})

    def write(self) -> List[Path]:
        """Serialize every collection into ``output_dir`` and return the paths."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for name, records in self._collections.items():
            source = self._sources[name]
            handler = self._format or source.handler
            suffix = handler.extension if self._format is not None else source.suffix
            target = self.output_dir / f"{name}{suffix}"
            handler.write(target, [record.to_dict() for record in records])
            written.append(target)
        logger.info("Wrote %d collection(s) to %s", len(written), self.output_dir)
        return written

    # Internal helpers --------------------------------------------------
    def _get(self, name: str | None) -> List[Record]:
        if name is None:
            raise CollectionNotFoundError("A collection name is required")
        try:
            return self._collections[name]
        except (KeyError, TypeError) as exc:
            raise CollectionNotFoundError(f"Unknown collection '{name}'") from exc

    def _reject(self, collection: Any, reason: str) -> Result:
        logger.debug("Rejected record for collection %r: %s", collection, reason)
        return Result(Status.ERROR, reason)

    def _load(self) -> Tuple[Dict[str, List[Record]], Dict[str, _Source]]:
        if not self.data_dir.is_dir():
            raise DirectoryNotFoundError(f"Data directory '{self.data_dir}' does not exist")
        try:
            paths = sorted(path for path in self.data_dir.iterdir() if path.is_file())
        except OSError as exc:
            raise DirectoryNotFoundError(f"Cannot read data directory '{self.data_dir}'") from exc

        collections: Dict[str, List[Record]] = {}
        sources: Dict[str, _Source] = {}
        for path in paths:
            handler_cls = EXTENSION_REGISTRY.get(path.suffix.lower())
            if handler_cls is None:
                logger.debug("Skipping '%s': unsupported extension", path.name)
                continue
            name = path.stem
            if name in sources:
                raise InconsistentFormatError(
                    f"Collection '{name}' is defined by more than one file in '{self.data_dir}'"
                )
            handler = handler_cls()
            collections[name] = self._read_collection(handler, path)
            sources[name] = _Source(handler=handler, suffix=path.suffix)
            logger.debug("Loaded %d record(s) into collection %r", len(collections[name]), name)
        return dict(sorted(collections.items())), sources

    @staticmethod
    def _read_collection(handler: FileHandler, path: Path) -> List[Record]:
        try:
            records = _RECORD_LIST.validate_python(handler.read(path))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise InvalidCollectionError(f"Cannot load collection from '{path}': {exc}") from exc
        seen: set[str] = set()
        for record in records:
            if record.id in seen:
                raise InvalidCollectionError(f"Duplicate _id {record.id!r} in '{path}'")
            seen.add(record.id)
        return records
