from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import orjson
import yaml


class FileHandler(ABC):
    """Abstract interface for translating between files and lists of records."""

    extension: str
    extensions: tuple[str, ...] | None = None

    @abstractmethod
    def read(self, path: Path) -> list[Any]:
        """Read the file and return the raw list of records it holds."""

    @abstractmethod
    def write(self, path: Path, records: Sequence[Mapping[str, Any]]) -> None:
        """Persist a list of records to disk."""


class JsonHandler(FileHandler):
    extension = ".json"
    extensions = (".json",)

    def read(self, path: Path) -> list[Any]:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        if not isinstance(payload, list):
            raise ValueError(f"JSON file {path} did not produce a list")
        return payload

    def write(self, path: Path, records: Sequence[Mapping[str, Any]]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as fh:
            fh.write(orjson.dumps([dict(record) for record in records], option=orjson.OPT_INDENT_2))
            fh.write(b"\n")


class YamlHandler(FileHandler):
    extension = ".yaml"
    extensions = (".yaml", ".yml")

    def read(self, path: Path) -> list[Any]:
        with path.open("r", encoding="utf-8") as fh:
            payload = yaml.safe_load(fh) or []
        if not isinstance(payload, list):
            raise ValueError(f"YAML file {path} did not produce a list")
        return payload

    def write(self, path: Path, records: Sequence[Mapping[str, Any]]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            yaml.safe_dump(
                [dict(record) for record in records],
                fh,
                allow_unicode=True,
                sort_keys=False,
            )
