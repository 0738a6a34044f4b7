"""Record schema and the validation step that guards every insert."""

from __future__ import annotations

from collections.abc import Container, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class Record(BaseModel):
    """A single entry of a collection.

    Validation is strict: ``_id`` must already be a non-empty ``str`` and
    ``titles`` a ``list`` of ``str``. Only the ``_id`` key is accepted for
    the identifier; unknown fields, ``id`` included, are dropped.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    id: str = Field(alias="_id", min_length=1)
    titles: list[str]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class Status(str, Enum):
    OK = "OK"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Result:
    """Outcome of ``create``/``add``; callers branch on ``status``."""

    status: Status
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is Status.OK


@dataclass(frozen=True)
class Valid:
    record: Record


@dataclass(frozen=True)
class Invalid:
    reason: str


Validation = Union[Valid, Invalid]


def validate_record(candidate: Any, taken_ids: Container[str] = ()) -> Validation:
    """Check ``candidate`` against the record schema and ``taken_ids``.

    Checks run in order: ``_id`` well-formed, ``_id`` unused, ``titles``
    well-formed. The first failing check decides the reason.
    """
    if not isinstance(candidate, Mapping):
        return Invalid(f"record must be a mapping, got {type(candidate).__name__}")

    record: Record | None = None
    errors: list[Any] = []
    try:
        record = Record.model_validate(dict(candidate))
    except ValidationError as exc:
        errors = exc.errors()

    id_errors = [error for error in errors if error["loc"][:1] == ("_id",)]
    if id_errors:
        return Invalid(_describe(id_errors[0]))
    record_id = record.id if record is not None else candidate.get("_id")
    if record_id in taken_ids:
        return Invalid(f"_id: {record_id!r} already exists")
    if errors or record is None:
        return Invalid(_describe(errors[0]) if errors else "record failed validation")
    return Valid(record)


def _describe(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"]) or "record"
    return f"{location}: {error['msg']}"
