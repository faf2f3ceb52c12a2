"""Domain models using Pydantic for validation."""

from __future__ import annotations

import math
import os
import socket
from uuid import UUID, uuid4

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .enums import FieldValueType
from .exceptions import FieldEncodingError

LOGGER_LABEL = "py-metrics"
DEFAULT_SEVERITY = 100
UNKNOWN_HOSTNAME = "<no hostname>"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class MessageField(BaseModel):
    """A single named numeric field of an outbound message."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    name: str = Field(..., min_length=1, description="Dotted field name")
    value_type: FieldValueType
    value: int | float

    @classmethod
    def integer(cls, name: str, value: object) -> MessageField:
        """Create an int64 field.

        Raises:
            FieldEncodingError: If the value is not an integer or overflows int64
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise FieldEncodingError(
                f"Field '{name}' expects an integer, got {type(value).__name__}",
                field_name=name,
            )
        if not INT64_MIN <= value <= INT64_MAX:
            raise FieldEncodingError(f"Field '{name}' value {value} overflows int64", field_name=name)
        return cls(name=name, value_type=FieldValueType.INTEGER, value=value)

    @classmethod
    def double(cls, name: str, value: object) -> MessageField:
        """Create a float64 field.

        Raises:
            FieldEncodingError: If the value is not a finite real number
        """
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise FieldEncodingError(
                f"Field '{name}' expects a float, got {type(value).__name__}",
                field_name=name,
            )
        try:
            number = float(value)
        except OverflowError:
            number = math.inf
        if not math.isfinite(number):
            raise FieldEncodingError(f"Field '{name}' value {value} is not finite", field_name=name)
        return cls(name=name, value_type=FieldValueType.DOUBLE, value=number)


class ProcessIdentity(BaseModel):
    """Identity fields stamped on every message."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    pid: int = Field(..., ge=0, le=2**31 - 1, description="Process id (int32)")
    hostname: str = Field(default=UNKNOWN_HOSTNAME, description="Host the process runs on")
    msg_type: str = Field(..., description="Caller supplied message type label")

    @classmethod
    def current(cls, msg_type: str) -> ProcessIdentity:
        """Identity of the running process."""
        try:
            hostname = socket.gethostname() or UNKNOWN_HOSTNAME
        except OSError:
            hostname = UNKNOWN_HOSTNAME
        return cls(pid=os.getpid(), hostname=hostname, msg_type=msg_type)


class MetricsMessage(BaseModel):
    """Envelope plus flat numeric fields for one flush cycle."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    timestamp: int = Field(..., description="Nanoseconds since the epoch at encode time")
    uuid: UUID = Field(default_factory=uuid4, description="Unique message id")
    logger: str = Field(default=LOGGER_LABEL)
    type: str = Field(default="")
    pid: int = Field(default=0, ge=0, le=2**31 - 1)
    severity: int = Field(default=DEFAULT_SEVERITY)
    hostname: str = Field(default=UNKNOWN_HOSTNAME)
    payload: str = Field(default="")
    fields: list[MessageField] = Field(default_factory=list)

    _field_names: set[str] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        self._field_names = {field.name for field in self.fields}

    def add_field(self, field: MessageField) -> None:
        """Append a field, rejecting duplicate names.

        Fields should only be added through this method; the name index is
        rebuilt if ``fields`` was changed directly.

        Raises:
            FieldEncodingError: If a field with the same name is already present
        """
        if len(self._field_names) != len(self.fields):
            self._field_names = {existing.name for existing in self.fields}
        if field.name in self._field_names:
            raise FieldEncodingError(f"Duplicate field '{field.name}'", field_name=field.name)
        self.fields.append(field)
        self._field_names.add(field.name)

    def field_map(self) -> dict[str, int | float]:
        """Field values keyed by name."""
        return {field.name: field.value for field in self.fields}
