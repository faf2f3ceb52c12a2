"""Configuration objects for the exporter."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.exceptions import ConfigError
from ..domain.value_objects import Endpoint


class ExporterConfig(BaseModel):
    """Strongly-typed configuration for a metrics exporter.

    Encapsulates the collector address, the message type label and the
    flush cadence, validated when the config is built.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        strict=True,
        validate_assignment=True,
    )

    connect: str = Field(
        ...,
        min_length=1,
        description="Collector address, 'tcp://<host>:<port>' or 'udp://<host>:<port>'",
    )
    msg_type: str = Field(
        ...,
        description="Type label attached to every outbound message",
    )
    interval_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Seconds between flush cycles",
    )
    connect_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for a connection to the collector",
    )
    use_msgpack: bool = Field(
        default=True,
        description="Encode messages with MessagePack (True) or JSON (False)",
    )

    @field_validator("connect")
    @classmethod
    def validate_connect(cls, v: str) -> str:
        """Validate the connection string scheme, host and port."""
        try:
            Endpoint.parse(v)
        except ConfigError as e:
            raise ValueError(e.message) from e
        return v

    @property
    def endpoint(self) -> Endpoint:
        """Parsed collector endpoint."""
        return Endpoint.parse(self.connect)
