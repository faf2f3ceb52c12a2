"""Domain value objects following Domain-Driven Design principles."""

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

from .enums import TransportScheme
from .exceptions import ConfigError


class Endpoint(BaseModel):
    """Value object representing the collector address.

    Built from a ``scheme://host:port`` connection string where the scheme
    selects the transport.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    scheme: TransportScheme
    host: str = Field(..., min_length=1, description="Collector host name or address")
    port: int = Field(..., ge=1, le=65535, description="Collector port")

    @classmethod
    def parse(cls, connect: str) -> Endpoint:
        """Parse and validate a connection string.

        Args:
            connect: Connection string such as ``tcp://localhost:5565``

        Returns:
            The validated endpoint

        Raises:
            ConfigError: If the string is malformed or the scheme is not tcp/udp
        """
        if not isinstance(connect, str) or not connect.strip():
            raise ConfigError("Connection string must be a non-empty string", connect=str(connect))

        parts = urlsplit(connect.strip())
        try:
            scheme = TransportScheme(parts.scheme.lower())
        except ValueError:
            raise ConfigError(
                f"scheme: '{parts.scheme}' not supported, "
                "try 'tcp://<host>:<port>' or 'udp://<host>:<port>'",
                connect=connect,
            ) from None

        try:
            port = parts.port
        except ValueError as e:
            raise ConfigError(f"Invalid port in '{connect}': {e}", connect=connect) from e

        if not parts.hostname:
            raise ConfigError(f"Missing host in '{connect}'", connect=connect)
        if port is None or port == 0:
            raise ConfigError(f"Missing port in '{connect}'", connect=connect)
        if parts.path not in ("", "/") or parts.query or parts.fragment:
            raise ConfigError(
                f"Unexpected path or query in '{connect}', expected '{scheme.value}://<host>:<port>'",
                connect=connect,
            )

        return cls(scheme=scheme, host=parts.hostname, port=port)

    @property
    def address(self) -> tuple[str, int]:
        """Socket address tuple."""
        return (self.host, self.port)

    def __str__(self) -> str:
        """Connection string form."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme.value}://{host}:{self.port}"
