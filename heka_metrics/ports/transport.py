"""Transport ports for the outbound collector connection."""

from abc import ABC, abstractmethod

from ..domain.value_objects import Endpoint


class ConnectionPort(ABC):
    """An established outbound connection."""

    @abstractmethod
    async def send(self, data: bytes) -> None:
        """Transmit bytes over the connection.

        Raises:
            OSError: If the transmission fails
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the connection."""
        ...


class ConnectorPort(ABC):
    """Opens connections to a collector endpoint."""

    @abstractmethod
    async def connect(self, endpoint: Endpoint) -> ConnectionPort:
        """Establish a connection using the endpoint's transport.

        Raises:
            OSError: If the connection cannot be established
        """
        ...
