"""Resilient sender - one collector connection with a single resend.

The sender is either disconnected or connected. A failed transmit drops
the connection and triggers exactly one reconnect-and-resend, so a call to
``send`` makes at most two connection attempts and two transmit attempts
before giving up for the current flush cycle.
"""

from __future__ import annotations

import contextlib

from ..domain.enums import SenderState
from ..domain.exceptions import ConnectError, SendError
from ..domain.value_objects import Endpoint
from ..ports.logger import LoggerPort
from ..ports.transport import ConnectionPort, ConnectorPort


class ResilientSender:
    """Owns the outbound connection and its reconnect policy.

    Not safe for concurrent ``send`` calls; one flush loop drives one sender.
    """

    def __init__(
        self,
        connect: str | Endpoint,
        connector: ConnectorPort | None = None,
        logger: LoggerPort | None = None,
    ) -> None:
        """Initialize the sender without connecting.

        Args:
            connect: ``tcp://host:port`` / ``udp://host:port`` or a parsed endpoint
            connector: Opens connections; defaults to the asyncio connector
            logger: Logger for connection events

        Raises:
            ConfigError: If the connection string is invalid
        """
        self._endpoint = connect if isinstance(connect, Endpoint) else Endpoint.parse(connect)
        self._connector = connector or self._create_default_connector()
        self._logger = logger or self._create_default_logger()
        self._connection: ConnectionPort | None = None

    def _create_default_connector(self) -> ConnectorPort:
        from ..infrastructure.transports import AsyncioConnector

        return AsyncioConnector()

    def _create_default_logger(self) -> LoggerPort:
        from ..infrastructure.simple_logger import SimpleLogger

        return SimpleLogger()

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def state(self) -> SenderState:
        if self._connection is None:
            return SenderState.DISCONNECTED
        return SenderState.CONNECTED

    async def send(self, data: bytes) -> None:
        """Transmit ``data``, reconnecting and resending once on failure.

        Raises:
            ConnectError: If a connection could not be established
            SendError: If the resend over a fresh connection also failed
        """
        if self._connection is None:
            await self._reconnect()

        try:
            await self._transmit(data)
            return
        except OSError as e:
            self._logger.warning(
                f"Send failed, reconnecting: {e}",
                endpoint=str(self._endpoint),
            )

        await self._reconnect()
        try:
            await self._transmit(data)
        except OSError as e:
            await self._drop_connection()
            raise SendError(
                f"Failed to send message to {self._endpoint}: {e}",
                endpoint=str(self._endpoint),
            ) from e

    async def close(self) -> None:
        """Close the connection if one is open."""
        if self._connection is not None:
            self._logger.debug("Closing connection", endpoint=str(self._endpoint))
        await self._drop_connection()

    async def _transmit(self, data: bytes) -> None:
        assert self._connection is not None
        await self._connection.send(data)

    async def _reconnect(self) -> None:
        await self._drop_connection()

        self._logger.info("Connecting", endpoint=str(self._endpoint))
        try:
            self._connection = await self._connector.connect(self._endpoint)
        except OSError as e:
            raise ConnectError(
                f"Failed to connect to {self._endpoint}: {e}",
                endpoint=str(self._endpoint),
            ) from e

    async def _drop_connection(self) -> None:
        connection, self._connection = self._connection, None
        if connection is not None:
            with contextlib.suppress(Exception):
                await connection.close()
