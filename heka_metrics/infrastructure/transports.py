"""Asyncio TCP and UDP transports for the collector connection."""

from __future__ import annotations

import asyncio
import contextlib

from ..domain.enums import TransportScheme
from ..domain.value_objects import Endpoint
from ..ports.transport import ConnectionPort, ConnectorPort


class TcpConnection(ConnectionPort):
    """Stream connection to a TCP collector."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self._reader = reader
        self._writer = writer

    async def send(self, data: bytes) -> None:
        """Write the bytes and wait for the transport buffer to drain."""
        # The collector never writes back, so EOF means the peer went away.
        if self._writer.is_closing() or self._reader.at_eof():
            raise ConnectionResetError("Connection closed by peer")
        self._writer.write(data)
        await self._writer.drain()

    async def close(self) -> None:
        """Close the stream, ignoring errors from an already broken socket."""
        self._writer.close()
        with contextlib.suppress(OSError):
            await self._writer.wait_closed()


class _DatagramProtocol(asyncio.DatagramProtocol):
    """Records asynchronous socket errors so the next send can report them."""

    def __init__(self) -> None:
        self.error: Exception | None = None
        self.closed = False

    def error_received(self, exc: Exception) -> None:
        self.error = exc

    def connection_lost(self, exc: Exception | None) -> None:
        self.closed = True
        if exc is not None:
            self.error = exc


class UdpConnection(ConnectionPort):
    """Connected datagram socket to a UDP collector.

    Each send is a single datagram, so a message must fit in one.
    """

    def __init__(self, transport: asyncio.DatagramTransport, protocol: _DatagramProtocol):
        self._transport = transport
        self._protocol = protocol

    async def send(self, data: bytes) -> None:
        """Send one datagram.

        Socket errors arrive asynchronously, so an error reported here
        (for example an ICMP port unreachable) belongs to an earlier
        datagram. It is raised before ``data`` is written, leaving ``data``
        unsent; the caller's reconnect-and-resend then delivers it over a
        fresh socket that carries no stale error.
        """
        if self._protocol.error is not None:
            error, self._protocol.error = self._protocol.error, None
            raise error
        if self._protocol.closed or self._transport.is_closing():
            raise ConnectionResetError("Datagram socket closed")
        self._transport.sendto(data)

    async def close(self) -> None:
        """Close the datagram socket."""
        self._transport.close()


class AsyncioConnector(ConnectorPort):
    """Opens TCP or UDP connections on the running event loop."""

    def __init__(self, connect_timeout: float = 5.0):
        """Initialize the connector.

        Args:
            connect_timeout: Seconds to wait for a connection before giving up
        """
        if connect_timeout <= 0:
            raise ValueError("Connect timeout must be positive")
        self._connect_timeout = connect_timeout

    async def connect(self, endpoint: Endpoint) -> ConnectionPort:
        """Connect using the endpoint's transport scheme."""
        if endpoint.scheme is TransportScheme.TCP:
            return await asyncio.wait_for(self._open_tcp(endpoint), timeout=self._connect_timeout)
        return await asyncio.wait_for(self._open_udp(endpoint), timeout=self._connect_timeout)

    async def _open_tcp(self, endpoint: Endpoint) -> TcpConnection:
        reader, writer = await asyncio.open_connection(endpoint.host, endpoint.port)
        return TcpConnection(reader, writer)

    async def _open_udp(self, endpoint: Endpoint) -> UdpConnection:
        loop = asyncio.get_running_loop()
        transport, protocol = await loop.create_datagram_endpoint(
            _DatagramProtocol, remote_addr=endpoint.address
        )
        return UdpConnection(transport, protocol)
