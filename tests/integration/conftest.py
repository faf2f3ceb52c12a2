"""Localhost collectors for integration tests."""

import asyncio
from collections.abc import AsyncIterator

import msgpack
import pytest_asyncio


class TcpCollector:
    """TCP server decoding a msgpack stream from every client."""

    def __init__(self):
        self.messages: list[dict] = []
        self.connections = 0
        self.received = asyncio.Condition()
        self._writers: list[asyncio.StreamWriter] = []
        self._server: asyncio.Server | None = None

    @property
    def connect(self) -> str:
        assert self._server is not None
        host, port = self._server.sockets[0].getsockname()[:2]
        return f"tcp://{host}:{port}"

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)

    async def stop(self) -> None:
        self.drop_clients()
        assert self._server is not None
        self._server.close()
        await self._server.wait_closed()

    def drop_clients(self) -> None:
        """Close every accepted connection."""
        for writer in self._writers:
            writer.close()
        self._writers.clear()

    async def wait_for(self, count: int, timeout: float = 5.0) -> list[dict]:
        async with self.received:
            await asyncio.wait_for(
                self.received.wait_for(lambda: len(self.messages) >= count), timeout
            )
        return self.messages

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.connections += 1
        self._writers.append(writer)
        unpacker = msgpack.Unpacker(raw=False)
        while chunk := await reader.read(65536):
            unpacker.feed(chunk)
            decoded = list(unpacker)
            if decoded:
                async with self.received:
                    self.messages.extend(decoded)
                    self.received.notify_all()
        writer.close()


class UdpCollector(asyncio.DatagramProtocol):
    """UDP endpoint decoding one msgpack envelope per datagram."""

    def __init__(self):
        self.messages: list[dict] = []
        self.transport: asyncio.DatagramTransport | None = None

    def connection_made(self, transport) -> None:
        self.transport = transport

    def datagram_received(self, data: bytes, addr) -> None:
        self.messages.append(msgpack.unpackb(data, raw=False))

    @property
    def connect(self) -> str:
        assert self.transport is not None
        host, port = self.transport.get_extra_info("sockname")[:2]
        return f"udp://{host}:{port}"

    async def wait_for(self, count: int, timeout: float = 5.0) -> list[dict]:
        async def poll():
            while len(self.messages) < count:
                await asyncio.sleep(0.01)

        await asyncio.wait_for(poll(), timeout)
        return self.messages


@pytest_asyncio.fixture
async def tcp_collector() -> AsyncIterator[TcpCollector]:
    collector = TcpCollector()
    await collector.start()
    yield collector
    await collector.stop()


@pytest_asyncio.fixture
async def udp_collector() -> AsyncIterator[UdpCollector]:
    loop = asyncio.get_running_loop()
    transport, collector = await loop.create_datagram_endpoint(
        UdpCollector, local_addr=("127.0.0.1", 0)
    )
    yield collector
    transport.close()
