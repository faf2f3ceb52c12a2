"""Tests for exporter wiring."""

from unittest.mock import Mock

import pytest

from heka_metrics.application.exporter import MetricsExporter
from heka_metrics.domain.enums import SenderState, TransportScheme
from heka_metrics.infrastructure.bootstrap import create_exporter
from heka_metrics.infrastructure.config import ExporterConfig
from heka_metrics.infrastructure.in_memory_registry import InMemoryRegistry
from heka_metrics.infrastructure.serialization import JsonMessageEncoder, MsgpackMessageEncoder
from heka_metrics.infrastructure.transports import AsyncioConnector
from heka_metrics.ports.logger import LoggerPort
from tests.builders import FixedClock, SequentialIds


@pytest.fixture
def config():
    return ExporterConfig(connect="udp://127.0.0.1:5566", msg_type="app.metrics")


class TestCreateExporter:
    """Test cases for create_exporter."""

    def test_builds_idle_exporter(self, config):
        """Test the exporter is built but not connected."""
        exporter = create_exporter(config, logger=Mock(spec=LoggerPort))

        assert isinstance(exporter, MetricsExporter)
        assert not exporter.is_running
        assert exporter.sender.state is SenderState.DISCONNECTED
        assert exporter.sender.endpoint.scheme is TransportScheme.UDP
        assert isinstance(exporter.sender._connector, AsyncioConnector)

    def test_serializer_follows_config(self, config):
        """Test the wire format is chosen from config."""
        msgpack_exporter = create_exporter(config, logger=Mock(spec=LoggerPort))
        json_config = config.model_copy(update={"use_msgpack": False})
        json_exporter = create_exporter(json_config, logger=Mock(spec=LoggerPort))

        assert isinstance(msgpack_exporter._serializer, MsgpackMessageEncoder)
        assert isinstance(json_exporter._serializer, JsonMessageEncoder)

    def test_identity_uses_msg_type(self, config):
        """Test the process identity carries the configured type label."""
        exporter = create_exporter(
            config, logger=Mock(spec=LoggerPort), clock=FixedClock(), id_factory=SequentialIds()
        )

        message = exporter._encoder.encode(InMemoryRegistry())
        assert message.type == "app.metrics"
        assert message.timestamp == FixedClock().now_ns()
        assert message.pid > 0
        assert message.hostname
