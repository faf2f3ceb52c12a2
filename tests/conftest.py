"""Pytest configuration and shared fixtures."""

from unittest.mock import Mock

import pytest

from heka_metrics.application.resilient_sender import ResilientSender
from heka_metrics.application.snapshot_encoder import SnapshotEncoder
from heka_metrics.domain.models import ProcessIdentity
from heka_metrics.ports.logger import LoggerPort
from tests.builders import FixedClock, ScriptedConnector, SequentialIds, StaticRegistry


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    return Mock(spec=LoggerPort)


@pytest.fixture
def identity():
    """Process identity with predictable values."""
    return ProcessIdentity(pid=4242, hostname="metrics-host", msg_type="app.metrics")


@pytest.fixture
def clock():
    """Clock frozen at a known instant."""
    return FixedClock()


@pytest.fixture
def ids():
    """Deterministic message id factory."""
    return SequentialIds()


@pytest.fixture
def encoder(identity, clock, ids, mock_logger):
    """Snapshot encoder with deterministic envelope fields."""
    return SnapshotEncoder(identity, clock=clock, id_factory=ids, logger=mock_logger)


@pytest.fixture
def registry():
    """Empty static registry."""
    return StaticRegistry()


@pytest.fixture
def connector():
    """Connector with no scripted failures."""
    return ScriptedConnector()


@pytest.fixture
def sender(connector, mock_logger):
    """Sender pointed at a TCP endpoint through the scripted connector."""
    return ResilientSender("tcp://collector.local:5565", connector=connector, logger=mock_logger)
