"""Metrics registry port.

The registry is owned by the embedding application. The exporter only
reads it, once per flush cycle.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ..domain.metrics import Metric


class MetricsRegistryPort(ABC):
    """Read-only view of a metrics registry."""

    @abstractmethod
    def each(self) -> Iterable[tuple[str, Metric]]:
        """Iterate over ``(name, metric)`` pairs.

        Names are unique within the registry. No ordering is guaranteed.
        Each metric is a point-in-time snapshot variant.
        """
        ...
