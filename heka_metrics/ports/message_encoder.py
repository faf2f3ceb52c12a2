"""Message encoder port - serializes an outbound message to bytes."""

from abc import ABC, abstractmethod

from ..domain.models import MetricsMessage


class MessageEncoderPort(ABC):
    """Abstract interface for the wire envelope serializer."""

    @abstractmethod
    def encode(self, message: MetricsMessage) -> bytes:
        """Serialize a complete message.

        Raises:
            SerializationError: If the message cannot be serialized
        """
        ...
