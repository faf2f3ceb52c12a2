"""Message encoders for MessagePack and JSON wire formats."""

import json
from typing import Any

import msgpack

from ..domain.exceptions import SerializationError
from ..domain.models import MetricsMessage
from ..ports.message_encoder import MessageEncoderPort


def message_to_dict(message: MetricsMessage, binary_uuid: bool = True) -> dict[str, Any]:
    """Flatten a message into the envelope structure sent on the wire."""
    return {
        "timestamp": message.timestamp,
        "uuid": message.uuid.bytes if binary_uuid else str(message.uuid),
        "logger": message.logger,
        "type": message.type,
        "pid": message.pid,
        "severity": message.severity,
        "hostname": message.hostname,
        "payload": message.payload,
        "fields": [
            {"name": field.name, "value_type": field.value_type.value, "value": field.value}
            for field in message.fields
        ],
    }


def serialize_to_msgpack(message: MetricsMessage) -> bytes:
    """Serialize a message to MessagePack bytes."""
    try:
        return bytes(msgpack.packb(message_to_dict(message), use_bin_type=True))
    except Exception as e:
        raise SerializationError(f"Failed to serialize to msgpack: {e}") from e


def serialize_to_json(message: MetricsMessage) -> bytes:
    """Serialize a message to a newline-terminated JSON document."""
    try:
        document = json.dumps(message_to_dict(message, binary_uuid=False), allow_nan=False)
        return (document + "\n").encode()
    except Exception as e:
        raise SerializationError(f"Failed to serialize to JSON: {e}") from e


def deserialize_from_msgpack(data: bytes) -> dict[str, Any]:
    """Decode a single MessagePack envelope, mainly for collectors and tests."""
    try:
        return dict(msgpack.unpackb(data, raw=False))
    except Exception as e:
        raise SerializationError(f"Failed to deserialize from msgpack: {e}") from e


def deserialize_from_json(data: bytes) -> dict[str, Any]:
    """Decode a single JSON envelope."""
    try:
        json_str = data.decode() if isinstance(data, bytes) else data
        if not json_str or json_str.isspace():
            raise SerializationError("Empty or whitespace-only JSON data")
        return dict(json.loads(json_str))
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON format: {e}") from e
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(f"Failed to deserialize from JSON: {e}") from e


class MsgpackMessageEncoder(MessageEncoderPort):
    """MessagePack encoder.

    MessagePack documents are self-delimiting, so a stream of encoded
    messages can be split again with ``msgpack.Unpacker``.
    """

    def encode(self, message: MetricsMessage) -> bytes:
        """Serialize using MessagePack."""
        return serialize_to_msgpack(message)


class JsonMessageEncoder(MessageEncoderPort):
    """Newline-delimited JSON encoder."""

    def encode(self, message: MetricsMessage) -> bytes:
        """Serialize using JSON."""
        return serialize_to_json(message)


def create_message_encoder(use_msgpack: bool = True) -> MessageEncoderPort:
    """Create a message encoder based on configuration.

    Args:
        use_msgpack: Whether to use MessagePack (True) or JSON (False)
    """
    if use_msgpack:
        return MsgpackMessageEncoder()
    return JsonMessageEncoder()
