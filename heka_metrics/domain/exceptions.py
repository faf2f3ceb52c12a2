"""Domain-specific exceptions for the metrics exporter."""


class HekaMetricsError(Exception):
    """Base exception for all heka-metrics errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(HekaMetricsError):
    """Invalid exporter configuration, raised at construction time."""

    def __init__(self, message: str, connect: str | None = None):
        super().__init__(message)
        self.connect = connect
        if connect is not None:
            self.details["connect"] = connect


class FieldEncodingError(HekaMetricsError):
    """A single message field could not be represented."""

    def __init__(self, message: str, field_name: str | None = None):
        super().__init__(message)
        self.field_name = field_name
        if field_name:
            self.details["field"] = field_name


class SerializationError(HekaMetricsError):
    """The message encoder could not produce bytes for a message."""

    pass


class TransportError(HekaMetricsError):
    """Network transport errors."""

    def __init__(self, message: str, endpoint: str | None = None):
        super().__init__(message)
        self.endpoint = endpoint
        if endpoint:
            self.details["endpoint"] = endpoint


class ConnectError(TransportError):
    """Connection to the collector could not be established."""

    pass


class SendError(TransportError):
    """Message transmission failed, including the single retry."""

    pass
