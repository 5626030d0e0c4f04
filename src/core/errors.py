from thrift.transport.TTransport import TTransportException

# Transport failures surface exactly as thrift raises them.
TransportError = TTransportException


class HiveClientError(Exception):
    """Base exception for errors raised by the Hive client itself."""

    pass


class SchemaMismatchError(HiveClientError):
    """
    Raised when a row does not have as many values as its schema has columns.
    Attributes:
        expected (int): Number of columns in the schema.
        actual (int): Number of values in the offending row.
    """

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Row has {actual} values but schema has {expected} columns")
        self.expected = expected
        self.actual = actual


class InvalidArgumentError(HiveClientError, ValueError):
    """Raised when an argument is rejected before anything is sent."""

    pass


class ConnectionStateError(HiveClientError):
    """Raised when an operation does not fit the connection's open/closed state."""

    pass
