from client.connection import Connection, connect, connection
from client.logger import LoggingAdapter, QueryLogger, StdOutLogger
from client.transport import RemoteQueryClient, hive_client, thrift_transport

__all__ = [
    "Connection",
    "connect",
    "connection",
    "LoggingAdapter",
    "QueryLogger",
    "StdOutLogger",
    "RemoteQueryClient",
    "hive_client",
    "thrift_transport",
]
