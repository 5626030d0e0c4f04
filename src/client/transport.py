import logging
from typing import Any, Callable, List, Protocol, Tuple

from thrift.protocol import TBinaryProtocol
from thrift.transport import TSocket, TTransport

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def open(self) -> None: ...

    def close(self) -> None: ...


class RemoteQueryClient(Protocol):
    """The calls a Connection makes on the generated Hive service client."""

    def execute(self, query: str) -> None: ...

    def fetchOne(self) -> Any: ...

    def fetchN(self, numRows: int) -> List[Any]: ...

    def fetchAll(self) -> List[Any]: ...

    def getSchema(self) -> Any: ...


TransportFactory = Callable[[str, int], Tuple[Transport, Any]]
ClientFactory = Callable[[Any], RemoteQueryClient]


def thrift_transport(server: str, port: int) -> Tuple[TTransport.TBufferedTransport, TBinaryProtocol.TBinaryProtocol]:
    """Build a buffered socket transport and the binary protocol on top of it.

    Nothing touches the network until the transport is opened.
    """
    socket = TSocket.TSocket(server, port)
    transport = TTransport.TBufferedTransport(socket)
    protocol = TBinaryProtocol.TBinaryProtocol(transport)
    logger.debug(f"Built thrift transport for {server}:{port}")
    return transport, protocol


def hive_client(protocol: Any) -> RemoteQueryClient:
    """Default client factory: the generated ThriftHive service client."""
    # Generated bindings ship in the optional `hive` extra (hive-thrift-py).
    from hive_service import ThriftHive

    return ThriftHive.Client(protocol)
