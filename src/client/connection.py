import logging
import threading
from contextlib import closing, contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, Union

from client.logger import LoggingAdapter, QueryLogger, StdOutLogger
from client.transport import ClientFactory, TransportFactory, hive_client, thrift_transport
from core.config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_PORT,
    PRIORITY_SETTING,
    QUEUE_SETTING,
    ConnectionConfig,
)
from core.errors import ConnectionStateError, InvalidArgumentError
from core.result_set import ResultRow, ResultSet
from core.schema import RawRow, SchemaDefinition
from core.table_schema import TableSchema

T = TypeVar("T")

BatchConsumer = Callable[[ResultSet], Any]


class Connection:
    """
    A connection to a Hive server over thrift.

    Every remote call runs under one re-entrant lock, so a query and the pulls
    that read its rows always complete before another statement is sent on the
    same connection. The lock is held for the whole of a batched fetch,
    including the time spent in the batch consumer.
    """

    def __init__(self,
                 server: str,
                 port: int = DEFAULT_PORT,
                 logger: Optional[Union[QueryLogger, logging.Logger]] = None,
                 transport_factory: TransportFactory = thrift_transport,
                 client_factory: ClientFactory = hive_client,
                 session_settings: Optional[Dict[str, Any]] = None
    ) -> None:
        self.server = server
        self.port = port
        self._transport, protocol = transport_factory(server, port)
        self._client = client_factory(protocol)
        self._session_defaults = dict(session_settings or {})
        self._settings: Dict[str, Any] = {}
        self._is_open = False
        self._lock = threading.RLock()

        if logger is None:
            logger = StdOutLogger()
        elif isinstance(logger, logging.Logger):
            logger = LoggingAdapter(logger)
        self._logger = logger
        self._logger.info(f"Connecting to {server} on port {port}")

    @classmethod
    def from_config(cls, config: ConnectionConfig, logger=None, **factories) -> "Connection":
        return cls(
            config.server,
            config.port,
            logger,
            session_settings=config.session_settings(),
            **factories,
        )

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> None:
        """Open the transport, then apply any configured session settings."""
        with self._lock:
            if self._is_open:
                raise ConnectionStateError(f"Connection to {self.server}:{self.port} is already open")
            self._transport.open()
            self._is_open = True
            try:
                for name, value in self._session_defaults.items():
                    self.set(name, value)
            except BaseException:
                # A rejected session setting leaves nothing open behind.
                self._is_open = False
                try:
                    self._transport.close()
                except Exception as e:
                    self._logger.error(f"Failed to close connection after error: {e}")
                raise

    def close(self) -> None:
        with self._lock:
            if not self._is_open:
                raise ConnectionStateError(f"Connection to {self.server}:{self.port} is not open")
            self._logger.debug(f"Closing connection to {self.server} on port {self.port}")
            try:
                self._transport.close()
            finally:
                self._is_open = False

    def __enter__(self) -> "Connection":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if not self._is_open:
            return
        if exc_type is None:
            self.close()
            return
        # The block's own failure is what the caller sees.
        try:
            self.close()
        except Exception as e:
            self._logger.error(f"Failed to close connection after error: {e}")

    def execute(self, query: str) -> None:
        """Run a statement whose result is not read (DDL, SET, ...)."""
        with self._lock:
            self._execute_unsafe(query)

    def set(self, name: str, value: Any) -> None:
        """Assign a session variable with ``SET name=value``."""
        with self._lock:
            self._require_open()
            self._logger.info(f"Setting {name}={value}")
            self._client.execute(f"SET {name}={value}")
            self._settings[name] = value

    @property
    def settings(self) -> Dict[str, Any]:
        """Session variables assigned through this connection so far"""
        return dict(self._settings)

    @property
    def priority(self) -> Optional[Any]:
        return self._settings.get(PRIORITY_SETTING)

    @priority.setter
    def priority(self, priority: Any) -> None:
        self.set(PRIORITY_SETTING, priority)

    @property
    def queue(self) -> Optional[Any]:
        return self._settings.get(QUEUE_SETTING)

    @queue.setter
    def queue(self, queue: Any) -> None:
        self.set(QUEUE_SETTING, queue)

    def fetch(self, query: str) -> ResultSet:
        """Run a query and materialize all of its rows."""
        with self._lock:
            self._execute_unsafe(query)
            rows = self._client.fetchAll()
            the_schema = SchemaDefinition(self._client.getSchema(), rows[0] if rows else None)
            return ResultSet(rows, the_schema)

    def fetch_in_batch(self,
                       query: str,
                       batch_size: int = DEFAULT_BATCH_SIZE,
                       on_batch: Optional[BatchConsumer] = None
    ) -> Optional[Iterator[ResultSet]]:
        """
        Run a query and hand its rows over in ResultSets of at most batch_size rows.

        With on_batch, every non-empty batch is passed to it in order and
        nothing is returned. Without it, a generator of batches is returned;
        the query is sent on the first iteration and the connection stays
        locked until the generator is exhausted or closed.
        """
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
            raise InvalidArgumentError(f"batch_size must be a positive integer, got {batch_size!r}")

        batches = self._iter_batches(query, batch_size)
        if on_batch is None:
            return batches
        with closing(batches):
            for result_set in batches:
                on_batch(result_set)
        return None

    def first(self, query: str) -> Optional[ResultRow]:
        """Run a query and return its first row, or None when it has none.

        The server answers an exhausted cursor with an empty row, so a
        one-column query whose first value is the empty string also gives None.
        """
        with self._lock:
            self._execute_unsafe(query)
            row = self._client.fetchOne()
            if _is_empty_row(row):
                return None
            the_schema = SchemaDefinition(self._client.getSchema(), row)
            return ResultSet([row], the_schema).first()

    def schema(self, example_row: Optional[RawRow] = None) -> SchemaDefinition:
        """Schema of the statement the server last ran, without sending a query."""
        with self._lock:
            self._require_open()
            return SchemaDefinition(self._client.getSchema(), example_row)

    def create_table(self, schema: TableSchema) -> None:
        self.execute(schema.create_table_statement())

    def drop_table(self, name: Union[str, TableSchema]) -> None:
        if not isinstance(name, str):
            name = name.name
        self.execute(f"DROP TABLE `{name}`")

    def replace_columns(self, schema: TableSchema) -> None:
        self.execute(schema.replace_columns_statement())

    def add_columns(self, schema: TableSchema) -> None:
        self.execute(schema.add_columns_statement())

    def call(self, method: str, *args: Any) -> Any:
        """Invoke any other public call of the Hive service, e.g. getClusterStatus."""
        if method.startswith("_"):
            raise AttributeError(f"Refusing to call private client attribute {method!r}")
        remote = getattr(self._client, method)
        if not callable(remote):
            raise AttributeError(f"Client attribute {method!r} is not callable")
        with self._lock:
            self._require_open()
            self._logger.debug(f"Calling remote {method}")
            return remote(*args)

    def _iter_batches(self, query: str, batch_size: int) -> Iterator[ResultSet]:
        with self._lock:
            self._execute_unsafe(query)
            the_schema = None
            while True:
                next_batch = self._client.fetchN(batch_size)
                if not next_batch:
                    break
                if the_schema is None:
                    the_schema = SchemaDefinition(self._client.getSchema(), next_batch[0])
                yield ResultSet(next_batch, the_schema)

    def _execute_unsafe(self, query: str) -> None:
        self._require_open()
        self._logger.info(f"Executing Hive Query: {query}")
        self._client.execute(query)

    def _require_open(self) -> None:
        if not self._is_open:
            raise ConnectionStateError(f"Connection to {self.server}:{self.port} is not open")


def _is_empty_row(row: Optional[RawRow]) -> bool:
    return row is None or len(row) == 0


@contextmanager
def connection(server: str, port: int = DEFAULT_PORT, logger=None, **kwargs) -> Iterator[Connection]:
    """Open a Connection for the duration of a with-block and always close it."""
    with Connection(server, port, logger, **kwargs) as conn:
        yield conn


def connect(server: str, port: int, block: Callable[[Connection], T], logger=None, **kwargs) -> T:
    """Open a connection, run block with it, close it, and return block's result.

    If block raises, the connection is still closed and block's exception is
    the one that propagates, even when closing fails too.
    """
    with connection(server, port, logger, **kwargs) as conn:
        return block(conn)
