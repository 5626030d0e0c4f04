"""
ConnectionConfig stores where a Hive server lives and the session defaults
applied right after the connection opens.

Example:
{
    'server': 'hive.internal',
    'port': 10000,
    'priority': 'HIGH',
    'queue': 'etl',
}
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.errors import InvalidArgumentError

DEFAULT_PORT = 10_000
DEFAULT_BATCH_SIZE = 1_000

PRIORITY_SETTING = 'mapred.job.priority'
QUEUE_SETTING = 'mapred.job.queue.name'


@dataclass(frozen=True)
class ConnectionConfig:
    server: str
    port: int = DEFAULT_PORT
    priority: Optional[str] = None
    queue: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.server:
            raise InvalidArgumentError("server is required")
        if isinstance(self.port, bool) or not isinstance(self.port, int) or self.port <= 0:
            raise InvalidArgumentError(f"port must be a positive integer, got {self.port!r}")

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "ConnectionConfig":
        """Build a config from a plain mapping; `host` is accepted for `server`."""
        server = config.get('server') or config.get('host')
        return cls(
            server=server,
            port=config.get('port', DEFAULT_PORT),
            priority=config.get('priority'),
            queue=config.get('queue'),
        )

    def session_settings(self) -> Mapping[str, str]:
        """Session variables to SET once the connection is open."""
        settings = {}
        if self.priority is not None:
            settings[PRIORITY_SETTING] = self.priority
        if self.queue is not None:
            settings[QUEUE_SETTING] = self.queue
        return settings
