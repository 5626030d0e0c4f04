import logging
import sys
from typing import Protocol, runtime_checkable


@runtime_checkable
class QueryLogger(Protocol):
    """What a Connection needs from a logger: one method per level."""

    def fatal(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...


class LoggingAdapter:
    """Exposes a stdlib logging.Logger through the QueryLogger methods."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def fatal(self, message: str) -> None:
        self.logger.critical(message)

    def error(self, message: str) -> None:
        self.logger.error(message)

    def warn(self, message: str) -> None:
        self.logger.warning(message)

    def info(self, message: str) -> None:
        self.logger.info(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)


class StdOutLogger(LoggingAdapter):
    """Default logger: every level goes to standard output, message only.

    Each instance owns an unregistered logging.Logger and its own handler.
    """

    def __init__(self, name: str = "hive.connection", stream=None):
        logger = logging.Logger(name, level=logging.DEBUG)
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        super().__init__(logger)
