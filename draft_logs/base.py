from abc import ABC, abstractmethod
from datetime import datetime, timezone


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class Logger(ABC):
    """Structured event logger: an event name plus keyword context."""

    def __init__(self, log_type="server"):
        self.log_type = log_type

    @abstractmethod
    def _log(self, level: str, msg: str, data: dict): ...

    def info(self, msg: str, **data):
        self._log("INFO", msg, data)

    def debug(self, msg: str, **data):
        self._log("DEBUG", msg, data)

    def warning(self, msg: str, **data):
        self._log("WARN", msg, data)

    def error(self, msg: str, **data):
        self._log("ERROR", msg, data)
