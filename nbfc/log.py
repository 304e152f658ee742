"""Leveled logging to standard error and, optionally, to syslog."""

from __future__ import annotations

import enum
import sys
from typing import TextIO

try:
    import syslog as _syslog
except ImportError:  # not available on every platform
    _syslog = None

__all__ = ["LogLevel", "Logger", "program_name"]

_SYSLOG_BUFFER_SIZE = 4096


class LogLevel(enum.IntEnum):
    """Verbosity levels; a message is shown when its level is at most the logger's."""

    QUIET = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4


def program_name(path: str) -> str:
    """Return the part of `path` after its last '/' that is followed by something."""
    start = 0
    for index, char in enumerate(path):
        if char == "/" and index + 1 < len(path):
            start = index + 1
    return path[start:]


def _default_name() -> str:
    if sys.argv and sys.argv[0]:
        return program_name(sys.argv[0])
    return "nbfc"


class Logger:
    """Write "name: LEVEL: message" lines to a stream and mirror them to syslog if asked."""

    def __init__(
        self,
        name: str | None = None,
        level: LogLevel = LogLevel.INFO,
        use_syslog: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self.name = name if name is not None else _default_name()
        self.level = LogLevel(level)
        self._stream = stream
        self._use_syslog = bool(use_syslog and _syslog is not None)
        if self._use_syslog:
            _syslog.openlog(self.name, _syslog.LOG_PID | _syslog.LOG_CONS, _syslog.LOG_DAEMON)

    @property
    def uses_syslog(self) -> bool:
        """True while messages are also sent to syslog."""
        return self._use_syslog

    def close(self) -> None:
        """Close the syslog connection, if one was opened."""
        if self._use_syslog:
            _syslog.closelog()
            self._use_syslog = False

    def _emit(self, level: LogLevel, tag: str, priority_name: str, message: str) -> None:
        if self.level < level:
            return
        if self._use_syslog:
            text = message.rstrip("\n")[: _SYSLOG_BUFFER_SIZE - 1]
            _syslog.syslog(getattr(_syslog, priority_name), text)
        stream = self._stream if self._stream is not None else sys.stderr
        line = message if message.endswith("\n") else message + "\n"
        stream.write(f"{self.name}: {tag}: {line}")
        stream.flush()

    def error(self, message: str) -> None:
        """Log an error."""
        self._emit(LogLevel.ERROR, "ERROR", "LOG_ERR", message)

    def warn(self, message: str) -> None:
        """Log a warning."""
        self._emit(LogLevel.WARN, "WARNING", "LOG_WARNING", message)

    def info(self, message: str) -> None:
        """Log an informational message."""
        self._emit(LogLevel.INFO, "INFO", "LOG_INFO", message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self._emit(LogLevel.DEBUG, "DEBUG", "LOG_DEBUG", message)

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()