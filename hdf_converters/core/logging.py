"""Thread-safe logging with contextual metadata.

Conversions tag their messages with key/value context (command, converter,
number of STIG blocks, ...). Context is thread-local and can be scoped, so
a nested conversion restores the caller's context when it finishes.
"""

from __future__ import annotations
from typing import Any, Dict, Iterator
from contextlib import contextmanager, suppress
import threading
import logging
import logging.handlers
import sys

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "[%(asctime)s] [%(levelname)-8s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILE_MAX_BYTES = 10 * 1024 * 1024
FILE_BACKUPS = 5


class Log:
    """
    Thread-safe logger with contextual metadata.

    One instance per logger name. Messages go to stderr at WARNING and
    above; when Cfg.LOG_DIR is set, everything from DEBUG up is also kept
    in a rotating file <LOG_DIR>/<name>.log.

    Thread-safe: Yes
    """

    _instances: Dict[str, "Log"] = {}
    _lock = threading.RLock()

    def __new__(cls, name: str) -> "Log":
        with cls._lock:
            inst = cls._instances.get(name)
            if inst is None:
                inst = super().__new__(cls)
                inst._configure(name)
                cls._instances[name] = inst
            return inst

    def _configure(self, name: str) -> None:
        # Import here to avoid circular dependency
        from hdf_converters.core.config import Cfg

        self.name = name
        self._ctx = threading.local()
        self.log = logging.getLogger(name)
        self.log.handlers.clear()
        self.log.propagate = False
        self.log.setLevel(getattr(logging, Cfg.LOG_LEVEL, logging.INFO))

        self.console = logging.StreamHandler(sys.stderr)
        self.console.setLevel(logging.WARNING)
        self.console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        self.log.addHandler(self.console)

        if Cfg.LOG_DIR is not None:
            # An unwritable log directory leaves console logging only
            with suppress(OSError):
                self.log.addHandler(self._file_handler(Cfg.LOG_DIR / f"{name}.log"))

    @staticmethod
    def _file_handler(path: Any) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            str(path),
            maxBytes=FILE_MAX_BYTES,
            backupCount=FILE_BACKUPS,
            encoding="utf-8",
            delay=True,
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, FILE_DATE_FORMAT))
        return handler

    def set_console_level(self, level: int) -> None:
        """Change the console threshold (e.g. DEBUG for --verbose)."""
        self.console.setLevel(level)
        if self.log.level > level:
            self.log.setLevel(level)

    # ── context ──────────────────────────────────────────────────────────────

    def _data(self) -> Dict[str, Any]:
        data = getattr(self._ctx, "data", None)
        if data is None:
            data = self._ctx.data = {}
        return data

    def ctx(self, **kw: Any) -> None:
        """Add contextual metadata to log messages."""
        self._data().update(kw)

    def clear(self) -> None:
        """Clear contextual metadata."""
        self._data().clear()

    @contextmanager
    def scope(self, **kw: Any) -> Iterator[None]:
        """Add metadata for the duration of a block, then restore the previous set."""
        data = self._data()
        saved = dict(data)
        data.update(kw)
        try:
            yield
        finally:
            data.clear()
            data.update(saved)

    def _context_str(self) -> str:
        data = self._data()
        if not data:
            return ""
        return "[" + ", ".join(f"{k}={v}" for k, v in data.items()) + "] "

    # ── emit ─────────────────────────────────────────────────────────────────

    def _log(self, level: int, message: str, exc: bool = False) -> None:
        self.log.log(level, self._context_str() + str(message), exc_info=exc)

    def d(self, msg: str) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, msg)

    def i(self, msg: str) -> None:
        """Log info message."""
        self._log(logging.INFO, msg)

    def w(self, msg: str) -> None:
        """Log warning message."""
        self._log(logging.WARNING, msg)

    def e(self, msg: str, exc: bool = False) -> None:
        """Log error message."""
        self._log(logging.ERROR, msg, exc)

    def c(self, msg: str, exc: bool = False) -> None:
        """Log critical message."""
        self._log(logging.CRITICAL, msg, exc)


# Module-level logger instance
LOG = Log("hdf_converters")
