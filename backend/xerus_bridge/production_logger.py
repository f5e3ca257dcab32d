"""
Production-safe logging utility.

Wraps a standard ``logging`` logger and silences chatty levels outside
development while always keeping warnings and errors:

- debug / info / success: development, or when DEBUG=true
- warn / error: always
- perf: only when PERF_LOGS=true
"""

import logging
import time
from collections.abc import Callable
from typing import Any, Optional

from .config import settings


class ProductionLogger:
    """Leveled logging façade with environment-aware gating."""

    def __init__(
        self,
        name: str = "xerus_bridge",
        is_dev: Optional[bool] = None,
        debug_override: Optional[bool] = None,
        perf_enabled: Optional[bool] = None,
    ):
        self._logger = logging.getLogger(name)
        self.is_dev = settings.is_development if is_dev is None else is_dev
        self.debug_override = settings.debug if debug_override is None else debug_override
        self.perf_enabled = settings.perf_logs if perf_enabled is None else perf_enabled

    @property
    def verbose(self) -> bool:
        return self.is_dev or self.debug_override

    def debug(self, *args: Any) -> None:
        if self.verbose:
            self._logger.debug(_join("[DEBUG]", args))

    def info(self, *args: Any) -> None:
        if self.verbose:
            self._logger.info(_join("[INFO]", args))

    def warn(self, *args: Any) -> None:
        self._logger.warning(_join("[WARNING]", args))

    def error(self, *args: Any) -> None:
        self._logger.error(_join("[ERROR]", args))

    def success(self, *args: Any) -> None:
        if self.verbose:
            self._logger.info(_join("[SUCCESS]", args))

    def perf(self, label: str, *args: Any, start_time: Optional[float] = None) -> None:
        """Log a performance measurement; with ``start_time`` the elapsed ms is appended."""
        if not self.perf_enabled:
            return
        if start_time is not None:
            args = (*args, f"took {(time.perf_counter() - start_time) * 1000:.0f}ms")
        self._logger.info(_join("[DATA] [PERF]", (label, *args)))

    def log(self, *args: Any) -> None:
        self.info(*args)

    def dev(self, callback: Callable[[], Any]) -> None:
        """Run ``callback`` only in development."""
        if self.is_dev and callable(callback):
            callback()

    def log_with_meta(self, level: int, message: str, **meta: Any) -> None:
        """Structured log entry; ``meta`` lands on the record as ``extra`` fields."""
        if level < logging.WARNING and not self.verbose:
            return
        self._logger.log(level, message, extra={"meta": meta})


def _join(prefix: str, args: tuple) -> str:
    return " ".join([prefix, *(str(arg) for arg in args)])


logger = ProductionLogger()

debug = logger.debug
info = logger.info
warn = logger.warn
error = logger.error
success = logger.success
perf = logger.perf
log = logger.log
dev = logger.dev
log_with_meta = logger.log_with_meta
