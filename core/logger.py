"""
core/logger.py — JSONL structured logger for Conduit.

ConduitLogger writes one JSON object per line to
``$CONDUIT_LOG_DIR/conduit_{date}.jsonl`` (default directory ``logs``),
rotating automatically each day. WARN/ERROR/CRITICAL are also mirrored
to Python stdlib logging (stderr). Thread-safe via threading.Lock.

Usage::

    from core.logger import get_logger
    log = get_logger()
    log.info("broker", "published", {"topic": "IT_SERVICE: EMAIL_CREATED"})
    log.perf("tailcall", "trampoline_done", latency_ms=12.5, data={"steps": 100000})
"""

from __future__ import annotations

import json
import logging
import os
import platform
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

# ── stdlib mirror logger (stderr for WARN+) ──────────────────
_stdlib = logging.getLogger("conduit")
if not _stdlib.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s — %(message)s"))
    _stdlib.addHandler(_handler)
_stdlib.setLevel(logging.DEBUG)
_stdlib.propagate = False

# Numeric ordering used to filter JSONL entries; PERF always passes.
_LEVEL_ORDER: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "PERF": 20,
    "WARN": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}

# ── Singleton storage ─────────────────────────────────────────
_instance: Optional["ConduitLogger"] = None
_instance_lock = threading.Lock()


def _default_log_dir() -> Path:
    """Resolve the log directory from ``CONDUIT_LOG_DIR`` (read at first use)."""
    return Path(os.environ.get("CONDUIT_LOG_DIR", "logs"))


class ConduitLogger:
    """
    JSONL structured logger for Conduit.

    Each call to a log method appends a single JSON line to
    ``<log_dir>/conduit_{YYYY-MM-DD}.jsonl``. A new file is opened
    automatically when the calendar date changes.

    Fields written per entry:

    .. code-block:: json

        {
          "timestamp_iso": "2026-10-19T09:12:01.123456+00:00",
          "level": "INFO",
          "phase": "dispatch",
          "event": "dispatched",
          "data": {"topic": "HR_SERVICE: EMAIL_CREATED"},
          "latency_ms": 0.412
        }

    ``latency_ms`` is omitted when ``None``.

    Use :func:`get_logger` for the process-wide instance. Tests may build
    their own with an explicit ``log_dir``.

    Args:
        log_dir: Directory for the JSONL files. Defaults to ``CONDUIT_LOG_DIR``
            or ``logs``.
        min_level: Entries below this level are not written.
    """

    def __init__(self, log_dir: Path | str | None = None, min_level: str = "DEBUG") -> None:
        """Open the log file for today and write the startup entry."""
        self._lock = threading.Lock()
        self._log_dir = Path(log_dir) if log_dir is not None else _default_log_dir()
        self._min_level = _LEVEL_ORDER[min_level]
        self._file: Optional[Any] = None
        self._current_date: str = ""
        self._open_file()
        self._write_startup()

    @property
    def log_dir(self) -> Path:
        """Directory the JSONL files are written to."""
        return self._log_dir

    @property
    def current_path(self) -> Path:
        """Path of the file currently being appended to."""
        return self._log_dir / f"conduit_{self._current_date}.jsonl"

    def set_min_level(self, level: str) -> None:
        """
        Change the minimum level written to the JSONL file.

        Args:
            level: One of ``DEBUG``, ``INFO``, ``WARN``, ``ERROR``, ``CRITICAL``.

        Raises:
            ValueError: If ``level`` is not a known level name.
        """
        if level not in _LEVEL_ORDER:
            raise ValueError(f"Unknown log level: {level!r}")
        with self._lock:
            self._min_level = _LEVEL_ORDER[level]

    # ──────────────────────────────────────────
    # Public logging methods
    # ──────────────────────────────────────────

    def debug(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """Write a DEBUG-level structured log entry."""
        self._write("DEBUG", phase, event, data)

    def info(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """
        Write an INFO-level structured log entry.

        Args:
            phase: Subsystem (e.g. ``'broker'``, ``'pipeline'``).
            event: Short event identifier (e.g. ``'published'``).
            data: Optional dict of additional key-value context.
        """
        self._write("INFO", phase, event, data)

    def warn(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """Write a WARN-level entry and mirror to stderr via stdlib logging."""
        self._write("WARN", phase, event, data)
        _stdlib.warning("[%s] %s | %s", phase, event, data or {})

    def error(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """Write an ERROR-level entry and mirror to stderr via stdlib logging."""
        self._write("ERROR", phase, event, data)
        _stdlib.error("[%s] %s | %s", phase, event, data or {})

    def critical(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """Write a CRITICAL-level entry and mirror to stderr via stdlib logging."""
        self._write("CRITICAL", phase, event, data)
        _stdlib.critical("[%s] %s | %s", phase, event, data or {})

    def perf(
        self,
        phase: str,
        event: str,
        latency_ms: float,
        data: Optional[dict] = None,
    ) -> None:
        """
        Write a PERF-level entry for latency tracking.

        Args:
            phase: Subsystem the measurement belongs to (e.g. ``'tailcall'``).
            event: What was measured (e.g. ``'trampoline_done'``).
            latency_ms: Measured latency in milliseconds.
            data: Optional additional context dict.
        """
        self._write("PERF", phase, event, data, latency_ms=latency_ms)

    def flush(self) -> None:
        """Flush the underlying file buffer immediately."""
        with self._lock:
            if self._file and not self._file.closed:
                self._file.flush()

    def close(self) -> None:
        """Close the current file. Further writes reopen it."""
        with self._lock:
            if self._file and not self._file.closed:
                self._file.close()
            self._current_date = ""

    # ──────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────

    def _write(
        self,
        level: str,
        phase: str,
        event: str,
        data: Optional[dict],
        latency_ms: Optional[float] = None,
    ) -> None:
        """
        Serialise and append one JSON line to the log file.

        Values that are not JSON-serialisable are written via ``repr``.
        """
        if _LEVEL_ORDER[level] < self._min_level:
            return
        now = datetime.now(tz=timezone.utc)
        record: dict[str, Any] = {
            "timestamp_iso": now.isoformat(),
            "level": level,
            "phase": phase,
            "event": event,
            "data": data or {},
        }
        if latency_ms is not None:
            record["latency_ms"] = round(latency_ms, 3)

        line = json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=repr)

        with self._lock:
            self._rotate_if_needed(now)
            if self._file and not self._file.closed:
                self._file.write(line + "\n")
                self._file.flush()

    def _rotate_if_needed(self, now: datetime) -> None:
        """
        Open a new log file if the calendar date has changed.

        Called inside ``self._lock`` — do not call from outside.
        """
        today = now.strftime("%Y-%m-%d")
        if today != self._current_date or self._file is None or self._file.closed:
            if self._file and not self._file.closed:
                self._file.close()
            self._current_date = today
            self._log_dir.mkdir(parents=True, exist_ok=True)
            self._file = open(self.current_path, "a", encoding="utf-8", buffering=1)  # noqa: WPS515

    def _open_file(self) -> None:
        """Open the log file for today's date (called once on init)."""
        now = datetime.now(tz=timezone.utc)
        with self._lock:
            self._rotate_if_needed(now)

    def _write_startup(self) -> None:
        """Write a startup entry with Python version and platform."""
        self.info(
            phase="system",
            event="startup",
            data={
                "python_version": sys.version,
                "platform": platform.platform(),
                "timestamp_local": datetime.now().isoformat(),
            },
        )


# ──────────────────────────────────────────────────────────────
# Process-wide accessor
# ──────────────────────────────────────────────────────────────

def get_logger() -> ConduitLogger:
    """
    Return the process-wide :class:`ConduitLogger` instance.

    Thread-safe: the first call creates the instance; subsequent calls
    return the same object without acquiring the creation lock.
    """
    global _instance
    if _instance is None:
        with _instance_lock:
            if _instance is None:
                _instance = ConduitLogger()
    return _instance
