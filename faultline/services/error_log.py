"""
Bounded in-memory error log with a durable append-only file sink.

This module provides:
- Process-unique error id generation
- ErrorLog, a capacity-bounded FIFO of error records
- ErrorLogSink, a best-effort daily JSON-lines file writer that never
  blocks or fails the caller
"""

import itertools
import json
import secrets
import threading
import time
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Deque, Dict, Iterator, List, Optional, Set, Union

from faultline.models.error import ErrorRecord
from faultline.utils.logging import get_operator_logger, log_error_with_context


logger = get_operator_logger(component="error_log")

DEFAULT_CAPACITY = 1000

_id_sequence = itertools.count(1)


def generate_error_id() -> str:
    """
    Generate a unique error id.

    Format: ``err_<epoch-ms>_<sequence><random>``. The process-wide
    sequence keeps ids unique even when many are created in the same
    millisecond.
    """
    millis = int(time.time() * 1000)
    return f"err_{millis}_{next(_id_sequence):x}{secrets.token_hex(3)}"


def json_default(value: Any) -> Any:
    """JSON fallback for datetimes, enums and other non-native values."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def sink_projection(record: ErrorRecord) -> Dict[str, Any]:
    """Fields written to the daily log file for a record."""
    return {
        "timestamp": record.timestamp,
        "id": record.id,
        "type": record.type,
        "severity": record.severity,
        "message": record.message,
        "component": record.component,
        "operation": record.operation,
        "user_id": record.user_id,
        "session_id": record.session_id,
        "transcript_id": record.transcript_id,
        "retryable": record.retryable,
        "context": record.context,
    }


class ErrorLogSink:
    """
    Append-only daily log file writer.

    Each record becomes one JSON line in ``errors-<YYYY-MM-DD>.log`` (UTC
    date) under the log directory. Writes run on a single background
    thread; failures are reported to the operator logger and dropped.
    """

    def __init__(self, directory: Union[str, Path]):
        """
        Initialize the sink and create the log directory.

        Args:
            directory: Directory for the daily log files
        """
        self.directory = Path(directory)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="faultline-sink")
        self._pending: Set[Future] = set()
        self._pending_lock = threading.Lock()
        self._closed = False

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Error log directory ready: {self.directory}")
        except OSError as e:
            log_error_with_context(
                logger, "Failed to initialize error log directory", e,
                log_directory=str(self.directory),
            )

    def path_for(self, day: date) -> Path:
        return self.directory / f"errors-{day.isoformat()}.log"

    def write(self, record: ErrorRecord) -> Optional[Future]:
        """
        Queue a record for writing without waiting for it.

        Args:
            record: Record to persist

        Returns:
            Future for the write, or None if it could not be queued
        """
        if self._closed:
            logger.warning(f"Error log sink closed; dropping {record.id}")
            return None

        try:
            line = json.dumps(sink_projection(record), default=json_default)
            future = self._executor.submit(self._append_line, line, record.id)
        except Exception as e:
            log_error_with_context(logger, "Failed to queue error log write", e, error_id=record.id)
            return None

        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._on_done)
        return future

    def _append_line(self, line: str, error_id: str) -> None:
        path = self.path_for(datetime.now(timezone.utc).date())
        try:
            with path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as e:
            log_error_with_context(
                logger, "Failed to write error log", e,
                error_id=error_id, log_file=str(path),
            )

    def _on_done(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for queued writes to finish.

        Args:
            timeout: Seconds to wait, None to wait indefinitely

        Returns:
            True if every queued write completed
        """
        with self._pending_lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Drain queued writes and stop the writer thread."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)


class ErrorLog:
    """
    Capacity-bounded, insertion-ordered log of error records.

    Appending past capacity evicts the oldest records first. ``append`` and
    ``clear`` are the only mutations. ``lock`` guards the log together with
    any state derived from it; readers work on ``snapshot()`` copies.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, sink: Optional[ErrorLogSink] = None):
        """
        Initialize the log.

        Args:
            capacity: Maximum number of records kept in memory
            sink: Optional durable sink receiving every appended record
        """
        if capacity < 1:
            raise ValueError("ErrorLog capacity must be at least 1")
        self._capacity = capacity
        self._records: Deque[ErrorRecord] = deque()
        self.sink = sink
        self.lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, record: ErrorRecord) -> int:
        """
        Append a record, evicting from the head to stay within capacity.

        The sink write is issued but not awaited; sink failures never
        affect the in-memory log.

        Args:
            record: Record to append

        Returns:
            Number of records evicted
        """
        evicted = 0
        with self.lock:
            self._records.append(record)
            while len(self._records) > self._capacity:
                self._records.popleft()
                evicted += 1

        if self.sink is not None:
            try:
                self.sink.write(record)
            except Exception as e:
                log_error_with_context(logger, "Error log sink failed", e, error_id=record.id)

        return evicted

    def snapshot(self) -> List[ErrorRecord]:
        """Consistent copy of the log in insertion order."""
        with self.lock:
            return list(self._records)

    def find(self, error_id: str) -> Optional[ErrorRecord]:
        with self.lock:
            for record in reversed(self._records):
                if record.id == error_id:
                    return record
        return None

    def clear(self) -> int:
        """
        Empty the log.

        Returns:
            Number of records removed
        """
        with self.lock:
            cleared = len(self._records)
            self._records.clear()
        return cleared

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)

    def __iter__(self) -> Iterator[ErrorRecord]:
        return iter(self.snapshot())
