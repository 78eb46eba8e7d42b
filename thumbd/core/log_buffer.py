"""
In-memory ring buffer of recent log records, served by the /logs endpoint.
"""

from __future__ import annotations

import logging
import threading
import traceback
from collections import deque
from datetime import datetime, timezone
from typing import Deque, Dict, List, Tuple

_BUFFER_MAX = 2000


class LogBuffer(logging.Handler):
    def __init__(self, maxlen: int = _BUFFER_MAX):
        super().__init__(level=logging.DEBUG)
        self._records: Deque[Dict[str, object]] = deque(maxlen=maxlen)
        self._buffer_lock = threading.Lock()
        self._next_id = 1

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == "uvicorn.access":
            return
        try:
            message = record.getMessage()
            if record.exc_info:
                message = f"{message}\n{''.join(traceback.format_exception(*record.exc_info))}".rstrip()
            ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
            with self._buffer_lock:
                self._records.append({
                    "id": self._next_id,
                    "ts": ts,
                    "level": record.levelname,
                    "logger": record.name,
                    "message": message,
                })
                self._next_id += 1
        except Exception:
            self.handleError(record)

    def entries(self, since_id: int | None = None, limit: int = 0) -> Tuple[List[Dict[str, object]], int | None]:
        with self._buffer_lock:
            items = list(self._records)
            newest = self._next_id - 1 if self._records else None
        if since_id is not None:
            items = [entry for entry in items if int(entry["id"]) > since_id]
        if limit and len(items) > limit:
            items = items[-limit:]
        last_id = int(items[-1]["id"]) if items else newest
        return items, last_id

    def clear(self) -> int:
        with self._buffer_lock:
            dropped = len(self._records)
            self._records.clear()
            self._next_id = 1
        return dropped


log_buffer = LogBuffer()


def install_log_buffer(level: str = "INFO") -> None:
    """Attach the buffer to the root and uvicorn loggers; set thumbd.* to ``level``."""
    level_no = logging.getLevelName(level.upper())
    logging.getLogger("thumbd").setLevel(level_no if isinstance(level_no, int) else logging.INFO)
    # uvicorn loggers do not propagate to root.
    for name in ("", "uvicorn"):
        logger = logging.getLogger(name)
        if log_buffer not in logger.handlers:
            logger.addHandler(log_buffer)


def get_log_entries(since_id: int | None, limit: int) -> Tuple[List[Dict[str, object]], int | None]:
    return log_buffer.entries(since_id, limit)


def clear_log_entries() -> int:
    return log_buffer.clear()
