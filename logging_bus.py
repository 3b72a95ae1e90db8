"""Structured activity log shared by the engine, storage and UI."""
import json
import queue
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

LEVELS = ("INFO", "WARN", "ERROR")
KINDS = ("BUILD", "NETWORK", "STREAM", "STORAGE", "SYSTEM")


@dataclass
class LogEvent:
    ts: float
    level: str   # one of LEVELS
    kind: str    # one of KINDS
    msg: str
    meta: Dict[str, Any]


_listeners: List[Callable[[LogEvent], None]] = []
_q: "queue.Queue[LogEvent]" = queue.Queue()
_verbose = True
_level_filter: Dict[str, bool] = {level: True for level in LEVELS}
_kind_filter: Dict[str, bool] = {kind: True for kind in KINDS}
_ring: List[LogEvent] = []
_ring_limit = 2000
_file_path: Optional[str] = None
_dispatcher: Optional[threading.Thread] = None
_lock = threading.Lock()


def emit(level: str, kind: str, msg: str, **meta: Any) -> None:
    _level_filter.setdefault(level, True)
    _kind_filter.setdefault(kind, True)
    if not _level_filter[level] or not _kind_filter[kind]:
        return
    if not _verbose and level == "INFO" and kind != "SYSTEM":
        return
    _q.put(LogEvent(time.time(), level, kind, msg, meta))


def subscribe(callback: Callable[[LogEvent], None]) -> None:
    _listeners.append(callback)


def _dispatch(evt: LogEvent) -> None:
    with _lock:
        _ring.append(evt)
        if len(_ring) > _ring_limit:
            del _ring[0 : len(_ring) - _ring_limit]
        path = _file_path
    for cb in list(_listeners):
        try:
            cb(evt)
        except Exception:
            continue
    if path:
        try:
            with open(path, "a", encoding="utf-8") as fp:
                fp.write(json.dumps(asdict(evt), ensure_ascii=False) + "\n")
        except OSError:
            set_file_logger(None)


def drain() -> int:
    """Dispatch every queued event on the calling thread; returns the count."""
    count = 0
    while True:
        try:
            evt = _q.get_nowait()
        except queue.Empty:
            return count
        _dispatch(evt)
        count += 1


def start_dispatcher() -> None:
    global _dispatcher
    if _dispatcher is not None and _dispatcher.is_alive():
        return

    def loop() -> None:
        while True:
            _dispatch(_q.get())

    _dispatcher = threading.Thread(target=loop, name="log-dispatcher", daemon=True)
    _dispatcher.start()


def set_verbose(v: bool) -> None:
    global _verbose
    _verbose = v


def get_verbose() -> bool:
    return _verbose


def set_log_level_filter(levels: Dict[str, bool]) -> None:
    _level_filter.update(levels)


def set_kind_filter(kinds: Dict[str, bool]) -> None:
    _kind_filter.update(kinds)


def set_ring_limit(n: int) -> None:
    global _ring_limit
    _ring_limit = max(200, int(n))


def set_file_logger(path: Optional[str]) -> None:
    global _file_path
    with _lock:
        _file_path = path


def snapshot() -> List[LogEvent]:
    with _lock:
        return list(_ring)


def clear() -> None:
    with _lock:
        _ring.clear()


__all__ = [
    "LogEvent",
    "emit",
    "subscribe",
    "drain",
    "start_dispatcher",
    "set_verbose",
    "get_verbose",
    "set_log_level_filter",
    "set_kind_filter",
    "set_ring_limit",
    "set_file_logger",
    "snapshot",
    "clear",
]
