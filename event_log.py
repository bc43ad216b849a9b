import os
import threading
from datetime import datetime
from pathlib import Path

_DEFAULT_EVENT_LOG = "session.log"
_event_log_lock = threading.Lock()


def event_log_path() -> Path:
    return Path(os.getenv("ARGMAP_EVENT_LOG", _DEFAULT_EVENT_LOG))


def reset_event_log() -> None:
    with _event_log_lock:
        event_log_path().write_text("", encoding="utf-8")


def log_event(status: str, subject: str, detail: str | None = None) -> None:
    timestamp = datetime.now().isoformat(timespec="seconds")
    message = detail.strip() if detail else ""
    line = f"{timestamp}\t{status.upper()}\t{subject}"
    if message:
        line = f"{line}\t{message}"
    with _event_log_lock:
        with event_log_path().open("a", encoding="utf-8") as log:
            log.write(line + "\n")


def read_events() -> list[tuple[str, ...]]:
    """Return logged events as (timestamp, status, subject[, detail]) tuples."""
    path = event_log_path()
    if not path.exists():
        return []
    with _event_log_lock:
        lines = path.read_text(encoding="utf-8").splitlines()
    return [tuple(line.split("\t")) for line in lines if line]
