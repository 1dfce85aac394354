import threading
import time
from typing import Any


class SyncBlobStore:
    """
    Single-slot store for the client's opaque sync payload.

    Last write wins. The value lives only as long as the process; there is no
    history and no schema validation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Any = None
        self._updated_at: float | None = None

    def save(self, value: Any) -> None:
        with self._lock:
            self._value = value
            self._updated_at = time.time()

    def load(self) -> Any:
        with self._lock:
            return self._value

    def snapshot(self) -> tuple[Any, float | None]:
        with self._lock:
            return self._value, self._updated_at
