"""In-process store of script processing progress.

The store lives in the memory of the process that runs ``ScriptProcessor``,
which is the Temporal worker. Only code in that process can read it with
``progress_store.get``. It is not shared across processes or persisted, so a
separate API process sees nothing here and should rely on the script status.
"""

import threading
from dataclasses import dataclass
from typing import Dict, Optional
from uuid import UUID


@dataclass(frozen=True)
class ProgressInfo:
    percent: int
    step: str


class ProcessingProgress:
    """Thread-safe map of script id to its latest progress step."""

    def __init__(self):
        self._lock = threading.Lock()
        self._store: Dict[str, ProgressInfo] = {}

    def set(self, script_id: UUID | str, percent: int, step: str) -> None:
        with self._lock:
            self._store[str(script_id)] = ProgressInfo(percent=percent, step=step)

    def get(self, script_id: UUID | str) -> Optional[ProgressInfo]:
        with self._lock:
            return self._store.get(str(script_id))

    def clear(self, script_id: UUID | str) -> None:
        with self._lock:
            self._store.pop(str(script_id), None)


# Shared by the script processor and whatever reports status to users
progress_store = ProcessingProgress()
