from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class ValidationRequest:
    package_key: int
    package_id: str
    package_version: str
    validation_tracking_id: str
    queued_at: float


class ValidationRequestQueue:
    """In-memory FIFO of validation requests handed to the pipeline."""

    def __init__(self):
        self._queue: queue.Queue[ValidationRequest] = queue.Queue()

    def enqueue(self, request: ValidationRequest) -> None:
        self._queue.put(request)

    def get(self, timeout: Optional[float] = None) -> ValidationRequest:
        return self._queue.get(timeout=timeout)

    def drain(self, max_items: Optional[int] = None) -> list[ValidationRequest]:
        """
        Take every request queued so far without blocking.

        Repeat requests for one package collapse into the newest, at the
        position of the first.
        """

        latest: dict[int, ValidationRequest] = {}
        taken = 0
        while max_items is None or taken < max_items:
            try:
                request = self._queue.get_nowait()
            except queue.Empty:
                break
            taken += 1
            latest[request.package_key] = request
        return list(latest.values())

    def empty(self) -> bool:
        return self._queue.empty()

    def qsize(self) -> int:
        return self._queue.qsize()
