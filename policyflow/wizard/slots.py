# policyflow/wizard/slots.py

from __future__ import annotations

import itertools
import threading
from typing import Any, Dict, Optional

_handle_ids = itertools.count(1)


class RequestHandle:
    """One outstanding agent request. The payload is captured when the handle is issued."""

    def __init__(self, kind: str, payload: Dict[str, Any]) -> None:
        self.id = next(_handle_ids)
        self.kind = kind
        self.payload = payload
        self._aborted = threading.Event()

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    def abort(self) -> None:
        self._aborted.set()

    def __repr__(self) -> str:
        return f"RequestHandle(id={self.id}, kind={self.kind!r}, aborted={self.aborted})"


class RequestSlot:
    """Holds at most one outstanding request; a second acquire while busy is refused."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: Optional[RequestHandle] = None

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._active is not None

    @property
    def active(self) -> Optional[RequestHandle]:
        with self._lock:
            return self._active

    def acquire(self, kind: str, payload: Dict[str, Any]) -> Optional[RequestHandle]:
        with self._lock:
            if self._active is not None:
                return None
            self._active = RequestHandle(kind, payload)
            return self._active

    def is_current(self, handle: RequestHandle) -> bool:
        with self._lock:
            return self._active is handle and not handle.aborted

    def release(self, handle: RequestHandle) -> bool:
        with self._lock:
            if self._active is not handle:
                return False
            self._active = None
            return True

    def abort(self) -> Optional[RequestHandle]:
        with self._lock:
            handle, self._active = self._active, None
        if handle is not None:
            handle.abort()
        return handle
