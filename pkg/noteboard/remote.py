"""
HTTP client for the note store.

Four CRUD calls plus the QR image fetch. Every call is independent and is
never retried. Failures are logged, handed to the subscribed error
observers, and swallowed: callers get None / False back and carry on with
their local state. Once bound to a running event loop, observers are called
on that loop's thread even when the request ran on a worker.
"""
import asyncio
import logging
from typing import Callable, List, Optional

import requests

from .schema import Note

logger = logging.getLogger(__name__)


def _on_loop_thread(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


class SyncError(Exception):
    """A request to the note store was rejected or never got an answer."""

    def __init__(self, operation: str, detail: str, status_code: Optional[int] = None):
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail
        self.status_code = status_code


class RemoteSyncClient:
    """CRUD wrapper around the note store endpoints."""

    def __init__(self, base_url: str = "http://localhost:6969", timeout: float = 5):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.observers: List[Callable[[SyncError], None]] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def subscribe(self, callback: Callable[[SyncError], None]) -> None:
        """Register an error observer."""
        self.observers.append(callback)

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Deliver observer calls on `loop`'s thread while it runs."""
        self._loop = loop

    def _report(self, error: SyncError) -> None:
        logger.warning("%s", error)
        loop = self._loop
        if loop is not None and loop.is_running() and not _on_loop_thread(loop):
            try:
                loop.call_soon_threadsafe(self._notify, error)
                return
            except RuntimeError:
                pass  # loop closed under us
        self._notify(error)

    def _notify(self, error: SyncError) -> None:
        for callback in self.observers:
            try:
                callback(error)
            except Exception as e:
                logger.error("Error in sync error observer: %s", e)

    def _send(self, operation: str, method: str, path: str, **kwargs) -> Optional[requests.Response]:
        """Issue one request. Returns the response on 2xx, else reports and returns None."""
        try:
            r = requests.request(
                method,
                f"{self.base_url}{path}",
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            self._report(SyncError(operation, str(e)))
            return None
        if not r.ok:
            self._report(SyncError(operation, f"HTTP {r.status_code}", r.status_code))
            return None
        return r

    def list(self) -> Optional[List[Note]]:
        """GET /notes. None on failure (an empty board is a valid answer)."""
        r = self._send("list", "GET", "/notes")
        if r is None:
            return None
        try:
            records = r.json()
        except ValueError as e:
            self._report(SyncError("list", f"bad JSON: {e}", r.status_code))
            return None
        if not isinstance(records, list):
            self._report(SyncError("list", "expected a JSON array", r.status_code))
            return None
        return [Note.from_dict(rec) for rec in records if isinstance(rec, dict)]

    def create(self, note: Note) -> bool:
        """POST /new-note with the client-assigned uuid."""
        return self._send("create", "POST", "/new-note", json=note.to_dict()) is not None

    def update(self, note: Note) -> bool:
        """PUT /update-note with the full record."""
        return self._send("update", "PUT", "/update-note", json=note.to_dict()) is not None

    def delete(self, uuid: str) -> bool:
        """DELETE /remove-note with { uuid } as the body."""
        return self._send("delete", "DELETE", "/remove-note", json={"uuid": uuid}) is not None

    def fetch_qr(self) -> Optional[bytes]:
        """GET /qr.png for the phone-link display. Has no bearing on the board."""
        r = self._send("qr", "GET", "/qr.png")
        return r.content if r is not None else None
