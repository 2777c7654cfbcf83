"""
Keyed debounce on the asyncio event loop.

One pending timer per key. Scheduling again under the same key cancels the
previous timer outright, so a burst of calls collapses into a single action
that runs once the key has been quiet for `delay` seconds. Actions take no
arguments and read whatever state is current when they fire.

Outside any event loop there is no timer: the action stays pending until
flush() or cancel().
"""
import asyncio
import logging
from typing import Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

Action = Callable[[], None]


class Debouncer:
    """Per-key delayed invocation."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._pending: Dict[Hashable, Tuple[Optional[asyncio.TimerHandle], Action]] = {}

    @property
    def loop(self) -> Optional[asyncio.AbstractEventLoop]:
        """The given loop, else the running one. None outside any loop."""
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                return None
        return self._loop

    def schedule(self, key: Hashable, action: Action, delay: float) -> None:
        """Run `action` after `delay` seconds unless rescheduled. delay <= 0 runs now."""
        self.cancel(key)
        if delay <= 0:
            self._run(key, action)
            return
        loop = self.loop
        handle = loop.call_later(delay, self._fire, key) if loop is not None else None
        self._pending[key] = (handle, action)

    def cancel(self, key: Hashable) -> bool:
        """Drop the pending action for `key`. Returns True if one was pending."""
        entry = self._pending.pop(key, None)
        if entry is None:
            return False
        self._stop(entry[0])
        return True

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    def pending_keys(self):
        return list(self._pending)

    def flush(self, key: Optional[Hashable] = None) -> int:
        """
        Run pending actions immediately instead of waiting for their timers.

        With a key, only that key is flushed. Returns the number of actions run.
        """
        keys = [key] if key is not None else list(self._pending)
        ran = 0
        for k in keys:
            entry = self._pending.pop(k, None)
            if entry is None:
                continue
            self._stop(entry[0])
            self._run(k, entry[1])
            ran += 1
        return ran

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    def _fire(self, key: Hashable) -> None:
        entry = self._pending.pop(key, None)
        if entry is not None:
            self._run(key, entry[1])

    @staticmethod
    def _stop(handle: Optional[asyncio.TimerHandle]) -> None:
        if handle is not None:
            handle.cancel()

    @staticmethod
    def _run(key: Hashable, action: Action) -> None:
        try:
            action()
        except Exception as e:
            logger.error("Debounced action for %r failed: %s", key, e)
