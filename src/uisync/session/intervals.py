"""Callback interval votes cast by task queues."""

from typing import Iterable

from ..app.application import TaskQueueHandle
from ..core import get_logger

logger = get_logger(__name__)

DEFAULT_CALLBACK_INTERVAL = 500


class CallbackIntervals:
    """
    Poll interval negotiation across independently registered task queues.

    The resolved interval is the smallest vote, or the default when there
    are none. Votes are evicted explicitly, by ``remove`` or ``sweep``.
    A queue handle the application keeps alive after abandoning it keeps
    voting; this is a known limitation, not something resolve() corrects.
    """

    def __init__(self, default: int = DEFAULT_CALLBACK_INTERVAL) -> None:
        self.default = default
        self._votes: dict[TaskQueueHandle, int] = {}

    def vote(self, handle: TaskQueueHandle, interval_ms: int) -> None:
        """Set (or replace) a queue's interval vote."""
        if interval_ms <= 0:
            raise ValueError(f"Callback interval must be positive: {interval_ms}")
        self._votes[handle] = interval_ms

    def remove(self, handle: TaskQueueHandle) -> bool:
        return self._votes.pop(handle, None) is not None

    def sweep(self, live_handles: Iterable[TaskQueueHandle]) -> int:
        """Evict the votes of handles not in ``live_handles``; return the count."""
        live = set(live_handles)
        stale = [handle for handle in self._votes if handle not in live]
        for handle in stale:
            del self._votes[handle]
        if stale:
            logger.debug("interval_votes_evicted", count=len(stale))
        return len(stale)

    def resolve(self) -> int:
        if not self._votes:
            return self.default
        return min(self._votes.values())

    def __len__(self) -> int:
        return len(self._votes)

    def __contains__(self, handle: TaskQueueHandle) -> bool:
        return handle in self._votes


__all__ = ["DEFAULT_CALLBACK_INTERVAL", "CallbackIntervals"]
