"""Live snapshot subscriptions for an owner's transactions."""

import queue
import threading
from typing import Callable, List, Optional

from models.transaction import Transaction

_CANCELLED = object()


class Subscription:
    """A feed of full transaction snapshots for one owner.

    The feed starts with the owner's current transactions and receives a
    new full snapshot after every change. Iterating blocks until the next
    snapshot arrives and ends once the subscription is cancelled. A
    cancelled subscription cannot be restarted; subscribe again instead.

    Usage:
        with services.transactions.subscribe(owner_id) as subscription:
            for snapshot in subscription:
                render(snapshot)

    Args:
        owner_id: Owner whose transactions this feed carries.
        on_cancel: Optional callback invoked once, with this subscription,
            when it is cancelled.
    """

    def __init__(
        self,
        owner_id: str,
        on_cancel: Optional[Callable[["Subscription"], None]] = None,
    ):
        self.owner_id = owner_id
        self._on_cancel = on_cancel
        self._queue: "queue.Queue" = queue.Queue()
        self._lock = threading.Lock()
        self._cancelled = False
        self._last_snapshot: Optional[List[Transaction]] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def deliver(self, snapshot: List[Transaction]) -> bool:
        """Queue a snapshot for the consumer.

        Snapshots equal to the last one delivered are dropped.

        Returns:
            True if the snapshot was queued.
        """
        with self._lock:
            if self._cancelled or snapshot == self._last_snapshot:
                return False
            self._last_snapshot = list(snapshot)
            self._queue.put(list(snapshot))
            return True

    def get(self, timeout: Optional[float] = None) -> Optional[List[Transaction]]:
        """Wait for the next snapshot.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely.

        Returns:
            The next snapshot, or None if the wait timed out.

        Raises:
            StopIteration: If the subscription has been cancelled.
        """
        if self._cancelled:
            raise StopIteration

        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

        if item is _CANCELLED or self._cancelled:
            # Leave the marker for any other waiting consumer
            self._queue.put(_CANCELLED)
            raise StopIteration
        return item

    def cancel(self) -> None:
        """Stop the feed and detach it from its source. Safe to call twice."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
        self._queue.put(_CANCELLED)
        if self._on_cancel:
            self._on_cancel(self)

    def __iter__(self):
        return self

    def __next__(self) -> List[Transaction]:
        return self.get()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cancel()
