"""Message identity generation.

Every outgoing message and trajectory point carries a ``unique_id``. The
controller treats 0 as "do not execute", so ids start at 1.
"""

import threading

INVALID_ID = 0


class MessageIdGenerator:
    """Thread-safe monotonically increasing id counter.

    One instance must be shared by every control interface that publishes
    into the same controller.
    """

    def __init__(self, start: int = 1):
        """Initialize the generator.

        Args:
            start: First id handed out (must be >= 1)

        Raises:
            ValueError: If ``start`` would hand out the reserved id 0
        """
        if start <= INVALID_ID:
            raise ValueError(f"Id counter must start above {INVALID_ID}, got {start}")
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        """Return the current id and advance the counter."""
        with self._lock:
            value = self._next
            self._next += 1
        return value

    @property
    def current(self) -> int:
        """Id the next call to :meth:`next_id` will return."""
        with self._lock:
            return self._next
