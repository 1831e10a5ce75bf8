"""Publisher implementations for offline use and tests.

``RecordingNode`` keeps every published message in one shared, ordered log
so publication order across topics can be inspected afterwards.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


@dataclass
class PublishedMessage:
    """Record of one publication.

    Attributes:
        topic: Topic the message was published on
        message: The published message
        stamp: Clock reading at publication time (seconds)
    """

    topic: str
    message: Any
    stamp: float


class RecordingPublisher:
    """Publisher appending to its node's log."""

    def __init__(self, topic: str, node: "RecordingNode"):
        self.topic = topic
        self._node = node

    def publish(self, message: Any) -> None:
        self._node.record(self.topic, message)


class RecordingNode:
    """Publisher factory recording every message published through it."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize recording node.

        Args:
            clock: Time source used to stamp publications
        """
        self.clock = clock
        self.published: List[PublishedMessage] = []
        self._publishers: Dict[str, RecordingPublisher] = {}

    def create_publisher(self, topic: str) -> RecordingPublisher:
        if topic not in self._publishers:
            self._publishers[topic] = RecordingPublisher(topic, self)
        return self._publishers[topic]

    def record(self, topic: str, message: Any) -> None:
        self.published.append(PublishedMessage(topic=topic, message=message, stamp=self.clock()))

    def messages_on(self, topic: str) -> List[Any]:
        """Return messages published on ``topic`` in order."""
        return [entry.message for entry in self.published if entry.topic == topic]


class LoggingPublisher:
    """Publisher that only logs what it would send."""

    def __init__(self, topic: str):
        self.topic = topic

    def publish(self, message: Any) -> None:
        logger.info(
            f"[{self.topic}] {type(message).__name__} "
            f"unique_id={getattr(message, 'unique_id', None)}"
        )
        logger.debug(f"[{self.topic}] {message}")


class LoggingNode:
    """Publisher factory creating :class:`LoggingPublisher` instances."""

    def create_publisher(self, topic: str) -> LoggingPublisher:
        return LoggingPublisher(topic)
