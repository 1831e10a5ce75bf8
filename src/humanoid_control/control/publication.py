"""Publication sequencing.

The controller drops or mis-orders messages that arrive back to back, so
coupled publications are separated by fixed delays. Paired limb moves always
go out right side first.
"""

import logging
import time
from typing import Any, Callable, Optional

from humanoid_control.hardware.interfaces import Publisher

logger = logging.getLogger(__name__)

ARM_PAIR_DELAY = 0.02
GO_HOME_SETTLE = 0.5
WHOLEBODY_SETTLE = 0.1


class PublicationSequencer:
    """Publishes messages with fixed blocking delays between them."""

    def __init__(
        self,
        arm_pair_delay: float = ARM_PAIR_DELAY,
        go_home_settle: float = GO_HOME_SETTLE,
        wholebody_settle: float = WHOLEBODY_SETTLE,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize sequencer.

        Args:
            arm_pair_delay: Gap between right and left messages of a pair
            go_home_settle: Wait after a go-home command
            wholebody_settle: Wait after a whole-body command
            sleep: Blocking sleep function
        """
        self.arm_pair_delay = arm_pair_delay
        self.go_home_settle = go_home_settle
        self.wholebody_settle = wholebody_settle
        self.sleep = sleep

    @classmethod
    def from_config(
        cls,
        config: dict,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "PublicationSequencer":
        """Build a sequencer from the ``publication`` config section."""
        section = config.get("publication", {})
        return cls(
            arm_pair_delay=float(section.get("arm_pair_delay", ARM_PAIR_DELAY)),
            go_home_settle=float(section.get("go_home_settle", GO_HOME_SETTLE)),
            wholebody_settle=float(section.get("wholebody_settle", WHOLEBODY_SETTLE)),
            sleep=sleep,
        )

    def publish_pair(
        self,
        publisher: Publisher,
        right: Optional[Any],
        left: Optional[Any],
        delay: Optional[float] = None,
    ) -> None:
        """Publish the right message, wait, then publish the left message.

        Either message may be None, in which case it is skipped; the delay
        is always observed.

        Args:
            publisher: Destination for both messages
            right: Right-side message
            left: Left-side message
            delay: Gap in seconds (defaults to ``arm_pair_delay``)
        """
        if delay is None:
            delay = self.arm_pair_delay

        if right is not None:
            publisher.publish(right)
        self.sleep(delay)
        if left is not None:
            publisher.publish(left)

    def publish_and_settle(
        self,
        publisher: Publisher,
        message: Any,
        delay: float,
    ) -> None:
        """Publish ``message`` and block for ``delay`` seconds."""
        publisher.publish(message)
        logger.debug(f"Published {type(message).__name__}, settling for {delay:.3f}s")
        self.sleep(delay)
