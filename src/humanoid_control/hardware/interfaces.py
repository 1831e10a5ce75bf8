"""Capabilities the control layer consumes from the middleware.

The control interfaces never talk to a transport directly; they are handed
objects satisfying these protocols.
"""

from typing import Any, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from humanoid_control.control.messages import Pose


class Publisher(Protocol):
    """Fire-and-forget message sink bound to one topic."""

    def publish(self, message: Any) -> None:
        ...


class PublisherFactory(Protocol):
    """Creates publishers for topics (a middleware node)."""

    def create_publisher(self, topic: str) -> Publisher:
        ...


class RobotDescriptionProvider(Protocol):
    """Static description of the robot: joint names, limits and frames."""

    def get_joint_limits(self, group: str) -> List[Tuple[float, float]]:
        """Return ``(lower, upper)`` for every joint of ``group`` in order."""
        ...

    def get_joint_names(self, group: str) -> List[str]:
        ...

    def get_frame(self, name: str) -> str:
        """Resolve a logical frame name (e.g. ``"pelvis"``) to a frame id."""
        ...


class StateProvider(Protocol):
    """Live robot state and transforms.

    Every method raises ``LookupError`` when the requested state or
    transform is not available.
    """

    def get_joint_positions(self, group: str) -> List[float]:
        ...

    def get_current_pose(self, frame: str, reference_frame: Optional[str] = None) -> Pose:
        ...

    def transform_quaternion(
        self,
        quaternion: Sequence[float],
        from_frame: str,
        to_frame: str,
    ) -> np.ndarray:
        ...

    def transform_pose(self, pose: Pose, from_frame: str, to_frame: str) -> Pose:
        ...
