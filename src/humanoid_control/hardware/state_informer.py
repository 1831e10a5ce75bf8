"""Static robot state for simulation and offline use.

This module provides a state provider over a fixed set of coordinate frames
and joint positions, mirroring what the live state informer reports.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from humanoid_control.control.messages import Pose
from humanoid_control.utils.geometry import (
    IDENTITY_QUATERNION,
    invert_transform,
    multiply_quaternions,
    normalize_quaternion,
    transform_point,
)


@dataclass
class CoordinateFrame:
    """Coordinate frame definition.

    Attributes:
        name: Frame name (e.g., 'pelvis', 'leftPalm')
        origin: Origin position in the world frame (x, y, z)
        rotation: Orientation in the world frame as a quaternion (x, y, z, w)
    """

    name: str
    origin: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: IDENTITY_QUATERNION.copy())


class StaticStateInformer:
    """State provider over fixed frames and joint positions.

    Satisfies :class:`humanoid_control.hardware.interfaces.StateProvider`.
    Every frame is expressed relative to ``world_frame``.
    """

    def __init__(
        self,
        frames: Optional[Sequence[CoordinateFrame]] = None,
        joint_positions: Optional[Dict[str, Sequence[float]]] = None,
        world_frame: str = "world",
    ):
        """Initialize state informer.

        Args:
            frames: Known frames, each expressed in the world frame
            joint_positions: Current joint positions keyed by joint group
            world_frame: Name of the fixed world frame
        """
        self.world_frame = world_frame
        self.frames: Dict[str, CoordinateFrame] = {
            world_frame: CoordinateFrame(name=world_frame)
        }
        for frame in frames or []:
            self.set_frame(frame)
        self.joint_positions: Dict[str, List[float]] = {
            group: list(values) for group, values in (joint_positions or {}).items()
        }

    def set_frame(self, frame: CoordinateFrame) -> None:
        """Add or replace a frame."""
        self.frames[frame.name] = CoordinateFrame(
            name=frame.name,
            origin=np.asarray(frame.origin, dtype=float),
            rotation=normalize_quaternion(frame.rotation),
        )

    def set_joint_positions(self, group: str, positions: Sequence[float]) -> None:
        self.joint_positions[group] = list(positions)

    def _frame(self, name: str) -> CoordinateFrame:
        if name not in self.frames:
            raise LookupError(f"Frame '{name}' is not available")
        return self.frames[name]

    def get_joint_positions(self, group: str) -> List[float]:
        """Return current joint positions of ``group``.

        Raises:
            LookupError: If no positions are known for the group
        """
        if group not in self.joint_positions:
            raise LookupError(f"No joint state for group '{group}'")
        return list(self.joint_positions[group])

    def transform_pose(self, pose: Pose, from_frame: str, to_frame: str) -> Pose:
        """Re-express ``pose`` given in ``from_frame`` in ``to_frame``.

        Raises:
            LookupError: If either frame is unknown
        """
        source = self._frame(from_frame)
        target = self._frame(to_frame)

        position_world = transform_point(pose.position, source.rotation, source.origin)
        orientation_world = multiply_quaternions(source.rotation, pose.orientation)

        inv_rotation, inv_translation = invert_transform(target.rotation, target.origin)
        return Pose(
            position=transform_point(position_world, inv_rotation, inv_translation),
            orientation=multiply_quaternions(inv_rotation, orientation_world),
        )

    def transform_quaternion(
        self,
        quaternion: Sequence[float],
        from_frame: str,
        to_frame: str,
    ) -> np.ndarray:
        """Re-express an orientation given in ``from_frame`` in ``to_frame``."""
        pose = Pose(orientation=np.asarray(quaternion, dtype=float))
        return self.transform_pose(pose, from_frame, to_frame).orientation

    def get_current_pose(self, frame: str, reference_frame: Optional[str] = None) -> Pose:
        """Return the pose of ``frame`` relative to ``reference_frame`` (default world)."""
        reference = reference_frame or self.world_frame
        return self.transform_pose(Pose(), frame, reference)
