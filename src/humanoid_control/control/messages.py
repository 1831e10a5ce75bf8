"""Whole-body controller message types.

These dataclasses mirror the controller's wire messages. A ``unique_id`` of
0 marks a message the controller will ignore.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List

import numpy as np

from humanoid_control.utils.geometry import IDENTITY_QUATERNION


class RobotSide(IntEnum):
    """Side of the robot a limb message addresses."""

    LEFT = 0
    RIGHT = 1


class ExecutionMode(IntEnum):
    """Whether a trajectory replaces or queues behind the current one."""

    OVERRIDE = 0
    QUEUE = 1


class BodyPart(IntEnum):
    """Body parts understood by the go-home command."""

    ARM = 0
    CHEST = 1
    PELVIS = 2


class BaseForControl(IntEnum):
    """Reference body for task-space hand trajectories."""

    CHEST = 0
    WORLD = 1
    WALKING_PATH = 2


class Direction(Enum):
    """Directions for nudging an end effector."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    FRONT = "front"
    BACK = "back"


def _zeros3() -> np.ndarray:
    return np.zeros(3)


def _identity_quaternion() -> np.ndarray:
    return IDENTITY_QUATERNION.copy()


@dataclass
class Pose:
    """Position and orientation of a frame.

    Attributes:
        position: (x, y, z) in meters
        orientation: Quaternion (x, y, z, w)
    """

    position: np.ndarray = field(default_factory=_zeros3)
    orientation: np.ndarray = field(default_factory=_identity_quaternion)

    def copy(self) -> "Pose":
        return Pose(position=np.array(self.position, dtype=float),
                    orientation=np.array(self.orientation, dtype=float))


@dataclass
class TrajectoryPoint1D:
    """Single-joint trajectory point.

    Attributes:
        time: Seconds since trajectory start
        position: Joint position (radians)
        velocity: Joint velocity (radians/s)
        unique_id: Correlation id
    """

    time: float
    position: float
    velocity: float = 0.0
    unique_id: int = 0


@dataclass
class OneDoFJointTrajectory:
    """Trajectory for one joint of a limb."""

    trajectory_points: List[TrajectoryPoint1D] = field(default_factory=list)
    unique_id: int = 0


@dataclass
class SO3TrajectoryPoint:
    """Orientation-only task-space point."""

    time: float
    orientation: np.ndarray = field(default_factory=_identity_quaternion)
    angular_velocity: np.ndarray = field(default_factory=_zeros3)
    unique_id: int = 0


@dataclass
class SE3TrajectoryPoint:
    """Full task-space (position and orientation) point."""

    time: float
    position: np.ndarray = field(default_factory=_zeros3)
    orientation: np.ndarray = field(default_factory=_identity_quaternion)
    linear_velocity: np.ndarray = field(default_factory=_zeros3)
    angular_velocity: np.ndarray = field(default_factory=_zeros3)
    unique_id: int = 0


@dataclass
class ArmTrajectoryMessage:
    """Joint-space trajectory for one arm.

    Attributes:
        robot_side: Which arm
        joint_trajectory_messages: One trajectory per arm joint, in joint order
        execution_mode: Override or queue
        unique_id: Message id, 0 means "do not execute"
    """

    robot_side: RobotSide = RobotSide.LEFT
    joint_trajectory_messages: List[OneDoFJointTrajectory] = field(default_factory=list)
    execution_mode: ExecutionMode = ExecutionMode.OVERRIDE
    unique_id: int = 0

    @property
    def num_points(self) -> int:
        """Total number of points across all joints."""
        return sum(len(j.trajectory_points) for j in self.joint_trajectory_messages)


@dataclass
class ChestTrajectoryMessage:
    """Orientation trajectory for the chest, expressed in the world frame."""

    taskspace_trajectory_points: List[SO3TrajectoryPoint] = field(default_factory=list)
    execution_mode: ExecutionMode = ExecutionMode.OVERRIDE
    unique_id: int = 0


@dataclass
class HandTrajectoryMessage:
    """Task-space trajectory for one hand."""

    robot_side: RobotSide = RobotSide.LEFT
    taskspace_trajectory_points: List[SE3TrajectoryPoint] = field(default_factory=list)
    base_for_control: BaseForControl = BaseForControl.CHEST
    execution_mode: ExecutionMode = ExecutionMode.OVERRIDE
    unique_id: int = 0


@dataclass
class FootTrajectoryMessage:
    """Task-space trajectory for one foot."""

    robot_side: RobotSide = RobotSide.LEFT
    taskspace_trajectory_points: List[SE3TrajectoryPoint] = field(default_factory=list)
    execution_mode: ExecutionMode = ExecutionMode.OVERRIDE
    unique_id: int = 0


@dataclass
class GoHomeMessage:
    """Command moving a body part to its predefined home configuration."""

    body_part: BodyPart
    robot_side: RobotSide = RobotSide.LEFT
    trajectory_time: float = 0.0
    unique_id: int = 0


@dataclass
class WholeBodyTrajectoryMessage:
    """Aggregate of all limb messages, executed together by the controller."""

    left_arm_trajectory_message: ArmTrajectoryMessage = field(
        default_factory=lambda: ArmTrajectoryMessage(robot_side=RobotSide.LEFT)
    )
    right_arm_trajectory_message: ArmTrajectoryMessage = field(
        default_factory=lambda: ArmTrajectoryMessage(robot_side=RobotSide.RIGHT)
    )
    chest_trajectory_message: ChestTrajectoryMessage = field(default_factory=ChestTrajectoryMessage)
    left_foot_trajectory_message: FootTrajectoryMessage = field(
        default_factory=lambda: FootTrajectoryMessage(robot_side=RobotSide.LEFT)
    )
    right_foot_trajectory_message: FootTrajectoryMessage = field(
        default_factory=lambda: FootTrajectoryMessage(robot_side=RobotSide.RIGHT)
    )
    left_hand_trajectory_message: HandTrajectoryMessage = field(
        default_factory=lambda: HandTrajectoryMessage(robot_side=RobotSide.LEFT)
    )
    right_hand_trajectory_message: HandTrajectoryMessage = field(
        default_factory=lambda: HandTrajectoryMessage(robot_side=RobotSide.RIGHT)
    )
    unique_id: int = 0


@dataclass
class JointTrajectoryPoint:
    """Point of an externally planned multi-joint trajectory.

    Attributes:
        positions: One position per joint, aligned with the trajectory's joint names
        velocities: Optional velocities (empty means zero)
        time_from_start: Elapsed time in seconds
    """

    positions: List[float]
    velocities: List[float] = field(default_factory=list)
    time_from_start: float = 0.0


@dataclass
class JointTrajectory:
    """Externally planned trajectory over a named set of joints."""

    joint_names: List[str]
    points: List[JointTrajectoryPoint] = field(default_factory=list)


@dataclass
class RobotTrajectory:
    """Planner output wrapping a joint trajectory."""

    joint_trajectory: JointTrajectory


@dataclass
class ArmJointData:
    """One joint-space waypoint for a paired arm move."""

    side: RobotSide
    arm_pose: List[float]
    time: float


@dataclass
class ArmTaskSpaceData:
    """One task-space waypoint for a paired hand move."""

    side: RobotSide
    pose: Pose
    time: float


def side_name(side: RobotSide) -> str:
    """Lower-case name of a side, e.g. ``"left"``."""
    return side.name.lower()


def arm_group(side: RobotSide) -> str:
    """Joint-group name of the arm on ``side``, e.g. ``"left_arm"``."""
    return f"{side_name(side)}_arm"
