"""Chest orientation control.

Orientations are commanded in the pelvis frame and converted to the world
frame before they are put on the wire.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from humanoid_control.control.control_interface import ControlInterface
from humanoid_control.control.errors import TransformError
from humanoid_control.control.identity import MessageIdGenerator
from humanoid_control.control.messages import (
    BodyPart,
    ChestTrajectoryMessage,
    ExecutionMode,
    GoHomeMessage,
    Pose,
    SO3TrajectoryPoint,
)
from humanoid_control.control.publication import PublicationSequencer
from humanoid_control.hardware.interfaces import (
    PublisherFactory,
    RobotDescriptionProvider,
    StateProvider,
)
from humanoid_control.utils.geometry import rpy_to_quaternion

logger = logging.getLogger(__name__)

CHEST_GROUP = "chest"


class ChestControlInterface(ControlInterface):
    """Builds and publishes chest orientation trajectories."""

    def __init__(
        self,
        node: PublisherFactory,
        description: RobotDescriptionProvider,
        state_informer: StateProvider,
        id_generator: MessageIdGenerator,
        config: Optional[dict] = None,
        sequencer: Optional[PublicationSequencer] = None,
    ):
        super().__init__(node, description, state_informer, id_generator, config, sequencer)

        self.chest_joint_names = description.get_joint_names(CHEST_GROUP)
        self.chest_traj_publisher = node.create_publisher(self.topic("chest_trajectory"))
        self.home_position_publisher = node.create_publisher(self.topic("go_home"))

    def setup_frame_and_mode(
        self,
        msg: ChestTrajectoryMessage,
        mode: ExecutionMode = ExecutionMode.OVERRIDE,
    ) -> None:
        """Give ``msg`` a fresh id and the requested execution mode."""
        msg.unique_id = self.next_id()
        msg.execution_mode = mode

    def _to_world(self, quaternion: Sequence[float]) -> np.ndarray:
        pelvis = self.description.get_frame("pelvis")
        world = self.description.get_frame("world")
        try:
            return np.asarray(
                self.state_informer.transform_quaternion(quaternion, pelvis, world),
                dtype=float,
            )
        except LookupError as e:
            raise TransformError(f"Cannot transform chest orientation from {pelvis} to {world}: {e}") from e

    def append_chest_trajectory_point(
        self,
        quaternion: Sequence[float],
        msg: ChestTrajectoryMessage,
        time: float,
    ) -> None:
        """Append a pelvis-frame orientation to ``msg`` as a world-frame point.

        Args:
            quaternion: Chest orientation in the pelvis frame (x, y, z, w)
            msg: Chest message to extend
            time: Time of the point from trajectory start (seconds)

        Raises:
            TransformError: If the pelvis-to-world transform is unavailable
        """
        orientation = self._to_world(quaternion)
        msg.taskspace_trajectory_points.append(
            SO3TrajectoryPoint(
                time=time,
                orientation=orientation,
                unique_id=self.next_id(),
            )
        )

    def generate_message(
        self,
        quaternion: Sequence[float],
        time: float,
        execution_mode: ExecutionMode = ExecutionMode.OVERRIDE,
    ) -> ChestTrajectoryMessage:
        """Build a single-point chest message.

        Raises:
            TransformError: If the pelvis-to-world transform is unavailable
        """
        msg = ChestTrajectoryMessage()
        self.setup_frame_and_mode(msg, execution_mode)
        self.append_chest_trajectory_point(quaternion, msg, time)
        return msg

    def generate_message_from_points(
        self,
        chest_trajectory: Sequence[SO3TrajectoryPoint],
        execution_mode: ExecutionMode = ExecutionMode.OVERRIDE,
    ) -> ChestTrajectoryMessage:
        """Build a chest message from pelvis-frame trajectory points.

        The input points are not modified; the message holds world-frame
        copies.

        Raises:
            TransformError: If the pelvis-to-world transform is unavailable
        """
        msg = ChestTrajectoryMessage()
        self.setup_frame_and_mode(msg, execution_mode)
        for point in chest_trajectory:
            msg.taskspace_trajectory_points.append(
                SO3TrajectoryPoint(
                    time=point.time,
                    orientation=self._to_world(point.orientation),
                    angular_velocity=np.array(point.angular_velocity, dtype=float),
                    unique_id=point.unique_id or self.next_id(),
                )
            )
        return msg

    def control_chest(
        self,
        roll: float,
        pitch: float,
        yaw: float,
        time: float,
        execution_mode: ExecutionMode = ExecutionMode.OVERRIDE,
    ) -> bool:
        """Rotate the chest to roll/pitch/yaw angles in the pelvis frame.

        Returns:
            True if published, False if the transform was unavailable
        """
        quaternion = rpy_to_quaternion(roll, pitch, yaw)
        return self.control_chest_quaternion(quaternion, time, execution_mode)

    def control_chest_quaternion(
        self,
        quaternion: Sequence[float],
        time: float,
        execution_mode: ExecutionMode = ExecutionMode.OVERRIDE,
    ) -> bool:
        """Rotate the chest to a pelvis-frame orientation.

        Returns:
            True if published, False if the transform was unavailable
        """
        try:
            msg = self.generate_message(quaternion, time, execution_mode)
        except TransformError as e:
            logger.error(str(e))
            return False

        self.chest_traj_publisher.publish(msg)
        return True

    def execute_message(self, msg: ChestTrajectoryMessage) -> None:
        """Publish an already assembled chest message."""
        self.chest_traj_publisher.publish(msg)

    def reset_pose(self, time: float) -> None:
        """Send the chest to its home orientation and wait for it to settle."""
        go_home = GoHomeMessage(
            body_part=BodyPart.CHEST,
            trajectory_time=time,
            unique_id=self.next_id(),
        )
        self.sequencer.publish_and_settle(
            self.home_position_publisher, go_home, self.sequencer.go_home_settle
        )

    def get_chest_orientation(self) -> np.ndarray:
        """Torso orientation relative to the pelvis.

        Raises:
            LookupError: If the torso pose is unavailable
        """
        pose = self.state_informer.get_current_pose(
            self.description.get_frame("torso"),
            self.description.get_frame("pelvis"),
        )
        return np.asarray(pose.orientation, dtype=float)

    def get_joint_space_state(self) -> List[float]:
        """Current chest joint positions.

        Raises:
            LookupError: If the joint state is unavailable
        """
        return self.state_informer.get_joint_positions(CHEST_GROUP)

    def get_task_space_state(self, fixed_frame: Optional[str] = None) -> Pose:
        """Torso pose in ``fixed_frame`` (world by default)."""
        return self.state_informer.get_current_pose(self.description.get_frame("torso"), fixed_frame)
