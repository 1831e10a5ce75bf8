"""Whole-body trajectory execution.

A planner trajectory over an arbitrary set of joints is split into chest,
left-arm and right-arm sub-messages of one
:class:`WholeBodyTrajectoryMessage`. Each group's joints must appear in the
trajectory contiguously and in the robot's order. All groups share the
source trajectory's time axis; times are passed through unchanged.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from humanoid_control.control.arm_control import ArmControlInterface
from humanoid_control.control.chest_control import CHEST_GROUP, ChestControlInterface
from humanoid_control.control.control_interface import ControlInterface
from humanoid_control.control.errors import SequenceViolationError, TransformError
from humanoid_control.control.identity import MessageIdGenerator
from humanoid_control.control.joint_limits import JointLimitTable
from humanoid_control.control.messages import (
    JointTrajectory,
    Pose,
    RobotSide,
    RobotTrajectory,
    WholeBodyTrajectoryMessage,
    arm_group,
)
from humanoid_control.control.publication import PublicationSequencer
from humanoid_control.hardware.interfaces import (
    PublisherFactory,
    RobotDescriptionProvider,
    StateProvider,
)
from humanoid_control.utils.geometry import rpy_to_quaternion

logger = logging.getLogger(__name__)

LEFT_ARM_GROUP = arm_group(RobotSide.LEFT)
RIGHT_ARM_GROUP = arm_group(RobotSide.RIGHT)
GROUP_ORDER = (CHEST_GROUP, LEFT_ARM_GROUP, RIGHT_ARM_GROUP)


class WholebodyControlInterface(ControlInterface):
    """Executes combined chest and arm trajectories as one controller message."""

    def __init__(
        self,
        node: PublisherFactory,
        description: RobotDescriptionProvider,
        state_informer: StateProvider,
        id_generator: MessageIdGenerator,
        config: Optional[dict] = None,
        sequencer: Optional[PublicationSequencer] = None,
        joint_limits: Optional[JointLimitTable] = None,
    ):
        """Initialize whole-body control interface.

        The chest and arm builders are created here and share this
        interface's id generator and sequencer.

        Raises:
            ValueError: If the chest group does not have yaw, pitch and roll
                joints, or the arm limits are unusable
        """
        super().__init__(node, description, state_informer, id_generator, config, sequencer)

        self.chest_controller = ChestControlInterface(
            node, description, state_informer, id_generator, self.config, self.sequencer
        )
        self.arm_controller = ArmControlInterface(
            node, description, state_informer, id_generator, self.config, self.sequencer,
            joint_limits=joint_limits,
        )
        self.wholebody_publisher = node.create_publisher(self.topic("whole_body_trajectory"))

        self.group_joint_names: Dict[str, List[str]] = {
            group: description.get_joint_names(group) for group in GROUP_ORDER
        }
        if len(self.group_joint_names[CHEST_GROUP]) != 3:
            raise ValueError(
                f"Chest must have 3 joints (yaw, pitch, roll), got "
                f"{self.group_joint_names[CHEST_GROUP]}"
            )

    def execute_robot_trajectory(self, robot_trajectory: RobotTrajectory) -> bool:
        """Execute the joint trajectory part of a planner result."""
        return self.execute_trajectory(robot_trajectory.joint_trajectory)

    def execute_trajectory(self, trajectory: JointTrajectory) -> bool:
        """Compose and publish one whole-body message for ``trajectory``.

        Nothing is published unless the whole trajectory was parsed
        successfully.

        Args:
            trajectory: Planner trajectory over chest and/or arm joints

        Returns:
            True if the message was published, False otherwise
        """
        msg = self.initialize_wholebody_message()
        try:
            parsed = self.parse_trajectory(trajectory, msg)
        except TransformError as e:
            logger.error(f"Whole-body trajectory aborted: {e}")
            return False

        if not parsed:
            return False

        logger.info(
            f"Publishing whole-body trajectory {msg.unique_id} "
            f"with {len(trajectory.points)} points"
        )
        self.sequencer.publish_and_settle(
            self.wholebody_publisher, msg, self.sequencer.wholebody_settle
        )
        return True

    def initialize_wholebody_message(self) -> WholeBodyTrajectoryMessage:
        """Create a whole-body message with every sub-message disabled.

        Sub-messages keep ``unique_id = 0`` (ignored by the controller) until
        a group of the trajectory populates them.
        """
        return WholeBodyTrajectoryMessage(unique_id=self.next_id())

    def validate_joint_sequence(
        self,
        trajectory_joint_names: Sequence[str],
        joint_names: Sequence[str],
        start: int,
    ) -> bool:
        """Check that ``joint_names`` appear in order starting at ``start``."""
        window = list(trajectory_joint_names[start:start + len(joint_names)])
        return window == list(joint_names)

    def _locate_groups(self, trajectory_joint_names: Sequence[str]) -> Dict[str, int]:
        """Find the offset of each group present in the trajectory.

        Raises:
            SequenceViolationError: If a present group is not contiguous and
                in order
        """
        names = list(trajectory_joint_names)
        offsets: Dict[str, int] = {}
        for group in GROUP_ORDER:
            expected = self.group_joint_names[group]
            if expected[0] not in names:
                continue
            start = names.index(expected[0])
            if not self.validate_joint_sequence(names, expected, start):
                raise SequenceViolationError(
                    f"Joints in the trajectory are not in the expected sequence for {group}: "
                    f"expected {expected} at index {start}"
                )
            offsets[group] = start
        return offsets

    def create_chest_quaternion(self, chest_positions: Sequence[float]) -> np.ndarray:
        """Pelvis-frame chest orientation from (yaw, pitch, roll) joint positions."""
        yaw, pitch, roll = chest_positions
        return rpy_to_quaternion(roll, pitch, yaw)

    def parse_trajectory(
        self,
        trajectory: JointTrajectory,
        msg: WholeBodyTrajectoryMessage,
    ) -> bool:
        """Fill ``msg`` from ``trajectory``.

        Groups whose first joint is absent are skipped and their
        sub-messages stay disabled. Every present group is validated before
        any sub-message is touched.

        Args:
            trajectory: Planner trajectory
            msg: Freshly initialized whole-body message

        Returns:
            True on success, False if the trajectory has no points or the
            joint layout or a point is malformed

        Raises:
            TransformError: If a chest orientation cannot be transformed
        """
        if not trajectory.points:
            logger.warning("Whole-body trajectory has no points")
            return False

        try:
            offsets = self._locate_groups(trajectory.joint_names)
        except SequenceViolationError as e:
            logger.error(str(e))
            return False

        if not offsets:
            logger.warning("Trajectory contains no chest or arm joints")

        arm_messages = {
            LEFT_ARM_GROUP: (RobotSide.LEFT, msg.left_arm_trajectory_message),
            RIGHT_ARM_GROUP: (RobotSide.RIGHT, msg.right_arm_trajectory_message),
        }

        if CHEST_GROUP in offsets:
            self.chest_controller.setup_frame_and_mode(msg.chest_trajectory_message)
        for group, (side, arm_msg) in arm_messages.items():
            if group in offsets:
                self.arm_controller.setup_arm_message(side, arm_msg)

        num_joints = len(trajectory.joint_names)
        for index, point in enumerate(trajectory.points):
            if len(point.positions) != num_joints:
                logger.warning(
                    f"Trajectory point {index} has {len(point.positions)} positions, "
                    f"expected {num_joints}"
                )
                return False

            point_time = float(point.time_from_start)

            if CHEST_GROUP in offsets:
                start = offsets[CHEST_GROUP]
                chest_positions = point.positions[start:start + len(self.group_joint_names[CHEST_GROUP])]
                quaternion = self.create_chest_quaternion(chest_positions)
                self.chest_controller.append_chest_trajectory_point(
                    quaternion, msg.chest_trajectory_message, point_time
                )

            for group, (side, arm_msg) in arm_messages.items():
                if group not in offsets:
                    continue
                start = offsets[group]
                positions = list(point.positions[start:start + len(self.group_joint_names[group])])
                if not self.arm_controller.append_trajectory_point(arm_msg, point_time, positions):
                    return False

        return True

    def get_joint_space_state(self) -> Dict[str, List[float]]:
        """Current positions of every controlled joint group.

        Raises:
            LookupError: If any group's state is unavailable
        """
        return {
            group: self.state_informer.get_joint_positions(group)
            for group in GROUP_ORDER
        }

    def get_task_space_state(self, fixed_frame: Optional[str] = None) -> Pose:
        """Pelvis pose in ``fixed_frame`` (world by default)."""
        return self.state_informer.get_current_pose(self.description.get_frame("pelvis"), fixed_frame)
