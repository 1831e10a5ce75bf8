"""Arm control in joint space and task space.

Joint-space commands are assembled into :class:`ArmTrajectoryMessage`
objects: one point list per joint, each position pinned into the joint's
limits, each point stamped with a fresh id. Task-space commands become
:class:`HandTrajectoryMessage` objects and are not limit-checked.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from humanoid_control.control.control_interface import ControlInterface
from humanoid_control.control.errors import JointLimitViolation, MalformedInputError
from humanoid_control.control.identity import MessageIdGenerator
from humanoid_control.control.joint_limits import JointLimitTable
from humanoid_control.control.messages import (
    ArmJointData,
    ArmTaskSpaceData,
    ArmTrajectoryMessage,
    BaseForControl,
    BodyPart,
    Direction,
    ExecutionMode,
    GoHomeMessage,
    HandTrajectoryMessage,
    JointTrajectory,
    JointTrajectoryPoint,
    OneDoFJointTrajectory,
    Pose,
    RobotSide,
    SE3TrajectoryPoint,
    TrajectoryPoint1D,
    arm_group,
    side_name,
)
from humanoid_control.control.publication import PublicationSequencer
from humanoid_control.control.trajectory_planner import (
    generate_task_space_data,
    validate_waypoints,
    waypoint_times,
)
from humanoid_control.hardware.interfaces import (
    PublisherFactory,
    RobotDescriptionProvider,
    StateProvider,
)

logger = logging.getLogger(__name__)

HOME_POSE = "home"
ZERO_POSE = "zero"

# (axis, sign) of the position change for each nudge direction
NUDGE_AXES = {
    Direction.FRONT: (0, 1.0),
    Direction.BACK: (0, -1.0),
    Direction.LEFT: (1, 1.0),
    Direction.RIGHT: (1, -1.0),
    Direction.UP: (2, 1.0),
    Direction.DOWN: (2, -1.0),
}

# In the palm frame the forward axis is y and the lateral axis is x, and both
# are mirrored between the two hands.
LOCAL_NUDGE_AXES = {
    Direction.FRONT: (1, 1.0, True),
    Direction.BACK: (1, -1.0, True),
    Direction.LEFT: (0, 1.0, True),
    Direction.RIGHT: (0, -1.0, True),
    Direction.UP: (2, 1.0, False),
    Direction.DOWN: (2, -1.0, False),
}


class ArmControlInterface(ControlInterface):
    """Builds and publishes arm trajectories."""

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
        """Initialize arm control interface.

        Args:
            node: Creates publishers for controller topics
            description: Joint names, limits and frames of the robot
            state_informer: Current joint state and transforms
            id_generator: Shared source of message ids
            config: Robot configuration (packaged defaults if None)
            sequencer: Publication sequencer (built from config if None)
            joint_limits: Limit table (loaded from ``description`` if None)

        Raises:
            ValueError: If the description's joint limits are unusable
        """
        super().__init__(node, description, state_informer, id_generator, config, sequencer)

        if joint_limits is None:
            joint_limits = JointLimitTable.load(
                description,
                margin=float(self.config.get("joint_limit_margin", 0.01)),
                strict=bool(self.config.get("strict_joint_limits", False)),
            )
        self.joint_limits = joint_limits
        self.num_arm_joints = joint_limits.joint_count
        self.zero_pose = [0.0] * self.num_arm_joints

        self.arm_trajectory_publisher = node.create_publisher(self.topic("arm_trajectory"))
        self.task_space_trajectory_publisher = node.create_publisher(self.topic("hand_trajectory"))
        self.home_position_publisher = node.create_publisher(self.topic("go_home"))

    def setup_arm_message(
        self,
        side: RobotSide,
        msg: Optional[ArmTrajectoryMessage] = None,
    ) -> ArmTrajectoryMessage:
        """Reset ``msg`` to an empty override trajectory with a fresh id.

        Args:
            side: Arm the message addresses
            msg: Message to reset in place (a new one is created if None)

        Returns:
            The prepared message
        """
        if msg is None:
            msg = ArmTrajectoryMessage()
        msg.joint_trajectory_messages = [OneDoFJointTrajectory() for _ in range(self.num_arm_joints)]
        msg.robot_side = side
        msg.execution_mode = ExecutionMode.OVERRIDE
        msg.unique_id = self.next_id()
        return msg

    def _check_message(self, msg: ArmTrajectoryMessage) -> bool:
        if len(msg.joint_trajectory_messages) != self.num_arm_joints:
            logger.warning(
                f"Arm message has {len(msg.joint_trajectory_messages)} joint trajectories, "
                f"expected {self.num_arm_joints}; call setup_arm_message() first"
            )
            return False
        return True

    def _clamp_positions(self, side: RobotSide, positions: Sequence[float]) -> Optional[List[float]]:
        try:
            return [
                self.joint_limits.clamp(side, i, float(p))
                for i, p in enumerate(positions)
            ]
        except (JointLimitViolation, MalformedInputError) as e:
            logger.error(f"Rejecting arm point: {e}")
            return None

    def append_trajectory_point(
        self,
        msg: ArmTrajectoryMessage,
        time: float,
        positions: Sequence[float],
    ) -> bool:
        """Append one joint-space waypoint to an arm message.

        Positions outside the joint limits are pinned to the nearest limit.
        Every joint's trajectory takes the message's id; every point gets a
        fresh one.

        Args:
            msg: Prepared arm message (see :meth:`setup_arm_message`)
            time: Time of the waypoint from trajectory start (seconds)
            positions: One position per arm joint

        Returns:
            True if the point was appended; False (and ``msg`` untouched) if
            the number of positions is wrong
        """
        if len(positions) != self.num_arm_joints:
            logger.warning(
                f"Check number of trajectory points. Received {len(positions)} "
                f"expected {self.num_arm_joints}"
            )
            return False
        if not self._check_message(msg):
            return False

        clamped = self._clamp_positions(msg.robot_side, positions)
        if clamped is None:
            return False

        for joint, position in zip(msg.joint_trajectory_messages, clamped):
            joint.trajectory_points.append(
                TrajectoryPoint1D(
                    time=time,
                    position=position,
                    velocity=0.0,
                    unique_id=self.next_id(),
                )
            )
            joint.unique_id = msg.unique_id

        return True

    def append_external_point(
        self,
        msg: ArmTrajectoryMessage,
        point: JointTrajectoryPoint,
    ) -> bool:
        """Append a planner-supplied trajectory point to an arm message.

        Same limit policy as :meth:`append_trajectory_point`, but velocities
        and timing come from ``point`` itself.

        Args:
            msg: Prepared arm message
            point: External point; empty ``velocities`` means zero velocity

        Returns:
            True if the point was appended, False otherwise
        """
        if len(point.positions) != self.num_arm_joints:
            logger.warning(
                f"Check number of trajectory points. Received {len(point.positions)} "
                f"expected {self.num_arm_joints}"
            )
            return False

        velocities = list(point.velocities) or [0.0] * self.num_arm_joints
        if len(velocities) != self.num_arm_joints:
            logger.warning(
                f"Trajectory point has {len(velocities)} velocities, expected {self.num_arm_joints}"
            )
            return False
        if not self._check_message(msg):
            return False

        joint_names = self.description.get_joint_names(arm_group(msg.robot_side))
        limits = self.joint_limits.limits(msg.robot_side)
        for name, position, limit in zip(joint_names, point.positions, limits):
            logger.debug(
                f"Joint : {name} - theta : {position:0.8f} "
                f"limits - <{limit.lower:0.3f} {limit.upper:0.3f}>"
            )

        clamped = self._clamp_positions(msg.robot_side, point.positions)
        if clamped is None:
            return False

        for joint, position, velocity in zip(msg.joint_trajectory_messages, clamped, velocities):
            joint.trajectory_points.append(
                TrajectoryPoint1D(
                    time=float(point.time_from_start),
                    position=position,
                    velocity=float(velocity),
                    unique_id=self.next_id(),
                )
            )
            joint.unique_id = msg.unique_id

        return True

    def generate_arm_message(
        self,
        side: RobotSide,
        waypoints: Sequence[Sequence[float]],
        total_time: float,
        msg: Optional[ArmTrajectoryMessage] = None,
    ) -> Optional[ArmTrajectoryMessage]:
        """Build an arm message from waypoints spread evenly over ``total_time``.

        The k-th of n waypoints is timed at ``total_time / n * k``.

        Args:
            side: Arm to move
            waypoints: Joint positions, one list per waypoint
            total_time: Duration of the whole trajectory (seconds)
            msg: Message to fill in place (a new one is created if None)

        Returns:
            The filled message, or None if any waypoint is malformed (in
            which case ``msg`` is left untouched)
        """
        try:
            validate_waypoints(waypoints, self.num_arm_joints)
        except MalformedInputError as e:
            logger.warning(f"Check number of trajectory points: {e}")
            return None

        msg = self.setup_arm_message(side, msg)
        for waypoint, time in zip(waypoints, waypoint_times(total_time, len(waypoints))):
            if not self.append_trajectory_point(msg, time, waypoint):
                return None
        return msg

    def generate_arm_message_from_joint_messages(
        self,
        side: RobotSide,
        joint_messages: Sequence[OneDoFJointTrajectory],
        msg: Optional[ArmTrajectoryMessage] = None,
    ) -> ArmTrajectoryMessage:
        """Wrap pre-built joint trajectories in an arm message, unchecked.

        Args:
            side: Arm the trajectories are for
            joint_messages: Per-joint trajectories, used verbatim
            msg: Message to fill in place (a new one is created if None)

        Returns:
            Override-mode arm message with a fresh id
        """
        if msg is None:
            msg = ArmTrajectoryMessage()
        msg.execution_mode = ExecutionMode.OVERRIDE
        msg.joint_trajectory_messages = list(joint_messages)
        msg.robot_side = side
        msg.unique_id = self.next_id()
        return msg

    def pose_to_se3_point(self, pose: Pose, time: float = 0.0) -> SE3TrajectoryPoint:
        """Copy a pose into a task-space trajectory point with a fresh id."""
        return SE3TrajectoryPoint(
            time=time,
            position=np.array(pose.position, dtype=float),
            orientation=np.array(pose.orientation, dtype=float),
            unique_id=self.next_id(),
        )

    def move_to_default_pose(self, side: RobotSide, time: float) -> None:
        """Send the arm to its home configuration and wait for it to settle."""
        go_home = GoHomeMessage(
            body_part=BodyPart.ARM,
            robot_side=side,
            trajectory_time=time,
            unique_id=self.next_id(),
        )
        logger.info(f"Moving {side_name(side)} arm to default pose")
        self.sequencer.publish_and_settle(
            self.home_position_publisher, go_home, self.sequencer.go_home_settle
        )

    def move_to_zero_pose(self, side: RobotSide, time: float) -> bool:
        """Move every joint of the arm to 0 (clamped into its limits).

        Returns:
            True if published, False if the zero point was rejected
        """
        msg = self.setup_arm_message(side)
        if not self.append_trajectory_point(msg, time, self.zero_pose):
            return False
        self.arm_trajectory_publisher.publish(msg)
        return True

    def move_to_named_pose(self, side: RobotSide, pose_tag: str, time: float) -> bool:
        """Move the arm to a named pose and block for the settle time.

        Args:
            side: Arm to move
            pose_tag: ``"home"`` or ``"zero"``
            time: Trajectory duration (seconds)

        Returns:
            True if the tag is known and the move was sent, False otherwise
        """
        tag = pose_tag.lower()
        if tag == HOME_POSE:
            self.move_to_default_pose(side, time)
        elif tag == ZERO_POSE:
            if not self.move_to_zero_pose(side, time):
                return False
            self.sequencer.sleep(self.sequencer.go_home_settle)
        else:
            logger.warning(f"Unknown arm pose '{pose_tag}'")
            return False
        return True

    def move_arm_joints(
        self,
        side: RobotSide,
        waypoints: Sequence[Sequence[float]],
        time: float,
    ) -> bool:
        """Move one arm through joint waypoints over ``time`` seconds.

        Returns:
            True if published, False if any waypoint is malformed
        """
        msg = self.generate_arm_message(side, waypoints, time)
        if msg is None:
            return False
        self.arm_trajectory_publisher.publish(msg)
        return True

    def move_arms_joints(self, arm_data: Sequence[ArmJointData]) -> bool:
        """Move both arms together.

        Each entry carries its own side and time. The right arm message is
        published first, followed by the left after the pair delay.

        Returns:
            True if published, False if ``arm_data`` is empty or any entry
            has the wrong joint count
        """
        if not arm_data:
            logger.warning("No arm data to move")
            return False

        for data in arm_data:
            if len(data.arm_pose) != self.num_arm_joints:
                logger.warning(
                    f"Check number of trajectory points. Received {len(data.arm_pose)} "
                    f"expected {self.num_arm_joints}"
                )
                return False

        messages = {}
        for data in arm_data:
            if data.side not in messages:
                messages[data.side] = self.setup_arm_message(data.side)
            if not self.append_trajectory_point(messages[data.side], data.time, data.arm_pose):
                return False

        self.sequencer.publish_pair(
            self.arm_trajectory_publisher,
            right=messages.get(RobotSide.RIGHT),
            left=messages.get(RobotSide.LEFT),
        )
        return True

    def move_arm_message(self, msg: ArmTrajectoryMessage) -> None:
        """Publish an already assembled arm message."""
        self.arm_trajectory_publisher.publish(msg)

    def move_arm_trajectory(self, side: RobotSide, trajectory: JointTrajectory) -> bool:
        """Execute a planner trajectory on one arm.

        Args:
            side: Arm to move
            trajectory: Trajectory whose points cover exactly the arm's joints

        Returns:
            True if published, False if the trajectory has no points or any
            point is malformed
        """
        if not trajectory.points:
            logger.warning(f"Empty trajectory for {side_name(side)} arm")
            return False

        msg = self.setup_arm_message(side)
        for point in trajectory.points:
            if not self.append_external_point(msg, point):
                return False

        logger.info("Publishing Arm Trajectory")
        self.arm_trajectory_publisher.publish(msg)
        return True

    def move_arm_joint(
        self,
        side: RobotSide,
        joint_number: int,
        target_angle: float,
        time: float,
    ) -> bool:
        """Move a single joint, holding the others at their current positions.

        Args:
            side: Arm to move
            joint_number: Index of the joint in the arm chain (from 0)
            target_angle: Target position (radians)
            time: Trajectory duration (seconds)

        Returns:
            False if the current arm state is unavailable or the joint index
            is invalid, True otherwise
        """
        try:
            positions = self.get_joint_space_state(side)
        except LookupError as e:
            logger.warning(f"Cannot read {side_name(side)} arm state: {e}")
            return False

        if not 0 <= joint_number < len(positions):
            logger.warning(f"Joint number {joint_number} out of range for {side_name(side)} arm")
            return False

        logger.debug(f"Current {side_name(side)} arm positions: {positions}")
        positions[joint_number] = target_angle
        return self.move_arm_joints(side, [positions], time)

    def move_arm_in_task_space(
        self,
        side: RobotSide,
        pose: Pose,
        time: float,
        base_for_control: BaseForControl = BaseForControl.CHEST,
    ) -> None:
        """Move one hand to ``pose`` in ``time`` seconds."""
        point = self.pose_to_se3_point(pose, time)
        self.move_arm_in_task_space_message(side, point, base_for_control)

    def move_arm_in_task_space_message(
        self,
        side: RobotSide,
        point: SE3TrajectoryPoint,
        base_for_control: BaseForControl = BaseForControl.CHEST,
    ) -> None:
        """Publish a single-point hand trajectory."""
        msg = HandTrajectoryMessage(
            robot_side=side,
            taskspace_trajectory_points=[point],
            base_for_control=base_for_control,
            execution_mode=ExecutionMode.OVERRIDE,
            unique_id=self.next_id(),
        )
        self.task_space_trajectory_publisher.publish(msg)

    def move_arm_through_poses(
        self,
        side: RobotSide,
        poses: Sequence[Pose],
        time: float,
        base_for_control: BaseForControl = BaseForControl.CHEST,
    ) -> bool:
        """Move one hand through world-frame poses spread evenly over ``time``.

        Args:
            side: Hand to move
            poses: Hand poses in order
            time: Total duration; 0 sends every pose with time 0
            base_for_control: Frame the controller tracks the hand in

        Returns:
            True if published, False if ``poses`` is empty
        """
        arm_data = generate_task_space_data(poses, side, time)
        if not arm_data:
            logger.warning(f"No poses to move the {side_name(side)} hand through")
            return False

        msg = HandTrajectoryMessage(
            robot_side=side,
            taskspace_trajectory_points=[
                self.pose_to_se3_point(data.pose, data.time) for data in arm_data
            ],
            base_for_control=base_for_control,
            execution_mode=ExecutionMode.OVERRIDE,
            unique_id=self.next_id(),
        )
        self.task_space_trajectory_publisher.publish(msg)
        return True

    def move_arms_in_task_space(
        self,
        arm_data: Sequence[ArmTaskSpaceData],
        base_for_control: BaseForControl = BaseForControl.CHEST,
    ) -> None:
        """Move both hands through task-space waypoints.

        Both hand messages are published, right first, then left after the
        pair delay.
        """
        msg_l = HandTrajectoryMessage(
            robot_side=RobotSide.LEFT,
            base_for_control=base_for_control,
            execution_mode=ExecutionMode.OVERRIDE,
            unique_id=self.next_id(),
        )
        msg_r = HandTrajectoryMessage(
            robot_side=RobotSide.RIGHT,
            base_for_control=base_for_control,
            execution_mode=ExecutionMode.OVERRIDE,
            unique_id=self.next_id(),
        )

        for data in arm_data:
            target = msg_r if data.side == RobotSide.RIGHT else msg_l
            target.taskspace_trajectory_points.append(self.pose_to_se3_point(data.pose, data.time))

        self.sequencer.publish_pair(self.task_space_trajectory_publisher, right=msg_r, left=msg_l)

    def nudge_arm(
        self,
        side: RobotSide,
        direction: Direction,
        nudge_step: float = 0.05,
    ) -> bool:
        """Shift the end effector by ``nudge_step`` along a pelvis-frame axis.

        Returns:
            False if the current end-effector pose is unavailable
        """
        ee_frame = self.description.get_frame(f"{side_name(side)}_ee")
        try:
            pose = self.state_informer.get_current_pose(ee_frame, self.description.get_frame("pelvis"))
        except LookupError as e:
            logger.warning(f"Cannot nudge {side_name(side)} arm: {e}")
            return False

        logger.info(
            f"Palm pose in pelvis frame: x={pose.position[0]:.2f} "
            f"y={pose.position[1]:.2f} z={pose.position[2]:.2f}"
        )
        axis, sign = NUDGE_AXES[direction]
        pose.position = np.array(pose.position, dtype=float)
        pose.position[axis] += sign * nudge_step

        self.move_arm_in_task_space(side, pose, 0.0)
        return True

    def nudge_arm_local(
        self,
        side: RobotSide,
        direction: Direction,
        nudge_step: float = 0.05,
    ) -> bool:
        """Shift the palm by ``nudge_step`` along its own frame's axes.

        Returns:
            False if the palm pose or a transform is unavailable
        """
        palm_frame = self.description.get_frame(f"{side_name(side)}_palm")
        world_frame = self.description.get_frame("world")
        sign_inverter = 1.0 if side == RobotSide.LEFT else -1.0

        try:
            pose = self.state_informer.get_current_pose(palm_frame, world_frame)
            local = self.state_informer.transform_pose(pose, world_frame, palm_frame)
            axis, sign, mirrored = LOCAL_NUDGE_AXES[direction]
            step = sign * nudge_step * (sign_inverter if mirrored else 1.0)
            local.position = np.array(local.position, dtype=float)
            local.position[axis] += step
            target = self.state_informer.transform_pose(local, palm_frame, world_frame)
        except LookupError as e:
            logger.warning(f"Cannot nudge {side_name(side)} palm: {e}")
            return False

        logger.debug(f"Nudged {side_name(side)} palm to {target.position}")
        self.move_arm_in_task_space(side, target, 0.0)
        return True

    def get_joint_space_state(self, side: RobotSide) -> List[float]:
        """Current joint positions of the arm.

        Raises:
            LookupError: If the joint state is unavailable
        """
        return self.state_informer.get_joint_positions(arm_group(side))

    def get_task_space_state(self, side: RobotSide, fixed_frame: Optional[str] = None) -> Pose:
        """Current end-effector pose, in ``fixed_frame`` (world by default).

        Raises:
            LookupError: If the pose is unavailable
        """
        ee_frame = self.description.get_frame(f"{side_name(side)}_ee")
        return self.state_informer.get_current_pose(ee_frame, fixed_frame)
