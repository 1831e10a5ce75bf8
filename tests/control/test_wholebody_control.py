"""Tests for whole-body trajectory composition."""

import logging

import numpy as np
import pytest

from humanoid_control.control.messages import (
    ExecutionMode,
    JointTrajectory,
    JointTrajectoryPoint,
    RobotTrajectory,
    WholeBodyTrajectoryMessage,
)
from humanoid_control.utils.geometry import quaternions_equivalent, rpy_to_quaternion


def _trajectory(joint_names, times, value=0.1):
    return JointTrajectory(
        joint_names=list(joint_names),
        points=[
            JointTrajectoryPoint(positions=[value * (k + 1)] * len(joint_names), time_from_start=t)
            for k, t in enumerate(times)
        ],
    )


def _published(node, wholebody):
    return node.messages_on(wholebody.topic("whole_body_trajectory"))


def test_initialize_wholebody_message(wholebody):
    """Test every sub-message starts disabled in override mode."""
    msg = wholebody.initialize_wholebody_message()

    assert msg.unique_id != 0
    for sub in (
        msg.left_arm_trajectory_message,
        msg.right_arm_trajectory_message,
        msg.chest_trajectory_message,
        msg.left_foot_trajectory_message,
        msg.right_foot_trajectory_message,
        msg.left_hand_trajectory_message,
        msg.right_hand_trajectory_message,
    ):
        assert sub.unique_id == 0
        assert sub.execution_mode == ExecutionMode.OVERRIDE


def test_chest_only_trajectory(wholebody, node, config):
    """Test a chest-only trajectory leaves both arm sub-messages disabled."""
    trajectory = _trajectory(config["joint_names"]["chest"], [0.5, 1.0])

    assert wholebody.execute_trajectory(trajectory)

    published = _published(node, wholebody)
    assert len(published) == 1
    msg = published[0]
    assert msg.chest_trajectory_message.unique_id != 0
    assert [p.time for p in msg.chest_trajectory_message.taskspace_trajectory_points] == [0.5, 1.0]
    for arm_msg in (msg.left_arm_trajectory_message, msg.right_arm_trajectory_message):
        assert arm_msg.unique_id == 0
        assert arm_msg.joint_trajectory_messages == []


def test_chest_quaternion_from_yaw_pitch_roll(wholebody, node, config):
    """Test chest joints are read in yaw, pitch, roll order."""
    trajectory = JointTrajectory(
        joint_names=config["joint_names"]["chest"],
        points=[JointTrajectoryPoint(positions=[0.3, 0.2, 0.1], time_from_start=1.0)],
    )

    assert wholebody.execute_trajectory(trajectory)

    point = _published(node, wholebody)[0].chest_trajectory_message.taskspace_trajectory_points[0]
    assert quaternions_equivalent(point.orientation, rpy_to_quaternion(0.1, 0.2, 0.3))


def test_combined_trajectory_partitions_groups(wholebody, node, config):
    """Test each group receives its own column slice on the shared time axis."""
    names = ["hokuyo_joint"] + config["joint_names"]["right_arm"] + config["joint_names"]["left_arm"]
    right_values = [0.1, 0.2, 0.3, 0.4, 0.5, 0.1, 0.2]
    left_values = [-0.1, -0.2, -0.3, -0.4, -0.5, -0.1, -0.2]
    trajectory = JointTrajectory(
        joint_names=names,
        points=[
            JointTrajectoryPoint(positions=[9.0] + right_values + left_values, time_from_start=0.4),
            JointTrajectoryPoint(positions=[9.0] + right_values + left_values, time_from_start=0.8),
        ],
    )

    assert wholebody.execute_trajectory(trajectory)

    msg = _published(node, wholebody)[0]
    right = msg.right_arm_trajectory_message
    left = msg.left_arm_trajectory_message
    assert right.unique_id != 0 and left.unique_id != 0
    assert msg.chest_trajectory_message.unique_id == 0

    assert [j.trajectory_points[0].position for j in right.joint_trajectory_messages] == pytest.approx(right_values)
    assert [j.trajectory_points[0].position for j in left.joint_trajectory_messages] == pytest.approx(left_values)
    for arm_msg in (right, left):
        for joint in arm_msg.joint_trajectory_messages:
            assert [p.time for p in joint.trajectory_points] == [0.4, 0.8]
            assert joint.unique_id == arm_msg.unique_id


def test_arm_positions_are_clamped(wholebody, node, config):
    """Test positions beyond the limits are pinned in whole-body messages too."""
    names = config["joint_names"]["left_arm"]
    trajectory = JointTrajectory(
        joint_names=names,
        points=[JointTrajectoryPoint(positions=[5.0] * 7, time_from_start=1.0)],
    )

    assert wholebody.execute_trajectory(trajectory)

    left = _published(node, wholebody)[0].left_arm_trajectory_message
    assert left.joint_trajectory_messages[0].trajectory_points[0].position == pytest.approx(1.99)


def test_out_of_order_group_aborts(wholebody, node, config, caplog):
    """Test a misordered left-arm group aborts composition and publishes nothing."""
    names = list(config["joint_names"]["chest"]) + list(config["joint_names"]["left_arm"])
    names[4], names[5] = names[5], names[4]
    trajectory = _trajectory(names, [1.0])

    with caplog.at_level(logging.ERROR):
        assert not wholebody.execute_trajectory(trajectory)

    assert "not in the expected sequence" in caplog.text
    assert _published(node, wholebody) == []

    msg = wholebody.initialize_wholebody_message()
    assert not wholebody.parse_trajectory(trajectory, msg)
    assert msg.left_arm_trajectory_message.unique_id == 0
    assert msg.chest_trajectory_message.unique_id == 0


def test_truncated_group_aborts(wholebody, node, config):
    """Test a group cut off at the end of the joint list is a sequence violation."""
    names = config["joint_names"]["right_arm"][:4]

    assert not wholebody.execute_trajectory(_trajectory(names, [1.0]))
    assert _published(node, wholebody) == []


def test_empty_trajectory_aborts(wholebody, node, config):
    """Test a trajectory without points publishes nothing and leaves limbs disabled."""
    trajectory = JointTrajectory(joint_names=config["joint_names"]["left_arm"], points=[])

    assert not wholebody.execute_trajectory(trajectory)
    assert _published(node, wholebody) == []

    msg = wholebody.initialize_wholebody_message()
    assert not wholebody.parse_trajectory(trajectory, msg)
    assert msg.left_arm_trajectory_message.unique_id == 0


def test_malformed_point_aborts(wholebody, node, config):
    """Test a point with too few positions aborts composition."""
    names = config["joint_names"]["left_arm"]
    trajectory = JointTrajectory(
        joint_names=names,
        points=[
            JointTrajectoryPoint(positions=[0.0] * 7, time_from_start=1.0),
            JointTrajectoryPoint(positions=[0.0] * 5, time_from_start=2.0),
        ],
    )

    assert not wholebody.execute_trajectory(trajectory)
    assert _published(node, wholebody) == []


def test_transform_failure_aborts(wholebody, node, state_informer, config):
    """Test a missing pelvis transform fails the whole composition."""
    del state_informer.frames[config["frames"]["pelvis"]]
    names = config["joint_names"]["left_arm"] + config["joint_names"]["chest"]

    assert not wholebody.execute_trajectory(_trajectory(names, [1.0]))
    assert node.published == []


def test_publish_settles(wholebody, clock, config):
    """Test the whole-body command is followed by the settle delay."""
    assert wholebody.execute_trajectory(_trajectory(config["joint_names"]["left_arm"], [1.0]))

    assert clock.sleeps == [0.1]


def test_execute_robot_trajectory(wholebody, node, config):
    """Test planner results are unwrapped to their joint trajectory."""
    robot_trajectory = RobotTrajectory(
        joint_trajectory=_trajectory(config["joint_names"]["right_arm"], [1.0, 2.0])
    )

    assert wholebody.execute_robot_trajectory(robot_trajectory)
    assert isinstance(_published(node, wholebody)[0], WholeBodyTrajectoryMessage)


def test_ids_unique_within_message(wholebody, node, config):
    """Test the shared generator never repeats an id inside one command."""
    names = (
        config["joint_names"]["chest"]
        + config["joint_names"]["left_arm"]
        + config["joint_names"]["right_arm"]
    )
    assert wholebody.execute_trajectory(_trajectory(names, [0.5, 1.0, 1.5]))

    msg = _published(node, wholebody)[0]
    ids = [msg.unique_id, msg.chest_trajectory_message.unique_id]
    ids += [p.unique_id for p in msg.chest_trajectory_message.taskspace_trajectory_points]
    for arm_msg in (msg.left_arm_trajectory_message, msg.right_arm_trajectory_message):
        ids.append(arm_msg.unique_id)
        ids += [p.unique_id for j in arm_msg.joint_trajectory_messages for p in j.trajectory_points]

    assert 0 not in ids
    assert len(ids) == len(set(ids))


def test_empty_trajectory_publishes_disabled_message(wholebody, node):
    """Test a trajectory with no known joints still yields a message with disabled limbs."""
    assert wholebody.execute_trajectory(_trajectory(["hokuyo_joint"], [1.0]))

    msg = _published(node, wholebody)[0]
    assert msg.left_arm_trajectory_message.unique_id == 0
    assert msg.right_arm_trajectory_message.unique_id == 0
    assert msg.chest_trajectory_message.unique_id == 0


def test_joint_space_state(wholebody):
    """Test the whole-body state covers every controlled group."""
    state = wholebody.get_joint_space_state()

    assert set(state) == {"chest", "left_arm", "right_arm"}
    np.testing.assert_array_almost_equal(wholebody.get_task_space_state().position, [0.0, 0.0, 1.0])
