"""Tests for waypoint timing helpers."""

import numpy as np
import pytest

from humanoid_control.control.errors import MalformedInputError
from humanoid_control.control.messages import Pose, RobotSide
from humanoid_control.control.trajectory_planner import (
    generate_task_space_data,
    validate_waypoints,
    waypoint_times,
)


@pytest.mark.parametrize("total_time,count", [(1.0, 3), (2.5, 4), (7.0, 1)])
def test_waypoint_times_evenly_spaced(total_time, count):
    """Test the k-th waypoint is reached at total_time / n * k."""
    times = waypoint_times(total_time, count)

    assert times == [total_time / count * k for k in range(1, count + 1)]
    assert times[-1] == pytest.approx(total_time)


def test_waypoint_times_rejects_empty():
    """Test an empty waypoint list cannot be timed."""
    with pytest.raises(MalformedInputError):
        waypoint_times(1.0, 0)


def test_validate_waypoints():
    """Test waypoint validation catches empty lists and wrong lengths."""
    validate_waypoints([[0.0] * 7, [1.0] * 7], 7)

    with pytest.raises(MalformedInputError):
        validate_waypoints([], 7)

    with pytest.raises(MalformedInputError):
        validate_waypoints([[0.0] * 7, [1.0] * 6], 7)


def test_generate_task_space_data():
    """Test poses are copied and timed evenly."""
    poses = [
        Pose(position=np.array([0.1, 0.0, 0.0])),
        Pose(position=np.array([0.2, 0.0, 0.0])),
    ]

    data = generate_task_space_data(poses, RobotSide.LEFT, 2.0)

    assert [d.time for d in data] == [1.0, 2.0]
    assert all(d.side == RobotSide.LEFT for d in data)
    np.testing.assert_array_almost_equal(data[1].pose.position, [0.2, 0.0, 0.0])

    # Copies, not references
    poses[0].position[0] = 9.0
    assert data[0].pose.position[0] == pytest.approx(0.1)


def test_generate_task_space_data_zero_time():
    """Test a zero duration sends every pose immediately."""
    data = generate_task_space_data([Pose(), Pose()], RobotSide.RIGHT, 0.0)

    assert [d.time for d in data] == [0.0, 0.0]
    assert generate_task_space_data([], RobotSide.RIGHT, 1.0) == []
