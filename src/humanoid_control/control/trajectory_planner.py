"""Waypoint timing for joint-space and task-space trajectories.

Waypoints handed in without explicit times are spread evenly over the
requested duration: the k-th of n waypoints (1-indexed) is reached at
``total_time / n * k``.
"""

from typing import List, Sequence

from humanoid_control.control.errors import MalformedInputError
from humanoid_control.control.messages import ArmTaskSpaceData, Pose, RobotSide


def waypoint_times(total_time: float, count: int) -> List[float]:
    """Evenly spaced arrival times for ``count`` waypoints.

    Args:
        total_time: Duration of the whole trajectory (seconds)
        count: Number of waypoints

    Returns:
        List of ``count`` times, the last one equal to ``total_time``

    Raises:
        MalformedInputError: If ``count`` is not positive
    """
    if count <= 0:
        raise MalformedInputError("Cannot time an empty waypoint list")
    return [total_time / count * k for k in range(1, count + 1)]


def validate_waypoints(
    waypoints: Sequence[Sequence[float]],
    joint_count: int,
) -> None:
    """Check that every waypoint has one value per joint.

    Raises:
        MalformedInputError: If the list is empty or a waypoint has the
            wrong number of values
    """
    if len(waypoints) == 0:
        raise MalformedInputError("Waypoint list is empty")

    for index, waypoint in enumerate(waypoints):
        if len(waypoint) != joint_count:
            raise MalformedInputError(
                f"Waypoint {index} has {len(waypoint)} positions, expected {joint_count}"
            )


def generate_task_space_data(
    poses: Sequence[Pose],
    side: RobotSide,
    desired_time: float,
) -> List[ArmTaskSpaceData]:
    """Turn a list of hand poses into timed task-space waypoints.

    Poses must already be expressed in the world frame.

    Args:
        poses: Hand poses in order
        side: Hand the poses are for
        desired_time: Total duration; 0 sends every pose with time 0

    Returns:
        Task-space data, one entry per pose
    """
    if not poses:
        return []

    if desired_time == 0:
        times = [0.0] * len(poses)
    else:
        times = waypoint_times(desired_time, len(poses))

    return [
        ArmTaskSpaceData(side=side, pose=pose.copy(), time=t)
        for pose, t in zip(poses, times)
    ]
