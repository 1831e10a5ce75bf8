"""Tests for the joint limit table."""

import logging

import numpy as np
import pytest

from humanoid_control.control.errors import JointLimitViolation, MalformedInputError
from humanoid_control.control.joint_limits import JointLimit, JointLimitTable
from humanoid_control.control.messages import RobotSide
from humanoid_control.hardware.robot_description import RobotDescription
from humanoid_control.utils.config_loader import merge_config


def _unit_table(strict=False):
    limits = [JointLimit(-1.0, 1.0) for _ in range(7)]
    return JointLimitTable({RobotSide.LEFT: limits, RobotSide.RIGHT: list(limits)}, strict=strict)


def test_load_applies_margin(description):
    """Test limits are shrunk by the margin on both ends."""
    table = JointLimitTable.load(description, margin=0.01)

    assert table.joint_count == 7
    left_first = table.limits(RobotSide.LEFT)[0]
    assert left_first.lower == pytest.approx(-2.84)
    assert left_first.upper == pytest.approx(1.99)

    right_elbow = table.limits(RobotSide.RIGHT)[3]
    assert right_elbow.lower == pytest.approx(-0.11)
    assert right_elbow.upper == pytest.approx(2.164)


def test_load_rejects_empty_limits(config):
    """Test construction fails when a side has no limits."""
    description = RobotDescription(
        merge_config(config, {"joint_limits": {"right_arm": []}})
    )

    with pytest.raises(ValueError):
        JointLimitTable.load(description)


def test_load_rejects_limit_name_mismatch(config):
    """Test construction fails when limits and joint names differ in length."""
    six_limits = config["joint_limits"]["left_arm"][:6]
    description = RobotDescription(
        merge_config(config, {"joint_limits": {"left_arm": six_limits}})
    )

    with pytest.raises(ValueError):
        JointLimitTable.load(description)


def test_rejects_sides_of_different_length():
    """Test the two arms must have the same joint count."""
    with pytest.raises(ValueError):
        JointLimitTable({
            RobotSide.LEFT: [JointLimit(-1.0, 1.0)] * 7,
            RobotSide.RIGHT: [JointLimit(-1.0, 1.0)] * 6,
        })


def test_rejects_range_emptied_by_margin(description):
    """Test a margin wider than a joint's range is a construction error."""
    with pytest.raises(ValueError):
        JointLimitTable.load(description, margin=1.0)


def test_clamp_upper_logs_wrapped_point(caplog):
    """Test an input above the range is pinned to the upper limit."""
    table = _unit_table()

    with caplog.at_level(logging.INFO, logger="humanoid_control.control.joint_limits"):
        value = table.clamp(RobotSide.LEFT, 0, 1.5)

    assert value == 1.0
    assert "wrapped upper point" in caplog.text


def test_clamp_lower_logs_wrapped_point(caplog):
    """Test an input below the range is pinned to the lower limit."""
    table = _unit_table()

    with caplog.at_level(logging.INFO, logger="humanoid_control.control.joint_limits"):
        value = table.clamp(RobotSide.RIGHT, 6, -3.0)

    assert value == -1.0
    assert "wrapped lower point" in caplog.text


def test_clamp_stays_in_range_and_is_identity_inside():
    """Test every clamped value lies in range and in-range values pass through."""
    table = _unit_table()

    for candidate in np.linspace(-5.0, 5.0, 101):
        clamped = table.clamp(RobotSide.LEFT, 2, float(candidate))
        assert -1.0 <= clamped <= 1.0
        if -1.0 <= candidate <= 1.0:
            assert clamped == float(candidate)
        assert table.clamp(RobotSide.LEFT, 2, clamped) == clamped


def test_strict_mode_rejects_out_of_range():
    """Test strict mode raises instead of clamping."""
    table = _unit_table(strict=True)

    assert table.clamp(RobotSide.LEFT, 0, 0.5) == 0.5
    with pytest.raises(JointLimitViolation):
        table.clamp(RobotSide.LEFT, 0, 1.5)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_clamp_rejects_non_finite(value):
    """Test NaN and infinite positions are rejected rather than pinned."""
    table = _unit_table()

    with pytest.raises(MalformedInputError):
        table.clamp(RobotSide.RIGHT, 3, value)
