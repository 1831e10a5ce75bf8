"""Middleware-facing capabilities and their offline implementations."""

from humanoid_control.hardware.publishers import LoggingNode, RecordingNode
from humanoid_control.hardware.robot_description import RobotDescription
from humanoid_control.hardware.state_informer import CoordinateFrame, StaticStateInformer

__all__ = [
    "CoordinateFrame",
    "LoggingNode",
    "RecordingNode",
    "RobotDescription",
    "StaticStateInformer",
]
