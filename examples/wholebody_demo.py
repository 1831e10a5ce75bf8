"""Example script for whole-body trajectory execution.

This script builds arm, chest and whole-body commands against an offline
robot (static state, logging publishers) so the assembled messages can be
inspected without a controller.
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np

from humanoid_control.control.arm_control import ArmControlInterface
from humanoid_control.control.identity import MessageIdGenerator
from humanoid_control.control.messages import (
    ArmJointData,
    JointTrajectory,
    JointTrajectoryPoint,
    RobotSide,
)
from humanoid_control.control.wholebody_control import WholebodyControlInterface
from humanoid_control.hardware.publishers import LoggingNode
from humanoid_control.hardware.robot_description import RobotDescription
from humanoid_control.hardware.state_informer import CoordinateFrame, StaticStateInformer
from humanoid_control.utils.config_loader import load_config
from humanoid_control.utils.logging_config import setup_logging

setup_logging(log_level=logging.INFO)
logger = logging.getLogger(__name__)


def build_state_informer(config: dict) -> StaticStateInformer:
    """Offline robot standing at the origin with the pelvis 1 m up."""
    frames = config["frames"]
    return StaticStateInformer(
        frames=[
            CoordinateFrame(name=frames["pelvis"], origin=np.array([0.0, 0.0, 1.0])),
            CoordinateFrame(name=frames["torso"], origin=np.array([0.0, 0.0, 1.2])),
            CoordinateFrame(name=frames["left_palm"], origin=np.array([0.4, 0.3, 1.0])),
            CoordinateFrame(name=frames["right_palm"], origin=np.array([0.4, -0.3, 1.0])),
            CoordinateFrame(name=frames["left_ee"], origin=np.array([0.45, 0.3, 1.0])),
            CoordinateFrame(name=frames["right_ee"], origin=np.array([0.45, -0.3, 1.0])),
        ],
        joint_positions={
            group: [0.0] * len(names) for group, names in config["joint_names"].items()
        },
        world_frame=frames["world"],
    )


def main(config_path: Optional[Path] = None) -> None:
    """Main function for the whole-body demo."""
    config = load_config(config_path)
    description = RobotDescription(config)
    state_informer = build_state_informer(config)
    node = LoggingNode()
    id_generator = MessageIdGenerator()

    arm = ArmControlInterface(node, description, state_informer, id_generator, config)
    wholebody = WholebodyControlInterface(node, description, state_informer, id_generator, config)

    logger.info("Moving right arm through two waypoints")
    arm.move_arm_joints(
        RobotSide.RIGHT,
        [[0.2] * arm.num_arm_joints, [0.4] * arm.num_arm_joints],
        2.0,
    )

    logger.info("Moving both arms together")
    arm.move_arms_joints([
        ArmJointData(side=RobotSide.RIGHT, arm_pose=[0.1] * arm.num_arm_joints, time=1.0),
        ArmJointData(side=RobotSide.LEFT, arm_pose=[-0.1] * arm.num_arm_joints, time=1.0),
    ])

    logger.info("Executing chest and left arm whole-body trajectory")
    names = config["joint_names"]["chest"] + config["joint_names"]["left_arm"]
    trajectory = JointTrajectory(
        joint_names=names,
        points=[
            JointTrajectoryPoint(positions=[0.1 * k] * len(names), time_from_start=float(k))
            for k in range(1, 4)
        ],
    )
    if not wholebody.execute_trajectory(trajectory):
        logger.error("Whole-body trajectory was rejected")

    logger.info(f"Next message id: {id_generator.current}")


if __name__ == "__main__":
    main()
