"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from humanoid_control.control.arm_control import ArmControlInterface
from humanoid_control.control.chest_control import ChestControlInterface
from humanoid_control.control.identity import MessageIdGenerator
from humanoid_control.control.publication import PublicationSequencer
from humanoid_control.control.wholebody_control import WholebodyControlInterface
from humanoid_control.hardware.publishers import RecordingNode
from humanoid_control.hardware.robot_description import RobotDescription
from humanoid_control.hardware.state_informer import CoordinateFrame, StaticStateInformer
from humanoid_control.utils.config_loader import load_config


class FakeClock:
    """Clock whose sleep advances time instantly and records each call."""

    def __init__(self):
        self.time = 0.0
        self.sleeps = []

    def now(self) -> float:
        return self.time

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.time += seconds


@pytest.fixture
def config():
    """Fixture providing the packaged default robot config."""
    return load_config()


@pytest.fixture
def description(config):
    """Fixture providing a robot description built from the default config."""
    return RobotDescription(config)


@pytest.fixture
def state_informer(config):
    """Fixture providing a robot standing at the origin, pelvis 1 m up."""
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
            "left_arm": [0.0] * 7,
            "right_arm": [0.0] * 7,
            "chest": [0.0] * 3,
        },
        world_frame=frames["world"],
    )


@pytest.fixture
def clock():
    """Fixture providing a fake clock for publication timing."""
    return FakeClock()


@pytest.fixture
def node(clock):
    """Fixture providing a node that records every publication."""
    return RecordingNode(clock=clock.now)


@pytest.fixture
def id_generator():
    return MessageIdGenerator()


@pytest.fixture
def sequencer(config, clock):
    return PublicationSequencer.from_config(config, sleep=clock.sleep)


@pytest.fixture
def arm(node, description, state_informer, id_generator, config, sequencer):
    """Fixture providing an arm control interface on the recording node."""
    return ArmControlInterface(node, description, state_informer, id_generator, config, sequencer)


@pytest.fixture
def chest(node, description, state_informer, id_generator, config, sequencer):
    """Fixture providing a chest control interface on the recording node."""
    return ChestControlInterface(node, description, state_informer, id_generator, config, sequencer)


@pytest.fixture
def wholebody(node, description, state_informer, id_generator, config, sequencer):
    """Fixture providing a whole-body control interface on the recording node."""
    return WholebodyControlInterface(node, description, state_informer, id_generator, config, sequencer)
