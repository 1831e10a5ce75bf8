"""Base class for limb control interfaces.

This module holds the collaborators every control interface needs: the
middleware node, robot description, state informer, the shared message id
generator and the publication sequencer.
"""

from typing import Optional

from humanoid_control.control.identity import MessageIdGenerator
from humanoid_control.control.publication import PublicationSequencer
from humanoid_control.hardware.interfaces import (
    PublisherFactory,
    RobotDescriptionProvider,
    StateProvider,
)
from humanoid_control.utils.config_loader import load_config


class ControlInterface:
    """Hardware-agnostic base for arm, chest and whole-body control.

    All interfaces publishing to the same controller must be given the same
    ``id_generator``.
    """

    def __init__(
        self,
        node: PublisherFactory,
        description: RobotDescriptionProvider,
        state_informer: StateProvider,
        id_generator: MessageIdGenerator,
        config: Optional[dict] = None,
        sequencer: Optional[PublicationSequencer] = None,
    ):
        """Initialize control interface.

        Args:
            node: Creates publishers for controller topics
            description: Joint names, limits and frames of the robot
            state_informer: Current joint state and transforms
            id_generator: Shared source of message ids
            config: Robot configuration (packaged defaults if None)
            sequencer: Publication sequencer (built from config if None)
        """
        self.config = config if config is not None else load_config()
        self.node = node
        self.description = description
        self.state_informer = state_informer
        self.id_generator = id_generator
        self.sequencer = sequencer or PublicationSequencer.from_config(self.config)
        self.control_topic_prefix = self.config.get("control_topic_prefix", "")

    def topic(self, name: str) -> str:
        """Full topic name for a controller topic key, e.g. ``"arm_trajectory"``."""
        suffix = self.config.get("topics", {}).get(name, name)
        return f"{self.control_topic_prefix.rstrip('/')}/{suffix}"

    def next_id(self) -> int:
        return self.id_generator.next_id()
