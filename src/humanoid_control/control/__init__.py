"""Control module for assembling and publishing controller messages.

This module turns motion intents into controller messages:
- Joint limit enforcement
- Message id generation
- Arm and chest trajectory building
- Whole-body trajectory composition
- Publication sequencing
"""

from humanoid_control.control.arm_control import ArmControlInterface
from humanoid_control.control.chest_control import ChestControlInterface
from humanoid_control.control.identity import MessageIdGenerator
from humanoid_control.control.joint_limits import JointLimit, JointLimitTable
from humanoid_control.control.publication import PublicationSequencer
from humanoid_control.control.wholebody_control import WholebodyControlInterface

__all__ = [
    "ArmControlInterface",
    "ChestControlInterface",
    "JointLimit",
    "JointLimitTable",
    "MessageIdGenerator",
    "PublicationSequencer",
    "WholebodyControlInterface",
]
