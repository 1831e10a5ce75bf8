"""Exceptions raised while assembling controller messages."""


class ControlError(Exception):
    """Base class for control-layer failures."""


class MalformedInputError(ControlError, ValueError):
    """Input has the wrong shape (joint-count mismatch, empty waypoint list)."""


class SequenceViolationError(ControlError, ValueError):
    """Joint names in a trajectory are not in the expected group order."""


class TransformError(ControlError, LookupError):
    """A frame transform or current pose could not be resolved."""


class JointLimitViolation(ControlError, ValueError):
    """A joint position is outside its limits and strict mode is enabled."""
