"""Joint limit table for the arms.

Limits are read once from the robot description and shrunk by a safety
margin so that commanded positions never sit exactly on a hard limit.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List

from humanoid_control.control.errors import JointLimitViolation, MalformedInputError
from humanoid_control.control.messages import RobotSide, arm_group
from humanoid_control.hardware.interfaces import RobotDescriptionProvider

logger = logging.getLogger(__name__)

DEFAULT_MARGIN = 0.01


@dataclass(frozen=True)
class JointLimit:
    """Admissible range of one joint.

    Attributes:
        lower: Lower bound (radians)
        upper: Upper bound (radians)
    """

    lower: float
    upper: float

    def shrink(self, margin: float) -> "JointLimit":
        """Return the limit tightened by ``margin`` on both ends."""
        return JointLimit(lower=self.lower + margin, upper=self.upper - margin)

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


class JointLimitTable:
    """Per-side arm joint limits with clamp-to-boundary enforcement."""

    def __init__(
        self,
        limits: Dict[RobotSide, List[JointLimit]],
        strict: bool = False,
    ):
        """Initialize joint limit table.

        Args:
            limits: Ordered joint limits for each arm side
            strict: If True, out-of-range positions raise instead of clamping

        Raises:
            ValueError: If a side is missing or empty, the sides differ in
                joint count, or a range is empty
        """
        for side in RobotSide:
            side_limits = limits.get(side)
            if not side_limits:
                raise ValueError(f"No joint limits for the {side.name.lower()} arm")
            for index, limit in enumerate(side_limits):
                if not limit.lower < limit.upper:
                    raise ValueError(
                        f"Empty range for {side.name.lower()} arm joint {index}: "
                        f"<{limit.lower:.3f} {limit.upper:.3f}>"
                    )

        if len(limits[RobotSide.LEFT]) != len(limits[RobotSide.RIGHT]):
            raise ValueError(
                f"Left arm has {len(limits[RobotSide.LEFT])} joint limits but right arm has "
                f"{len(limits[RobotSide.RIGHT])}"
            )

        self._limits = {side: tuple(limits[side]) for side in RobotSide}
        self.strict = strict

    @classmethod
    def load(
        cls,
        description: RobotDescriptionProvider,
        margin: float = DEFAULT_MARGIN,
        strict: bool = False,
    ) -> "JointLimitTable":
        """Read arm limits from a robot description and apply the margin.

        Args:
            description: Source of raw joint limits and joint names
            margin: Amount added to each lower and subtracted from each upper limit
            strict: Reject instead of clamp out-of-range positions

        Returns:
            Joint limit table

        Raises:
            ValueError: If the description has no limits for a side, or the
                limit count does not match the joint name count
        """
        limits: Dict[RobotSide, List[JointLimit]] = {}
        for side in RobotSide:
            group = arm_group(side)
            raw = description.get_joint_limits(group)
            names = description.get_joint_names(group)
            if raw and len(raw) != len(names):
                raise ValueError(
                    f"{group} has {len(names)} joints but {len(raw)} joint limits"
                )
            limits[side] = [JointLimit(float(lo), float(hi)).shrink(margin) for lo, hi in raw]
        return cls(limits, strict=strict)

    @property
    def joint_count(self) -> int:
        """Number of joints in each arm."""
        return len(self._limits[RobotSide.LEFT])

    def limits(self, side: RobotSide) -> tuple:
        """Ordered limits for ``side``."""
        return self._limits[side]

    def clamp(self, side: RobotSide, index: int, value: float) -> float:
        """Pin ``value`` into the range of joint ``index`` on ``side``.

        Args:
            side: Arm side
            index: Joint index within the arm
            value: Candidate position

        Returns:
            ``value`` if in range, else the nearest boundary

        Raises:
            MalformedInputError: If ``value`` is NaN or infinite
            JointLimitViolation: If strict mode is on and ``value`` is out of range
        """
        if not math.isfinite(value):
            raise MalformedInputError(
                f"{side.name.lower()} arm joint {index} position {value} is not finite"
            )

        limit = self._limits[side][index]
        if limit.contains(value):
            return value

        if self.strict:
            raise JointLimitViolation(
                f"{side.name.lower()} arm joint {index} position {value:.6f} outside "
                f"<{limit.lower:.3f} {limit.upper:.3f}>"
            )

        if value < limit.lower:
            logger.info(f"wrapped lower point {value:.6f} to {limit.lower:.6f} (joint {index})")
            return limit.lower

        logger.info(f"wrapped upper point {value:.6f} to {limit.upper:.6f} (joint {index})")
        return limit.upper
