"""Robot description backed by the YAML robot config."""

import logging
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)


class RobotDescription:
    """Joint names, joint limits and frame names read from a config dict.

    Satisfies :class:`humanoid_control.hardware.interfaces.RobotDescriptionProvider`.
    """

    def __init__(self, config: dict):
        """Initialize robot description.

        Args:
            config: Robot configuration with ``joint_names``, ``joint_limits``
                and ``frames`` sections

        Raises:
            ValueError: If a required section is missing
        """
        for section in ("joint_names", "joint_limits", "frames"):
            if section not in config:
                raise ValueError(f"Robot config is missing the '{section}' section")

        self._joint_names: Dict[str, List[str]] = {
            group: list(names) for group, names in config["joint_names"].items()
        }
        self._joint_limits: Dict[str, List[Tuple[float, float]]] = {
            group: [(float(lower), float(upper)) for lower, upper in limits]
            for group, limits in config["joint_limits"].items()
        }
        self._frames: Dict[str, str] = dict(config["frames"])

    def get_joint_limits(self, group: str) -> List[Tuple[float, float]]:
        """Return the raw joint limits for ``group`` (empty if unknown)."""
        if group not in self._joint_limits:
            logger.warning(f"No joint limits defined for group '{group}'")
            return []
        return list(self._joint_limits[group])

    def get_joint_names(self, group: str) -> List[str]:
        """Return the ordered joint names for ``group``.

        Raises:
            KeyError: If the group is unknown
        """
        if group not in self._joint_names:
            raise KeyError(f"Unknown joint group '{group}'")
        return list(self._joint_names[group])

    def get_frame(self, name: str) -> str:
        """Resolve a logical frame name to the robot's frame id.

        Raises:
            KeyError: If the frame is unknown
        """
        if name not in self._frames:
            raise KeyError(f"Unknown frame '{name}'")
        return self._frames[name]
