"""Geometric utilities for coordinate transformations.

Quaternions are stored as numpy arrays in (x, y, z, w) order, matching
both the controller messages and ``scipy.spatial.transform.Rotation``.
"""

from typing import Tuple

import numpy as np
from scipy.spatial.transform import Rotation

IDENTITY_QUATERNION = np.array([0.0, 0.0, 0.0, 1.0])


def normalize_quaternion(quaternion: np.ndarray) -> np.ndarray:
    """Return a unit quaternion.

    Raises:
        ValueError: If the quaternion has zero norm
    """
    quaternion = np.asarray(quaternion, dtype=float)
    norm = np.linalg.norm(quaternion)
    if norm == 0.0:
        raise ValueError("Cannot normalize a zero quaternion")
    return quaternion / norm


def rpy_to_quaternion(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Convert fixed-axis roll, pitch, yaw angles to a quaternion.

    Args:
        roll: Rotation about X (radians)
        pitch: Rotation about Y (radians)
        yaw: Rotation about Z (radians)

    Returns:
        Quaternion (x, y, z, w)
    """
    return Rotation.from_euler("xyz", [roll, pitch, yaw]).as_quat()


def quaternion_to_rpy(quaternion: np.ndarray) -> Tuple[float, float, float]:
    """Convert a quaternion to fixed-axis (roll, pitch, yaw) angles."""
    roll, pitch, yaw = Rotation.from_quat(quaternion).as_euler("xyz")
    return float(roll), float(pitch), float(yaw)


def multiply_quaternions(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Compose two rotations, applying ``q2`` first and then ``q1``."""
    return (Rotation.from_quat(q1) * Rotation.from_quat(q2)).as_quat()


def transform_point(
    point: np.ndarray,
    rotation: np.ndarray,
    translation: np.ndarray,
) -> np.ndarray:
    """Transform a point by rotation and translation.

    Args:
        point: Point to transform (x, y, z)
        rotation: Rotation as a quaternion (x, y, z, w)
        translation: Translation vector (x, y, z)

    Returns:
        Transformed point
    """
    return Rotation.from_quat(rotation).apply(point) + translation


def invert_transform(
    rotation: np.ndarray,
    translation: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Invert a rigid transform given as (quaternion, translation).

    Returns:
        Tuple of (inverse rotation quaternion, inverse translation)
    """
    inverse = Rotation.from_quat(rotation).inv()
    return inverse.as_quat(), -inverse.apply(translation)


def quaternions_equivalent(
    q1: np.ndarray,
    q2: np.ndarray,
    atol: float = 1e-9,
) -> bool:
    """Check whether two quaternions describe the same rotation (q ~ -q)."""
    q1 = normalize_quaternion(q1)
    q2 = normalize_quaternion(q2)
    return bool(abs(abs(np.dot(q1, q2)) - 1.0) <= atol)
