"""Local coordinate systems aligned with the geological structure (bedding).

The rotation matrix of a local coordinate system holds the local axes e1, e2, e3
as columns, expressed in global coordinates. The global frame is x = east,
y = north, z = up. With the e1-e2 plane representing the bedding, e3 is the
bedding normal.
"""

import logging
from typing import Protocol, Tuple, runtime_checkable

import numpy as np
from scipy.spatial.transform import Rotation

from .tensor_operations import is_rotation_matrix, rotate_tensor

logger = logging.getLogger(__name__)


def normalize(v: np.ndarray) -> np.ndarray:
    """Normalize a vector."""
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    if norm == 0.0:
        raise ValueError("Cannot normalize a zero-length axis")
    return v / norm


@runtime_checkable
class FrameRotation(Protocol):
    """Anything able to rotate rank-2 and rank-4 tensors from a local frame to the global frame."""

    def rotate_local_to_global(self, tensor: np.ndarray) -> np.ndarray:
        ...


class CartesianLocalCoordinateSystem:
    """Right-handed orthonormal local coordinate system."""

    def __init__(self, rotation_matrix=None):
        """
        Args:
            rotation_matrix: 3x3 proper rotation whose columns are e1, e2, e3 in
                global coordinates. Defaults to the identity.

        Raises:
            ValueError: If rotation_matrix is not a proper rotation
        """
        if rotation_matrix is None:
            rotation_matrix = np.eye(3)
        rotation_matrix = np.array(rotation_matrix, dtype=float)

        if rotation_matrix.shape != (3, 3):
            raise ValueError("rotation_matrix must be a 3x3 array")
        if not is_rotation_matrix(rotation_matrix):
            raise ValueError("rotation_matrix must be orthonormal with determinant +1")

        rotation_matrix.setflags(write=False)
        self._rotation = rotation_matrix
        logger.debug("Local coordinate system with axes\n%s", rotation_matrix)

    @classmethod
    def from_axes(cls, e1, e2, tol=1e-8):
        """Create a coordinate system from the first two local axes.

        The third axis is e1 x e2.

        Raises:
            ValueError: If e1 and e2 are not orthogonal
        """
        e1 = normalize(e1)
        e2 = normalize(e2)
        if abs(np.dot(e1, e2)) > tol:
            raise ValueError(f"Local axes must be orthogonal, got e1.e2 = {np.dot(e1, e2):.3e}")
        e3 = np.cross(e1, e2)
        return cls(np.column_stack([e1, e2, e3]))

    @classmethod
    def from_geological_angles(cls, dip_direction, dip, bedding_rotation=0.0):
        """Create a coordinate system from geological angles in degrees.

        Args:
            dip_direction: Azimuth of the dip, clockwise from north
            dip: Inclination of the bedding plane from horizontal
            bedding_rotation: Rotation of e1/e2 about the bedding normal

        Raises:
            ValueError: If the angles are not finite or out of range
        """
        angles = np.array([dip_direction, dip, bedding_rotation], dtype=float)
        if not np.all(np.isfinite(angles)):
            raise ValueError("Geological angles must be finite")
        if np.any(np.abs(angles) > 360.0):
            raise ValueError("Geological angles must be in degrees and within [-360, 360]")
        if not (0.0 <= dip <= 180.0):
            raise ValueError("dip must be in range [0, 180]")

        # intrinsic z-x'-z'' sequence, azimuths measured clockwise
        rotation = Rotation.from_euler('ZXZ', -angles, degrees=True)
        return cls(rotation.as_matrix())

    @property
    def rotation_matrix(self) -> np.ndarray:
        return self._rotation

    @property
    def first_local_axis(self) -> np.ndarray:
        return self._rotation[:, 0].copy()

    @property
    def second_local_axis(self) -> np.ndarray:
        return self._rotation[:, 1].copy()

    @property
    def normal_local_axis(self) -> np.ndarray:
        return self._rotation[:, 2].copy()

    @property
    def local_axes(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.first_local_axis, self.second_local_axis, self.normal_local_axis

    def rotate_local_to_global(self, tensor: np.ndarray) -> np.ndarray:
        """Rotate a rank-2 or rank-4 tensor from local to global coordinates."""
        return rotate_tensor(tensor, self._rotation)

    def rotate_global_to_local(self, tensor: np.ndarray) -> np.ndarray:
        """Rotate a rank-2 or rank-4 tensor from global to local coordinates."""
        return rotate_tensor(tensor, self._rotation.T)

    def __repr__(self):
        return f"CartesianLocalCoordinateSystem(rotation_matrix={self._rotation.tolist()!r})"
