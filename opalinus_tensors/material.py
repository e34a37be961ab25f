# opalinus_tensors/material.py
import logging

import numpy as np

from .coordinate_systems import FrameRotation
from .prefactors import EvaluationState, QueryPoint, as_point_scalar_source, combined_prefactor

logger = logging.getLogger(__name__)


class RotatedTensorMaterial:
    """
    Base class for materials holding a tensor rotated once into global coordinates
    and scaled per query point by an optional prefactor.

    Subclasses build the local tensor, call ``_set_base_tensor`` and define
    ``property_name``.
    """

    property_name = None

    def __init__(self, local_coordinate_system, prefactor_functor=None, prefactor_mat_prop=None):
        """
        Args:
            local_coordinate_system: Object with rotate_local_to_global(tensor)
            prefactor_functor: Optional point-evaluated scalar source
            prefactor_mat_prop: Optional precomputed scalar property source

        Raises:
            TypeError: If the coordinate system cannot rotate tensors
        """
        if not isinstance(local_coordinate_system, FrameRotation):
            raise TypeError("local_coordinate_system must have a rotate_local_to_global() method")

        self.local_coordinate_system = local_coordinate_system
        self.prefactor_functor = as_point_scalar_source(prefactor_functor)
        self.prefactor_mat_prop = as_point_scalar_source(prefactor_mat_prop)
        self._base_tensor = None

    def _set_base_tensor(self, local_tensor):
        # rotated once, the local frame does not change between points
        tensor = np.array(self.local_coordinate_system.rotate_local_to_global(local_tensor), dtype=float)
        tensor.setflags(write=False)
        self._base_tensor = tensor

    @property
    def base_tensor(self):
        """Rotated tensor before any prefactor is applied (read-only)."""
        return self._base_tensor

    @property
    def has_prefactor(self):
        return self.prefactor_functor is not None or self.prefactor_mat_prop is not None

    def prefactor(self, point, state=None):
        """Scalar prefactor at the point, 1.0 when none is configured."""
        if state is None:
            state = EvaluationState()
        f = combined_prefactor(self.prefactor_functor, self.prefactor_mat_prop, point, state)
        return 1.0 if f is None else f

    def evaluate(self, point, state=None):
        """Tensor at a single query point."""
        if state is None:
            state = EvaluationState()
        f = combined_prefactor(self.prefactor_functor, self.prefactor_mat_prop, point, state)
        if f is None:
            return self._base_tensor.copy()
        return self._base_tensor * f

    def compute_qp_properties(self, point, state=None):
        """Properties published at a single query point, keyed by name."""
        return {self.property_name: self.evaluate(point, state)}

    def compute_properties(self, points, state=None):
        """
        Evaluate all query points.

        Args:
            points: Iterable of QueryPoint, or an (n, dim) array of coordinates
            state: EvaluationState passed through to the prefactor sources

        Returns:
            dict mapping property names to arrays with one entry per point
        """
        points = _as_query_points(points)
        per_point = [self.compute_qp_properties(point, state) for point in points]
        names = self._property_names()
        logger.debug("Computed %s at %d points", ", ".join(names), len(points))
        if not per_point:
            return {name: np.zeros((0,) + shape) for name, shape in self._property_shapes().items()}
        return {name: np.stack([props[name] for props in per_point]) for name in names}

    def _property_names(self):
        return list(self._property_shapes())

    def _property_shapes(self):
        return {self.property_name: self._base_tensor.shape}


def _as_query_points(points):
    if isinstance(points, np.ndarray):
        points = np.atleast_2d(points)
        return [QueryPoint(coordinates, qp=qp) for qp, coordinates in enumerate(points)]
    return [p if isinstance(p, QueryPoint) else QueryPoint(p, qp=qp) for qp, p in enumerate(points)]
