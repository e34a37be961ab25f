# opalinus_tensors/elasticity.py
import logging

import numpy as np

from .coordinate_systems import CartesianLocalCoordinateSystem
from .material import RotatedTensorMaterial
from .materials import TransverselyIsotropicMaterial
from .tensor_operations import tensor_to_voigt

logger = logging.getLogger(__name__)


class ElasticityTensor(RotatedTensorMaterial):
    """Transversely isotropic elasticity tensor with the bedding as plane of isotropy."""

    local_axis_names = ("first_local_axis", "second_local_axis", "normal_local_axis")

    def __init__(self, Ep, Es, nu_p, nu_s, G_s, local_coordinate_system=None, geological_angles=None,
                 prefactor_functor=None, prefactor_mat_prop=None, base_name="", prefactor_function=None):
        """
        Initialize the elasticity tensor and rotate it to global coordinates.

        Args:
            Ep, Es: Young's moduli parallel and normal to the bedding
            nu_p, nu_s: Poisson ratios within the bedding and across it
            G_s: Shear modulus for shear across the bedding
            local_coordinate_system: Object with rotate_local_to_global(tensor)
            geological_angles: (dip_direction, dip[, bedding_rotation]) in degrees,
                used instead of local_coordinate_system
            prefactor_functor: Optional point-evaluated scalar prefactor
            prefactor_mat_prop: Optional precomputed scalar property used as prefactor
            base_name: Prefix of the published property names
            prefactor_function: Alias of prefactor_functor

        Raises:
            ValueError: Unless exactly one of local_coordinate_system and
                geological_angles is given, or if both prefactor_functor and
                prefactor_function are given
        """
        if prefactor_functor is not None and prefactor_function is not None:
            raise ValueError("Only one of prefactor_functor and prefactor_function may be given")
        if prefactor_functor is None:
            prefactor_functor = prefactor_function

        if (local_coordinate_system is None) == (geological_angles is None):
            raise ValueError("Exactly one of local_coordinate_system and geological_angles must be given")

        if geological_angles is not None:
            geological_angles = np.asarray(geological_angles, dtype=float)
            if geological_angles.shape not in ((2,), (3,)):
                raise ValueError("geological_angles must be (dip_direction, dip[, bedding_rotation])")
            local_coordinate_system = CartesianLocalCoordinateSystem.from_geological_angles(*geological_angles)
        self.geological_angles = geological_angles

        super().__init__(local_coordinate_system, prefactor_functor, prefactor_mat_prop)

        self.base_name = base_name
        self.property_name = f"{base_name}_elasticity_tensor" if base_name else "elasticity_tensor"
        self.material = TransverselyIsotropicMaterial(Ep, Es, nu_p, nu_s, G_s)

        self.Cijkl = self.material.get_cijkl()
        self._set_base_tensor(self.Cijkl)
        self._local_axes = self._axes_of(local_coordinate_system)

    @property
    def prefactor_function(self):
        return self.prefactor_functor

    @staticmethod
    def _axes_of(coordinate_system):
        # only coordinate systems exposing their rotation publish local axes
        R = getattr(coordinate_system, 'rotation_matrix', None)
        if R is None:
            return None
        R = np.asarray(R, dtype=float)
        return tuple(R[:, i].copy() for i in range(3))

    @property
    def local_axes(self):
        return self._local_axes

    def voigt(self, point=None, state=None):
        """6x6 Voigt stiffness in global coordinates, at a point if given."""
        if point is None:
            return tensor_to_voigt(self._base_tensor)
        return tensor_to_voigt(self.evaluate(point, state))

    def compute_qp_properties(self, point, state=None):
        props = {self.property_name: self.evaluate(point, state)}
        if self._local_axes is not None:
            for name, axis in zip(self.local_axis_names, self._local_axes):
                props[name] = axis.copy()
        return props

    def _property_shapes(self):
        shapes = {self.property_name: (3, 3, 3, 3)}
        if self._local_axes is not None:
            shapes.update({name: (3,) for name in self.local_axis_names})
        return shapes
