# opalinus_tensors/permeability.py
import logging

import numpy as np

from .material import RotatedTensorMaterial
from .materials import permeability_tensor

logger = logging.getLogger(__name__)


class PermeabilityTensor(RotatedTensorMaterial):
    """Constant anisotropic permeability tensor, given in a local coordinate system."""

    property_name = "PorousFlow_permeability_qp"
    dvar_name = "dPorousFlow_permeability_qp_dvar"
    dgradvar_name = "dPorousFlow_permeability_qp_dgradvar"

    def __init__(self, permeability1, permeability2, permeability3, local_coordinate_system,
                 prefactor_functor=None, prefactor_mat_prop=None, num_vars=0):
        """
        Initialize the permeability tensor and rotate it to global coordinates.

        Args:
            permeability1: Intrinsic permeability along e1 (LE^2, e.g. m^2). With e1-e2
                being the bedding this controls flow parallel to the bedding.
            permeability2: Intrinsic permeability along e2, parallel to the bedding.
            permeability3: Intrinsic permeability along e3, normal to the bedding.
            local_coordinate_system: Object with rotate_local_to_global(tensor)
            prefactor_functor: Optional point-evaluated scalar prefactor
            prefactor_mat_prop: Optional precomputed scalar property used as prefactor
            num_vars: Number of solution variables for the (zero) derivative slots
        """
        super().__init__(local_coordinate_system, prefactor_functor, prefactor_mat_prop)

        if int(num_vars) < 0:
            raise ValueError("num_vars must be non-negative")

        self.permeability1 = float(permeability1)
        self.permeability2 = float(permeability2)
        self.permeability3 = float(permeability3)
        self.num_vars = int(num_vars)

        if min(self.permeabilities) < 0.0:
            logger.warning("Negative permeability %s passed to PermeabilityTensor", self.permeabilities)

        # create permeability tensor in local coordinates and rotate it to global coordinates
        self.input_permeability = permeability_tensor(*self.permeabilities)
        self._set_base_tensor(self.input_permeability)

    @property
    def permeabilities(self):
        return self.permeability1, self.permeability2, self.permeability3

    def compute_qp_properties(self, point, state=None):
        return {
            self.property_name: self.evaluate(point, state),
            self.dvar_name: np.zeros((self.num_vars, 3, 3)),
            self.dgradvar_name: np.zeros((3, self.num_vars, 3, 3)),
        }

    def _property_shapes(self):
        return {
            self.property_name: (3, 3),
            self.dvar_name: (self.num_vars, 3, 3),
            self.dgradvar_name: (3, self.num_vars, 3, 3),
        }
