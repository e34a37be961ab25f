# opalinus_tensors/materials.py
import logging

import numpy as np
from scipy.linalg import inv

from .tensor_operations import voigt_to_tensor

logger = logging.getLogger(__name__)


def permeability_tensor(permeability1, permeability2, permeability3):
    """Diagonal permeability tensor in local coordinates (unrotated).

    No sign or range checks are done, the values flow through unchanged.
    """
    return np.diag([float(permeability1), float(permeability2), float(permeability3)])


def transversely_isotropic_compliance(Ep, Es, nu_p, nu_s, G_s):
    """
    Voigt compliance matrix of a transversely isotropic material.

    The e1-e2 plane is the plane of isotropy (bedding), e3 its normal.
    Voigt order is 11, 22, 33, 23, 13, 12 with engineering shear strains.

    Args:
        Ep: Young's modulus parallel to the bedding
        Es: Young's modulus normal to the bedding
        nu_p: Poisson ratio within the bedding plane
        nu_s: Poisson ratio for contraction in the bedding under load normal to it
        G_s: Shear modulus for shear in planes normal to the bedding

    Returns:
        S: (6, 6) compliance matrix
    """
    # zero moduli give inf compliances, left for the inversion to reject
    Ep, Es, G_s = np.float64(Ep), np.float64(Es), np.float64(G_s)

    S = np.zeros((6, 6))
    with np.errstate(divide='ignore', invalid='ignore'):
        S[0, 0] = S[1, 1] = 1.0 / Ep
        S[2, 2] = 1.0 / Es
        S[0, 1] = S[1, 0] = -nu_p / Ep
        S[0, 2] = S[2, 0] = S[1, 2] = S[2, 1] = -nu_s / Es
        S[3, 3] = S[4, 4] = 1.0 / G_s
        # in-plane shear modulus follows from isotropy of the bedding plane
        S[5, 5] = 2.0 * (1.0 + nu_p) / Ep
    return S


def transversely_isotropic_stiffness(Ep, Es, nu_p, nu_s, G_s):
    """Voigt stiffness matrix, the inverse of the compliance matrix."""
    S = transversely_isotropic_compliance(Ep, Es, nu_p, nu_s, G_s)
    C = inv(S)
    return 0.5 * (C + C.T)


def transversely_isotropic_cijkl(Ep, Es, nu_p, nu_s, G_s):
    """Full fourth rank stiffness tensor Cijkl in local coordinates."""
    return voigt_to_tensor(transversely_isotropic_stiffness(Ep, Es, nu_p, nu_s, G_s))


class TransverselyIsotropicMaterial:
    def __init__(self, Ep, Es, nu_p, nu_s, G_s, name="Opalinus"):
        """
        Initialize material with its five elastic constants.

        Args:
            Ep, Es: Young's moduli parallel and normal to the bedding
            nu_p, nu_s: Poisson ratios
            G_s: Shear modulus normal to the bedding
            name: Label of the material
        """
        self.name = name
        self.Ep = float(Ep)
        self.Es = float(Es)
        self.nu_p = float(nu_p)
        self.nu_s = float(nu_s)
        self.G_s = float(G_s)

        if not self.is_positive_definite():
            logger.warning("Elastic constants of %s give a stiffness that is not positive definite. "
                           "Please check!", name)

    @property
    def constants(self):
        return self.Ep, self.Es, self.nu_p, self.nu_s, self.G_s

    def get_compliance(self):
        return transversely_isotropic_compliance(*self.constants)

    def get_voigt_stiffness(self):
        return transversely_isotropic_stiffness(*self.constants)

    def get_cijkl(self):
        """Convert from Voigt notation to full tensor."""
        return transversely_isotropic_cijkl(*self.constants)

    def is_positive_definite(self):
        """Thermodynamic admissibility of the constants."""
        if min(self.Ep, self.Es, self.G_s) <= 0.0:
            return False
        return bool(np.all(np.linalg.eigvalsh(self.get_compliance()) > 0.0))

    def __repr__(self):
        return (f"TransverselyIsotropicMaterial(Ep={self.Ep}, Es={self.Es}, nu_p={self.nu_p}, "
                f"nu_s={self.nu_s}, G_s={self.G_s}, name={self.name!r})")
