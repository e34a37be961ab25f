# opalinus_tensors/plotting.py
import numpy as np
import matplotlib.pyplot as plt

from .tensor_operations import tensor_to_voigt

_PLANES = {
    'xy': (0, 1),
    'xz': (0, 2),
    'yz': (1, 2),
}


def plane_directions(angles, plane='xy'):
    """Unit vectors at the given angles (degrees) within a coordinate plane."""
    if plane not in _PLANES:
        raise ValueError(f"Unknown plane '{plane}'. Valid options are: {list(_PLANES)}")
    a, b = _PLANES[plane]
    theta = np.deg2rad(np.asarray(angles, dtype=float))
    n = np.zeros((theta.size, 3))
    n[:, a] = np.cos(theta)
    n[:, b] = np.sin(theta)
    return n


def directional_values(tensor, angles, plane='xy'):
    """
    Directional permeability n.K.n for a rank-2 tensor, or directional Young's
    modulus 1 / (n n : S : n n) for a rank-4 stiffness tensor.
    """
    tensor = np.asarray(tensor, dtype=float)
    n = plane_directions(angles, plane)

    if tensor.shape == (3, 3):
        return np.einsum('pi,ij,pj->p', n, tensor, n)

    if tensor.shape == (3, 3, 3, 3):
        S = np.linalg.inv(tensor_to_voigt(tensor))
        # stress n n in Voigt notation, shear entries appear once
        nn = np.column_stack([n[:, 0]**2, n[:, 1]**2, n[:, 2]**2,
                              n[:, 1] * n[:, 2], n[:, 0] * n[:, 2], n[:, 0] * n[:, 1]])
        strain = nn @ S.T
        # engineering shear strains, so n.eps.n is a plain dot product
        return 1.0 / np.einsum('pi,pi->p', nn, strain)

    raise ValueError(f"Cannot plot tensor of shape {tensor.shape}")


def plot_directional_tensor(tensor, angles=None, plane='xy', ax=None, label=None):
    """Polar plot of directional_values over the angles (degrees) in a plane."""
    if angles is None:
        angles = np.arange(0, 361)
    values = directional_values(tensor, angles, plane)

    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(projection='polar')

    ax.plot(np.deg2rad(angles), values, linewidth=2, label=label)
    ax.set_title(f"Directional values in the {plane} plane", fontsize=14)
    ax.grid(True)
    if label is not None:
        ax.legend()
    return ax
