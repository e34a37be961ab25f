# opalinus_tensors/tensor_operations.py
import numpy as np

# Voigt order: 11, 22, 33, 23, 13, 12
VOIGT_PAIRS = [(0, 0), (1, 1), (2, 2), (1, 2), (0, 2), (0, 1)]


def voigt_index(i, j):
    """Voigt index (0-5) of the symmetric index pair (i, j)."""
    if i == j:
        return i
    return 6 - i - j


def rotate_rank_two(T, R):
    """Rotates a second rank tensor: T' = R T R^T."""
    T = np.asarray(T, dtype=float)
    R = np.asarray(R, dtype=float)
    return R @ T @ R.T


def rotate_rank_four(C, R):
    """Transforms a fourth rank tensor C with the rotation matrix R.

    newC[ip, jp, kp, lp] = R[ip, i] R[jp, j] R[kp, k] R[lp, l] C[i, j, k, l]
    """
    C = np.asarray(C, dtype=float)
    R = np.asarray(R, dtype=float)
    return np.einsum('ai,bj,ck,dl,ijkl->abcd', R, R, R, R, C, optimize=True)


def rotate_tensor(T, R):
    """Rotates a rank-2 (3x3) or rank-4 (3x3x3x3) tensor.

    Raises:
        ValueError: If T is neither a 3x3 nor a 3x3x3x3 array
    """
    T = np.asarray(T, dtype=float)
    if T.shape == (3, 3):
        return rotate_rank_two(T, R)
    if T.shape == (3, 3, 3, 3):
        return rotate_rank_four(T, R)
    raise ValueError(f"Cannot rotate tensor of shape {T.shape}, expected (3, 3) or (3, 3, 3, 3)")


def voigt_to_tensor(C6):
    """Convert a 6x6 Voigt stiffness matrix to the full Cijkl tensor."""
    C6 = np.asarray(C6, dtype=float)
    if C6.shape != (6, 6):
        raise ValueError("Voigt matrix must be 6x6")

    C = np.zeros((3, 3, 3, 3))
    for i in range(3):
        for j in range(3):
            for k in range(3):
                for l in range(3):
                    C[i, j, k, l] = C6[voigt_index(i, j), voigt_index(k, l)]
    return C


def tensor_to_voigt(C):
    """Convert a full Cijkl tensor to its 6x6 Voigt matrix."""
    C = np.asarray(C, dtype=float)
    if C.shape != (3, 3, 3, 3):
        raise ValueError("Tensor must be 3x3x3x3")

    C6 = np.zeros((6, 6))
    for I, (i, j) in enumerate(VOIGT_PAIRS):
        for J, (k, l) in enumerate(VOIGT_PAIRS):
            C6[I, J] = C[i, j, k, l]
    return C6


def has_elasticity_symmetries(C, rtol=1e-10, atol=0.0):
    """Check minor and major symmetries Cijkl = Cjikl = Cijlk = Cklij."""
    C = np.asarray(C, dtype=float)
    if C.shape != (3, 3, 3, 3):
        return False
    scale = np.max(np.abs(C))
    tol = atol + rtol * scale
    return (
        np.allclose(C, C.transpose(1, 0, 2, 3), rtol=0.0, atol=tol)
        and np.allclose(C, C.transpose(0, 1, 3, 2), rtol=0.0, atol=tol)
        and np.allclose(C, C.transpose(2, 3, 0, 1), rtol=0.0, atol=tol)
    )


def is_rotation_matrix(R, atol=1e-8):
    """True if R is a proper rotation (R^T R = I and det R = +1)."""
    R = np.asarray(R, dtype=float)
    if R.shape != (3, 3):
        return False
    return np.allclose(R.T @ R, np.eye(3), atol=atol) and abs(np.linalg.det(R) - 1.0) < atol
