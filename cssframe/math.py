# math.py

from numba import njit
import numpy as np
from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


@njit(cache=True)
def translation_matrix(tx: float, ty: float, tz: float) -> np.ndarray:
    """4x4 translation, column-vector convention."""
    m = np.eye(4)
    m[0, 3] = tx
    m[1, 3] = ty
    m[2, 3] = tz
    return m


@njit(cache=True)
def scale_matrix(sx: float, sy: float, sz: float) -> np.ndarray:
    """4x4 non-uniform scale."""
    m = np.eye(4)
    m[0, 0] = sx
    m[1, 1] = sy
    m[2, 2] = sz
    return m


@njit(cache=True)
def axis_angle_matrix(x: float, y: float, z: float, theta: float) -> np.ndarray:
    """
    4x4 rotation of `theta` radians about the axis (x, y, z).

    The axis does not need to be normalized. A zero-length axis gives the
    identity, the same as CSS ``rotate3d(0, 0, 0, a)``.

    Parameters
    ----------
    x, y, z : float
        Rotation axis.
    theta : float
        Angle in radians. Positive angles turn +X towards +Y about +Z.

    Returns
    -------
    (4, 4) float64 array
    """
    m = np.eye(4)
    length = np.sqrt(x * x + y * y + z * z)
    if length == 0.0:
        return m
    x /= length
    y /= length
    z /= length

    c = np.cos(theta)
    s = np.sin(theta)
    t = 1.0 - c

    m[0, 0] = t * x * x + c
    m[0, 1] = t * x * y - s * z
    m[0, 2] = t * x * z + s * y

    m[1, 0] = t * x * y + s * z
    m[1, 1] = t * y * y + c
    m[1, 2] = t * y * z - s * x

    m[2, 0] = t * x * z - s * y
    m[2, 1] = t * y * z + s * x
    m[2, 2] = t * z * z + c
    return m


@njit(cache=True)
def det4(m: np.ndarray) -> float:
    """
    Determinant of a 4x4 matrix using the 12-subfactor scheme
    (fewer multiplies than Laplace expansion; zero temporaries).
    """
    # sub-factors from the first two rows
    s0 = m[0, 0] * m[1, 1] - m[1, 0] * m[0, 1]
    s1 = m[0, 0] * m[1, 2] - m[1, 0] * m[0, 2]
    s2 = m[0, 0] * m[1, 3] - m[1, 0] * m[0, 3]
    s3 = m[0, 1] * m[1, 2] - m[1, 1] * m[0, 2]
    s4 = m[0, 1] * m[1, 3] - m[1, 1] * m[0, 3]
    s5 = m[0, 2] * m[1, 3] - m[1, 2] * m[0, 3]

    # complementary sub-factors from the last two rows
    c5 = m[2, 2] * m[3, 3] - m[3, 2] * m[2, 3]
    c4 = m[2, 1] * m[3, 3] - m[3, 1] * m[2, 3]
    c3 = m[2, 1] * m[3, 2] - m[3, 1] * m[2, 2]
    c2 = m[2, 0] * m[3, 3] - m[3, 0] * m[2, 3]
    c1 = m[2, 0] * m[3, 2] - m[3, 0] * m[2, 2]
    c0 = m[2, 0] * m[3, 1] - m[3, 0] * m[2, 1]

    return (
        s0 * c5 - s1 * c4 + s2 * c3
        + s3 * c2 - s4 * c1 + s5 * c0
    )


@njit(cache=True)
def inv4(m: np.ndarray) -> np.ndarray:
    """
    Analytic inverse of a 4x4 matrix.
    Raises ZeroDivisionError if the matrix is exactly singular; callers
    wanting a tolerance check det4 first.
    """
    s0 = m[0, 0]*m[1, 1] - m[1, 0]*m[0, 1]
    s1 = m[0, 0]*m[1, 2] - m[1, 0]*m[0, 2]
    s2 = m[0, 0]*m[1, 3] - m[1, 0]*m[0, 3]
    s3 = m[0, 1]*m[1, 2] - m[1, 1]*m[0, 2]
    s4 = m[0, 1]*m[1, 3] - m[1, 1]*m[0, 3]
    s5 = m[0, 2]*m[1, 3] - m[1, 2]*m[0, 3]

    c5 = m[2, 2]*m[3, 3] - m[3, 2]*m[2, 3]
    c4 = m[2, 1]*m[3, 3] - m[3, 1]*m[2, 3]
    c3 = m[2, 1]*m[3, 2] - m[3, 1]*m[2, 2]
    c2 = m[2, 0]*m[3, 3] - m[3, 0]*m[2, 3]
    c1 = m[2, 0]*m[3, 2] - m[3, 0]*m[2, 2]
    c0 = m[2, 0]*m[3, 1] - m[3, 0]*m[2, 1]

    det = (s0*c5 - s1*c4 + s2*c3 + s3*c2 - s4*c1 + s5*c0)
    if det == 0.0:
        raise ZeroDivisionError("Matrix is singular and cannot be inverted")
    inv_det = 1.0 / det

    # adjugate (transposed cofactor matrix)
    out = np.empty((4, 4), dtype=m.dtype)

    out[0, 0] = (m[1, 1]*c5 - m[1, 2]*c4 + m[1, 3]*c3) * inv_det
    out[0, 1] = (-m[0, 1]*c5 + m[0, 2]*c4 - m[0, 3]*c3) * inv_det
    out[0, 2] = (m[3, 1]*s5 - m[3, 2]*s4 + m[3, 3]*s3) * inv_det
    out[0, 3] = (-m[2, 1]*s5 + m[2, 2]*s4 - m[2, 3]*s3) * inv_det

    out[1, 0] = (-m[1, 0]*c5 + m[1, 2]*c2 - m[1, 3]*c1) * inv_det
    out[1, 1] = (m[0, 0]*c5 - m[0, 2]*c2 + m[0, 3]*c1) * inv_det
    out[1, 2] = (-m[3, 0]*s5 + m[3, 2]*s2 - m[3, 3]*s1) * inv_det
    out[1, 3] = (m[2, 0]*s5 - m[2, 2]*s2 + m[2, 3]*s1) * inv_det

    out[2, 0] = (m[1, 0]*c4 - m[1, 1]*c2 + m[1, 3]*c0) * inv_det
    out[2, 1] = (-m[0, 0]*c4 + m[0, 1]*c2 - m[0, 3]*c0) * inv_det
    out[2, 2] = (m[3, 0]*s4 - m[3, 1]*s2 + m[3, 3]*s0) * inv_det
    out[2, 3] = (-m[2, 0]*s4 + m[2, 1]*s2 - m[2, 3]*s0) * inv_det

    out[3, 0] = (-m[1, 0]*c3 + m[1, 1]*c1 - m[1, 2]*c0) * inv_det
    out[3, 1] = (m[0, 0]*c3 - m[0, 1]*c1 + m[0, 2]*c0) * inv_det
    out[3, 2] = (-m[3, 0]*s3 + m[3, 1]*s1 - m[3, 2]*s0) * inv_det
    out[3, 3] = (m[2, 0]*s3 - m[2, 1]*s1 + m[2, 2]*s0) * inv_det

    return out


@njit(cache=True)
def transform_homogeneous(m: np.ndarray, x: float, y: float, z: float) -> np.ndarray:
    """
    Apply the full 4x4 projective transform to (x, y, z, 1) without dividing:
      X_h = M @ [x, y, z, 1]^T
    """
    out = np.empty(4, dtype=np.float64)
    for i in range(4):
        out[i] = m[i, 0] * x + m[i, 1] * y + m[i, 2] * z + m[i, 3]
    return out
