# matrix.py

import logging
from typing import List, Optional, Union

from numpy import allclose as np_allclose
from numpy import array as np_array
from numpy import array2string as np_array2string
from numpy import asarray as np_asarray
from numpy import eye as np_eye
from numpy import float64 as np_float64
from numpy import isfinite as np_isfinite
from numpy import ndarray
from numpy import shape as np_shape

from cssframe.angle import AngleLike, as_radians
from cssframe.config import ALLCLOSE_ATOL, ALLCLOSE_RTOL, DETERMINANT_EPSILON, W_EPSILON
from cssframe.errors import DegenerateProjectionError, NotInvertibleError
from cssframe.math import (
    axis_angle_matrix,
    det4,
    inv4,
    scale_matrix,
    transform_homogeneous,
    translation_matrix,
)

logger = logging.getLogger(__name__)

# preallocate the identity matrix
_EYE4 = np_eye(4, dtype=np_float64)


class Matrix4:
    """
    A 4x4 homogeneous matrix acting on column vectors: ``M @ [x, y, z, 1]``.

    Composition is spelled left to right with `then`: ``a.then(b)`` applies
    `a` first and `b` second, which is the matrix product ``b @ a``.

    Exported arrays (`to_flat_array`, `to_arrays`) use row-vector storage,
    the transpose of `matrix`, so the translation sits in the last row.

    Attributes:
        matrix (ndarray): 4x4 float64 matrix, copied from the argument.
    """
    __slots__ = ("matrix",)

    def __init__(self, matrix: Optional[ndarray] = None):
        if matrix is None:
            self.matrix = _EYE4.copy()
        else:
            matrix = np_array(matrix, dtype=np_float64)
            if matrix.shape != (4, 4):
                raise ValueError(f"Invalid matrix shape: {matrix.shape}")
            self.matrix = matrix

    @classmethod
    def from_unsafe(cls, matrix: ndarray) -> "Matrix4":
        """Wrap a float64 4x4 array without checking or copying it."""
        instance = object.__new__(cls)
        instance.matrix = matrix
        return instance

    @classmethod
    def identity(cls) -> "Matrix4":
        return cls.from_unsafe(_EYE4.copy())

    @classmethod
    def translation(cls, tx: float, ty: float, tz: float = 0.0) -> "Matrix4":
        return cls.from_unsafe(translation_matrix(float(tx), float(ty), float(tz)))

    @classmethod
    def scale(cls, sx: float, sy: float, sz: float = 1.0) -> "Matrix4":
        return cls.from_unsafe(scale_matrix(float(sx), float(sy), float(sz)))

    @classmethod
    def rotation(cls, x: float, y: float, z: float, angle: AngleLike, degrees: bool = True) -> "Matrix4":
        """
        Rotation about an arbitrary axis.

        Args:
            x, y, z: rotation axis; normalized here, a zero axis gives identity.
            angle: an Angle, or a number interpreted per `degrees`.
            degrees: if True, a plain number is in degrees, else radians.

        Returns:
            A new Matrix4.
        """
        return cls.from_unsafe(axis_angle_matrix(float(x), float(y), float(z), as_radians(angle, degrees)))

    @classmethod
    def from_flat_array(cls, flat_array: Union[ndarray, List[float]]) -> "Matrix4":
        """
        Create a Matrix4 from 16 numbers in row-vector storage, the
        inverse of `to_flat_array`.
        """
        shape = np_shape(flat_array)
        if shape != (16,):
            raise ValueError(f"Invalid flat array shape: {shape}")
        return cls(np_asarray(flat_array, dtype=np_float64).reshape((4, 4)).T)

    #########
    # Properties
    #

    @property
    def translation_part(self) -> ndarray:
        """The last column's xyz, i.e. where the origin lands before any divide."""
        return self.matrix[:3, 3]

    @property
    def perspective(self) -> ndarray:
        """The bottom row, [0, 0, 0, 1] for an affine matrix."""
        return self.matrix[3, :]

    def is_affine(self, tol: float = 1e-12) -> bool:
        return bool(np_allclose(self.matrix[3, :], [0.0, 0.0, 0.0, 1.0], rtol=0.0, atol=tol))

    ########
    # Matrix operations
    #

    def then(self, other: "Matrix4") -> "Matrix4":
        """
        Compose so that `self` is applied first and `other` second.

        Args:
            other: the transform to apply after this one.

        Returns:
            A new Matrix4 equal to ``other.matrix @ self.matrix``.
        """
        return self.__class__.from_unsafe(other.matrix @ self.matrix)

    def apply_homogeneous(self, x: float, y: float, z: float = 0.0) -> ndarray:
        """
        Transform the point (x, y, z, 1) without the perspective divide.

        Returns:
            ndarray [x, y, z, w].
        """
        return transform_homogeneous(self.matrix, float(x), float(y), float(z))

    def determinant(self) -> float:
        return float(det4(self.matrix))

    def inverse(self, tol: float = DETERMINANT_EPSILON) -> "Matrix4":
        """
        Invert this matrix.

        Args:
            tol: determinants with a magnitude at or below this are singular.

        Returns:
            The inverse as a new Matrix4.

        Raises:
            NotInvertibleError: if the determinant is not finite or too small.
        """
        det = det4(self.matrix)
        if not np_isfinite(det) or abs(det) <= tol:
            logger.debug("matrix not invertible, det=%r", det)
            raise NotInvertibleError(f"matrix is not invertible (det={det!r})")
        return self.__class__.from_unsafe(inv4(self.matrix))

    def to_flat_array(self) -> ndarray:
        """The 16 entries of the row-vector layout, translation at [12:15]."""
        return self.matrix.T.flatten()

    def to_arrays(self) -> List[List[float]]:
        """Rows of the row-vector layout as nested lists."""
        return self.matrix.T.tolist()

    def copy(self) -> "Matrix4":
        return self.__class__.from_unsafe(self.matrix.copy())

    #########
    # Dunder methods
    #

    def __matmul__(self, other: Union["Matrix4", ndarray]) -> Union["Matrix4", ndarray]:
        """
        ``a @ b`` is the plain matrix product: `b` is applied first, then `a`.
        With a length-3 array the point is transformed and divided by w,
        raising DegenerateProjectionError when w is near zero.
        """
        if isinstance(other, ndarray):
            if np_shape(other) == (3,):
                ph = self.apply_homogeneous(other[0], other[1], other[2])
                if abs(ph[3]) < W_EPSILON:
                    raise DegenerateProjectionError(f"point {other} projects to infinity (w={ph[3]!r})")
                return ph[:3] / ph[3]
            return self.matrix @ other

        if not isinstance(other, Matrix4):
            return NotImplemented

        return self.__class__.from_unsafe(self.matrix @ other.matrix)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return False
        return bool(np_allclose(self.matrix, other.matrix, rtol=ALLCLOSE_RTOL, atol=ALLCLOSE_ATOL))

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        mat = np_array2string(self.matrix, precision=6, separator=', ')
        return f"{cls}(matrix=\n{mat}\n)"

    def __str__(self) -> str:
        return self.__repr__()

    def __copy__(self) -> "Matrix4":
        return self.copy()

    def __deepcopy__(self, memo) -> "Matrix4":
        # matrices are numeric, so shallow vs deep is effectively the same here
        return self.copy()

    def __reduce__(self):
        return (self.__class__, (self.matrix.copy(),))
