# errors.py


class TransformError(ArithmeticError):
    """Base class for failures of the point mappers."""


class NotInvertibleError(TransformError):
    """The world matrix has a (numerically) zero determinant."""


class DegenerateProjectionError(TransformError):
    """
    A homogeneous divide or a ray/plane intersection hit a near-zero
    denominator, so there is no finite point to return.
    """
