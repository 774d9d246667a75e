"""
cssframe: CSS-style hierarchical 3D transforms with perspective, built on
homogeneous 4x4 matrices, plus the inverse mappings needed for hit testing.
"""

import logging

__version__ = version = "0.1.0"

# exposing the public API of the package
from cssframe.angle import Angle, to_degrees, to_radians
from cssframe.errors import (
    DegenerateProjectionError,
    NotInvertibleError,
    TransformError,
)
from cssframe.matrix import Matrix4
from cssframe.node import Node
from cssframe.perspective import (
    MIN_PERSPECTIVE_DISTANCE,
    PERSPECTIVE_Z_CORRECTION,
    perspective_matrix,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Angle",
    "to_degrees",
    "to_radians",
    "TransformError",
    "NotInvertibleError",
    "DegenerateProjectionError",
    "Matrix4",
    "Node",
    "MIN_PERSPECTIVE_DISTANCE",
    "PERSPECTIVE_Z_CORRECTION",
    "perspective_matrix",
]
