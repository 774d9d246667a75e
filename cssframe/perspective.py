# perspective.py

import logging
import math

from cssframe.matrix import Matrix4

logger = logging.getLogger(__name__)

# Depth offset between a perspective container's origin and its children.
# Calibrated against a browser rendering of one reference scene (a 100x100
# card rotated in front of a 500px perspective); it is not derived from the
# CSS projection model and has not been checked against other scenes.
PERSPECTIVE_Z_CORRECTION: float = 78.0

# CSS Transforms Level 2 clamps perspective lengths below 1px to 1px.
MIN_PERSPECTIVE_DISTANCE: float = 1.0


def perspective_matrix(distance: float, origin_x: float, origin_y: float) -> Matrix4:
    """
    Build the projection a perspective container applies to its children.

    The result is, applied left to right:
        translate(-origin) -> translate(0, 0, PERSPECTIVE_Z_CORRECTION)
        -> projection with m[3, 2] = -1 / distance -> translate(+origin)

    Args:
        distance: focal distance (CSS ``perspective``). Magnitudes below
            MIN_PERSPECTIVE_DISTANCE, 0 included, are clamped to it.
        origin_x, origin_y: perspective origin in the container's space.

    Returns:
        A new Matrix4.

    Raises:
        ValueError: if `distance` is NaN.
    """
    if math.isnan(distance):
        raise ValueError("perspective distance must not be NaN")
    if abs(distance) < MIN_PERSPECTIVE_DISTANCE:
        clamped = math.copysign(MIN_PERSPECTIVE_DISTANCE, distance)
        logger.warning(
            "perspective distance %r is below %r, clamping to %r",
            distance, MIN_PERSPECTIVE_DISTANCE, clamped)
        distance = clamped

    projection = Matrix4.identity()
    projection.matrix[3, 2] = -1.0 / distance

    return (
        Matrix4.translation(-origin_x, -origin_y, 0.0)
        .then(Matrix4.translation(0.0, 0.0, PERSPECTIVE_Z_CORRECTION))
        .then(projection)
        .then(Matrix4.translation(origin_x, origin_y, 0.0))
    )
