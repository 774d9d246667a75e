# node.py

"""
Hierarchical CSS-style transforms.

A `Node` collects the transform inputs of one visual element (local
operations, pivot, position and the perspective of the container it sits
in) and folds them, together with its parent's already composed matrix,
into a single local -> world matrix. The same matrix is then used to map
points forward for drawing and backward for hit testing.

Typical use::

    root = Node()
    card = (
        Node()
        .with_position(350, 250)
        .with_parent_perspective(500, 400, 300)
        .with_pivot(50, 50)
        .then_rotate_x(45)
        .composed(root)
    )
    label = Node().with_position(10, 10).composed(card)

    card.to_world(0, 0)                 # where the card's corner is drawn
    card.ray_cast_to_local(400, 300)    # which card point is under the mouse
"""

import logging
from typing import List, Optional, Tuple

from cssframe.angle import AngleLike
from cssframe.config import PARALLEL_EPSILON, W_EPSILON
from cssframe.errors import DegenerateProjectionError, TransformError
from cssframe.matrix import Matrix4
from cssframe.perspective import perspective_matrix

logger = logging.getLogger(__name__)

Point2 = Tuple[float, float]
Point3 = Tuple[float, float, float]


class Node:
    """
    Transform state of one element in a tree of positioned elements.

    Attributes:
        local_ops (Matrix4): translate/rotate/scale operations, in call order.
        world_matrix (Matrix4): local -> world matrix written by `compose`.
        pivot (tuple): point the local operations are anchored on.
        position (tuple): offset of this node in its parent's space.
        injected_perspective (Matrix4 | None): projection of the parent's
            viewing context, stored here so it can be set without a handle
            to the parent. None composes as identity.
    """
    __slots__ = ("local_ops", "world_matrix", "pivot", "position", "injected_perspective")

    def __init__(self):
        self.local_ops: Matrix4 = Matrix4.identity()
        self.world_matrix: Matrix4 = Matrix4.identity()
        self.pivot: Point2 = (0.0, 0.0)
        self.position: Point2 = (0.0, 0.0)
        self.injected_perspective: Optional[Matrix4] = None

    @classmethod
    def from_translation(cls, tx: float, ty: float, tz: float = 0.0) -> "Node":
        instance = cls()
        instance.translate_3d(tx, ty, tz)
        return instance

    @classmethod
    def from_rotation(cls, axis_x: float, axis_y: float, axis_z: float, angle: AngleLike, degrees: bool = True) -> "Node":
        instance = cls()
        instance.rotate(axis_x, axis_y, axis_z, angle, degrees=degrees)
        return instance

    @classmethod
    def from_rotation_x(cls, angle: AngleLike, degrees: bool = True) -> "Node":
        return cls.from_rotation(1.0, 0.0, 0.0, angle, degrees=degrees)

    @classmethod
    def from_rotation_y(cls, angle: AngleLike, degrees: bool = True) -> "Node":
        return cls.from_rotation(0.0, 1.0, 0.0, angle, degrees=degrees)

    @classmethod
    def from_rotation_z(cls, angle: AngleLike, degrees: bool = True) -> "Node":
        return cls.from_rotation(0.0, 0.0, 1.0, angle, degrees=degrees)

    @classmethod
    def from_scale(cls, sx: float, sy: float, sz: float = 1.0) -> "Node":
        instance = cls()
        instance.scale_3d(sx, sy, sz)
        return instance

    ########
    # Pivot, position and perspective
    #

    def set_pivot(self, x: float, y: float) -> None:
        self.pivot = (float(x), float(y))

    def with_pivot(self, x: float, y: float) -> "Node":
        node = self.copy()
        node.set_pivot(x, y)
        return node

    def set_position(self, x: float, y: float) -> None:
        self.position = (float(x), float(y))

    def with_position(self, x: float, y: float) -> "Node":
        node = self.copy()
        node.set_position(x, y)
        return node

    def set_parent_perspective(self, distance: float, origin_x: float, origin_y: float) -> None:
        """
        Store the perspective of the container this node sits in.

        In CSS the ``perspective`` property lives on the parent; keeping it on
        the child lets one builder chain describe both.

        Args:
            distance: focal distance; see `perspective_matrix` for clamping.
            origin_x, origin_y: perspective origin in the parent's space.
        """
        self.injected_perspective = perspective_matrix(distance, origin_x, origin_y)

    def with_parent_perspective(self, distance: float, origin_x: float, origin_y: float) -> "Node":
        node = self.copy()
        node.set_parent_perspective(distance, origin_x, origin_y)
        return node

    def clear_parent_perspective(self) -> None:
        self.injected_perspective = None

    ########
    # Local operations. Each appends after everything already accumulated.
    #

    def _append(self, op: Matrix4) -> None:
        self.local_ops = self.local_ops.then(op)

    def translate(self, tx: float, ty: float) -> None:
        self.translate_3d(tx, ty, 0.0)

    def translate_2d(self, tx: float, ty: float) -> None:
        self.translate_3d(tx, ty, 0.0)

    def translate_3d(self, tx: float, ty: float, tz: float) -> None:
        self._append(Matrix4.translation(tx, ty, tz))

    def translate_x(self, tx: float) -> None:
        self.translate_3d(tx, 0.0, 0.0)

    def translate_y(self, ty: float) -> None:
        self.translate_3d(0.0, ty, 0.0)

    def translate_z(self, tz: float) -> None:
        self.translate_3d(0.0, 0.0, tz)

    def rotate(self, axis_x: float, axis_y: float, axis_z: float, angle: AngleLike, degrees: bool = True) -> None:
        """
        Rotate about an arbitrary axis through the pivot.

        Args:
            axis_x, axis_y, axis_z: rotation axis, need not be normalized.
            angle: an Angle, or a number interpreted per `degrees`.
            degrees: if True, a plain number is in degrees, else radians.
        """
        self._append(Matrix4.rotation(axis_x, axis_y, axis_z, angle, degrees=degrees))

    def rotate_x(self, angle: AngleLike, degrees: bool = True) -> None:
        self.rotate(1.0, 0.0, 0.0, angle, degrees=degrees)

    def rotate_y(self, angle: AngleLike, degrees: bool = True) -> None:
        self.rotate(0.0, 1.0, 0.0, angle, degrees=degrees)

    def rotate_z(self, angle: AngleLike, degrees: bool = True) -> None:
        self.rotate(0.0, 0.0, 1.0, angle, degrees=degrees)

    def scale(self, sx: float, sy: float) -> None:
        self.scale_3d(sx, sy, 1.0)

    def scale_3d(self, sx: float, sy: float, sz: float) -> None:
        self._append(Matrix4.scale(sx, sy, sz))

    # fluent forms: same operation on a copy

    def then_translate(self, tx: float, ty: float) -> "Node":
        node = self.copy()
        node.translate(tx, ty)
        return node

    def then_translate_2d(self, tx: float, ty: float) -> "Node":
        node = self.copy()
        node.translate_2d(tx, ty)
        return node

    def then_translate_3d(self, tx: float, ty: float, tz: float) -> "Node":
        node = self.copy()
        node.translate_3d(tx, ty, tz)
        return node

    def then_translate_x(self, tx: float) -> "Node":
        node = self.copy()
        node.translate_x(tx)
        return node

    def then_translate_y(self, ty: float) -> "Node":
        node = self.copy()
        node.translate_y(ty)
        return node

    def then_translate_z(self, tz: float) -> "Node":
        node = self.copy()
        node.translate_z(tz)
        return node

    def then_rotate(self, axis_x: float, axis_y: float, axis_z: float, angle: AngleLike, degrees: bool = True) -> "Node":
        node = self.copy()
        node.rotate(axis_x, axis_y, axis_z, angle, degrees=degrees)
        return node

    def then_rotate_x(self, angle: AngleLike, degrees: bool = True) -> "Node":
        node = self.copy()
        node.rotate_x(angle, degrees=degrees)
        return node

    def then_rotate_y(self, angle: AngleLike, degrees: bool = True) -> "Node":
        node = self.copy()
        node.rotate_y(angle, degrees=degrees)
        return node

    def then_rotate_z(self, angle: AngleLike, degrees: bool = True) -> "Node":
        node = self.copy()
        node.rotate_z(angle, degrees=degrees)
        return node

    def then_scale(self, sx: float, sy: float) -> "Node":
        node = self.copy()
        node.scale(sx, sy)
        return node

    def then_scale_3d(self, sx: float, sy: float, sz: float) -> "Node":
        node = self.copy()
        node.scale_3d(sx, sy, sz)
        return node

    ########
    # Composition
    #

    def compose(self, parent: Optional["Node"] = None) -> None:
        """
        Fold pivot, local operations, position, perspective and the parent's
        world matrix into this node's `world_matrix`.

        Applied left to right:
            translate(-pivot) -> local_ops -> translate(+pivot)
            -> translate(position) -> injected_perspective
            -> parent.world_matrix

        The parent must already be composed; nothing here walks the tree.

        Args:
            parent: the composed parent, or None for a root node.
        """
        px, py = self.pivot
        pivoted = (
            Matrix4.translation(-px, -py, 0.0)
            .then(self.local_ops)
            .then(Matrix4.translation(px, py, 0.0))
        )
        positioned = pivoted.then(Matrix4.translation(self.position[0], self.position[1], 0.0))
        if self.injected_perspective is not None:
            positioned = positioned.then(self.injected_perspective)
        if parent is not None:
            positioned = positioned.then(parent.world_matrix)
        self.world_matrix = positioned

    def composed(self, parent: Optional["Node"] = None) -> "Node":
        node = self.copy()
        node.compose(parent)
        return node

    ########
    # Point mapping
    #

    def to_world_3d(self, x: float, y: float, z: float = 0.0) -> Point3:
        """
        Map a local point to world space, keeping the world depth.

        Args:
            x, y, z: local coordinates.

        Returns:
            (x, y, z) in world space after the perspective divide.

        Raises:
            DegenerateProjectionError: if the point lies on the plane at
                infinity (|w| below W_EPSILON).
        """
        hx, hy, hz, hw = self.world_matrix.apply_homogeneous(x, y, z)
        if abs(hw) < W_EPSILON:
            logger.debug("local point (%r, %r, %r) projects to infinity", x, y, z)
            raise DegenerateProjectionError(
                f"local point ({x}, {y}, {z}) projects to infinity (w={hw!r})")
        return (float(hx / hw), float(hy / hw), float(hz / hw))

    def to_world(self, x: float, y: float) -> Point2:
        """
        Map a local point on the z = 0 plane to world (x, y).

        A point that projects to infinity yields (0.0, 0.0); use
        `to_world_3d` to get an error instead.
        """
        hx, hy, _, hw = self.world_matrix.apply_homogeneous(x, y, 0.0)
        if abs(hw) < W_EPSILON:
            logger.debug("local point (%r, %r) projects to infinity, returning origin", x, y)
            return (0.0, 0.0)
        return (float(hx / hw), float(hy / hw))

    def to_local(self, x: float, y: float, z: float) -> Point2:
        """
        Map a world point with known depth back into local space.

        Perspective is not affine, so (x, y) alone does not pin down a local
        point. For a point known to come from the local z = 0 plane, take
        `z` from `to_world_3d`, or use `ray_cast_to_local`.

        Args:
            x, y, z: world coordinates.

        Returns:
            Local (x, y).

        Raises:
            NotInvertibleError: if `world_matrix` is singular.
            DegenerateProjectionError: if the homogeneous w is near zero.
        """
        inv = self.world_matrix.inverse()
        hx, hy, _, hw = inv.apply_homogeneous(x, y, z)
        if abs(hw) < W_EPSILON:
            logger.debug("world point (%r, %r, %r) has no finite local image, w=%r", x, y, z, hw)
            raise DegenerateProjectionError(
                f"world point ({x}, {y}, {z}) has no finite local image (w={hw!r})")
        return (float(hx / hw), float(hy / hw))

    def ray_cast_to_local(self, screen_x: float, screen_y: float) -> Point2:
        """
        Find the local point under a screen position whose depth is unknown.

        The screen ray through (screen_x, screen_y) along world z is pulled
        back through the inverse world matrix and intersected with the local
        z = 0 plane, which is how browsers hit test transformed elements.

        Args:
            screen_x, screen_y: world/screen coordinates, e.g. the mouse.

        Returns:
            Local (x, y) where the ray crosses the node's plane.

        Raises:
            NotInvertibleError: if `world_matrix` is singular.
            DegenerateProjectionError: if a ray point has no finite local
                image, or the ray is parallel to the plane (edge-on view).
        """
        inv = self.world_matrix.inverse()

        origin_h = inv.apply_homogeneous(screen_x, screen_y, 0.0)
        if abs(origin_h[3]) < W_EPSILON:
            logger.debug("ray origin under (%r, %r) has no finite local image", screen_x, screen_y)
            raise DegenerateProjectionError("ray origin has no finite local image")
        ray_origin = origin_h[:3] / origin_h[3]

        end_h = inv.apply_homogeneous(screen_x, screen_y, 1.0)
        if abs(end_h[3]) < W_EPSILON:
            logger.debug("ray end under (%r, %r) has no finite local image", screen_x, screen_y)
            raise DegenerateProjectionError("ray end has no finite local image")
        ray_end = end_h[:3] / end_h[3]

        ray_dir = ray_end - ray_origin
        if abs(ray_dir[2]) < PARALLEL_EPSILON:
            logger.debug("screen ray (%r, %r) is parallel to the local plane", screen_x, screen_y)
            raise DegenerateProjectionError("screen ray is parallel to the local plane")

        # ray_origin.z + t * ray_dir.z = 0
        t = -ray_origin[2] / ray_dir[2]
        return (float(ray_origin[0] + t * ray_dir[0]), float(ray_origin[1] + t * ray_dir[1]))

    def hit_test_rect(self, screen_x: float, screen_y: float, width: float, height: float) -> bool:
        """
        True if the screen point falls on the local rectangle
        [0, width] x [0, height]. A point with no local image is a miss.
        """
        try:
            x, y = self.ray_cast_to_local(screen_x, screen_y)
        except TransformError:
            return False
        return 0.0 <= x <= width and 0.0 <= y <= height

    ########
    # Export and value semantics
    #

    def rows_local(self) -> List[List[float]]:
        return self.local_ops.to_arrays()

    def rows_world(self) -> List[List[float]]:
        return self.world_matrix.to_arrays()

    def copy(self) -> "Node":
        """
        Return a copy of this Node.

        Returns:
            A new Node whose matrices are independent of this one.
        """
        node = object.__new__(self.__class__)
        node.local_ops = self.local_ops.copy()
        node.world_matrix = self.world_matrix.copy()
        node.pivot = self.pivot
        node.position = self.position
        node.injected_perspective = None if self.injected_perspective is None else self.injected_perspective.copy()
        return node

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return False
        if (self.injected_perspective is None) != (other.injected_perspective is None):
            return False
        return (
            self.pivot == other.pivot
            and self.position == other.position
            and self.local_ops == other.local_ops
            and self.world_matrix == other.world_matrix
            and (self.injected_perspective is None or self.injected_perspective == other.injected_perspective)
        )

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        has_perspective = self.injected_perspective is not None
        return (
            f"{cls}(pivot={self.pivot}, position={self.position}, "
            f"perspective={has_perspective}, local_ops={self.local_ops!r}, "
            f"world_matrix={self.world_matrix!r})"
        )

    def __copy__(self) -> "Node":
        return self.copy()

    def __deepcopy__(self, memo) -> "Node":
        return self.copy()

    def __reduce__(self):
        """Pickle support: rebuilt through `_restore_node`."""
        perspective = None if self.injected_perspective is None else self.injected_perspective.matrix.copy()
        return (
            _restore_node,
            (self.__class__, self.local_ops.matrix.copy(), self.world_matrix.matrix.copy(),
             self.pivot, self.position, perspective),
        )


def _restore_node(cls, local_ops, world_matrix, pivot, position, perspective) -> Node:
    node = object.__new__(cls)
    node.local_ops = Matrix4(local_ops)
    node.world_matrix = Matrix4(world_matrix)
    node.pivot = tuple(pivot)
    node.position = tuple(position)
    node.injected_perspective = None if perspective is None else Matrix4(perspective)
    return node
