import unittest
import math
import numpy as np
from cssframe import (
    MIN_PERSPECTIVE_DISTANCE,
    PERSPECTIVE_Z_CORRECTION,
    Matrix4,
    Node,
    perspective_matrix,
)


class TestPerspectiveMatrix(unittest.TestCase):
    def test_constants(self):
        self.assertEqual(PERSPECTIVE_Z_CORRECTION, 78.0)
        self.assertEqual(MIN_PERSPECTIVE_DISTANCE, 1.0)

    def test_structure_without_origin(self):
        m = perspective_matrix(500.0, 0.0, 0.0).matrix
        # depth offset first, then the projection row
        np.testing.assert_allclose(m[2, :], [0.0, 0.0, 1.0, 78.0])
        np.testing.assert_allclose(m[3, :], [0.0, 0.0, -1.0 / 500.0, 1.0 - 78.0 / 500.0])
        np.testing.assert_allclose(m[:2, :], np.eye(4)[:2, :])

    def test_matches_explicit_composition(self):
        projection = Matrix4.identity()
        projection.matrix[3, 2] = -1.0 / 500.0
        expected = (
            Matrix4.translation(-400, -300, 0)
            .then(Matrix4.translation(0, 0, 78))
            .then(projection)
            .then(Matrix4.translation(400, 300, 0))
        )
        np.testing.assert_allclose(perspective_matrix(500, 400, 300).matrix, expected.matrix)

    def test_origin_is_fixed_point(self):
        m = perspective_matrix(500.0, 400.0, 300.0)
        out = m @ np.array([400.0, 300.0, 0.0])
        np.testing.assert_allclose(out[:2], [400.0, 300.0], atol=1e-9)

    def test_points_spread_away_from_origin(self):
        m = perspective_matrix(500.0, 400.0, 300.0)
        out = m @ np.array([500.0, 300.0, 0.0])
        # 100 units right of the origin, magnified by 1 / (1 - 78/500)
        self.assertAlmostEqual(out[0], 400.0 + 100.0 / (1.0 - 78.0 / 500.0))
        self.assertAlmostEqual(out[1], 300.0)

    def test_infinite_distance_has_no_foreshortening(self):
        m = perspective_matrix(math.inf, 400.0, 300.0)
        np.testing.assert_allclose(m.matrix, Matrix4.translation(0, 0, 78).matrix)

    def test_nan_distance_raises(self):
        with self.assertRaises(ValueError):
            perspective_matrix(math.nan, 0.0, 0.0)


class TestDegenerateDistance(unittest.TestCase):
    def test_zero_clamps_to_minimum(self):
        with self.assertLogs("cssframe.perspective", level="WARNING") as cm:
            m = perspective_matrix(0.0, 400.0, 300.0)
        self.assertIn("clamping", cm.output[0])
        self.assertTrue(np.all(np.isfinite(m.matrix)))
        np.testing.assert_array_equal(m.matrix, perspective_matrix(1.0, 400.0, 300.0).matrix)

    def test_tiny_distance_clamps_to_minimum(self):
        with self.assertLogs("cssframe.perspective", level="WARNING"):
            m = perspective_matrix(1e-9, 400.0, 300.0)
        np.testing.assert_array_equal(m.matrix, perspective_matrix(1.0, 400.0, 300.0).matrix)

    def test_negative_tiny_distance_keeps_sign(self):
        with self.assertLogs("cssframe.perspective", level="WARNING"):
            m = perspective_matrix(-1e-9, 0.0, 0.0)
        np.testing.assert_array_equal(m.matrix, perspective_matrix(-1.0, 0.0, 0.0).matrix)

    def test_distance_at_minimum_is_untouched(self):
        with self.assertNoLogs("cssframe.perspective", level="WARNING"):
            perspective_matrix(1.0, 0.0, 0.0)

    def test_degenerate_node_maps_to_finite_points(self):
        with self.assertLogs("cssframe.perspective", level="WARNING"):
            node = (
                Node()
                .with_position(350, 250)
                .with_parent_perspective(0.0, 400, 300)
                .with_pivot(50, 50)
                .then_rotate_x(45)
                .composed()
            )
        for corner in [(0, 0), (100, 0), (100, 100), (0, 100)]:
            x, y = node.to_world(*corner)
            self.assertTrue(math.isfinite(x) and math.isfinite(y))
        # the pivot sits on the perspective origin
        np.testing.assert_allclose(node.to_world(50, 50), (400.0, 300.0), atol=1e-9)
        lx, ly = node.ray_cast_to_local(400.0, 300.0)
        self.assertAlmostEqual(lx, 50.0, places=4)
        self.assertAlmostEqual(ly, 50.0, places=4)


if __name__ == "__main__":
    unittest.main()
