import unittest
import numpy as np
from cssframe import (
    DegenerateProjectionError,
    Node,
    NotInvertibleError,
    TransformError,
)

LOCAL_POINTS = [
    (0.0, 0.0),
    (100.0, 0.0),
    (100.0, 100.0),
    (0.0, 100.0),
    (50.0, 50.0),
    (37.5, 12.25),
    (-20.0, 140.0),
]


def tilted_card():
    return (
        Node()
        .with_position(350.0, 250.0)
        .with_parent_perspective(500.0, 400.0, 300.0)
        .then_rotate_y(30.0)
        .then_rotate_x(45.0)
        .with_pivot(50.0, 50.0)
        .composed(Node())
    )


def flat_node():
    return (
        Node()
        .with_pivot(10.0, 20.0)
        .with_position(100.0, 50.0)
        .then_rotate_z(30.0)
        .then_scale(2.0, 0.5)
        .then_translate(5.0, 7.0)
        .composed(Node())
    )


class TestToLocal(unittest.TestCase):
    def assertRoundTrip(self, node, points, tol=1e-4):
        for p in points:
            x, y, z = node.to_world_3d(*p)
            back = node.to_local(x, y, z)
            np.testing.assert_allclose(back, p, atol=tol, err_msg=f"round trip of {p}")

    def test_round_trip_without_perspective(self):
        self.assertRoundTrip(flat_node(), LOCAL_POINTS)

    def test_round_trip_with_perspective(self):
        self.assertRoundTrip(tilted_card(), LOCAL_POINTS)

    def test_round_trip_through_child(self):
        child = (
            Node()
            .with_position(55.0, 10.0)
            .then_rotate_y(20.0)
            .with_pivot(17.5, 40.0)
            .composed(tilted_card())
        )
        self.assertRoundTrip(child, LOCAL_POINTS)

    def test_corners_invert_exactly(self):
        card = tilted_card()
        for corner in [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]:
            hx, hy, hz, hw = card.world_matrix.apply_homogeneous(*corner)
            back = card.to_local(hx / hw, hy / hw, hz / hw)
            np.testing.assert_allclose(back, corner, atol=0.01)

    def test_to_world_3d_agrees_with_to_world(self):
        card = tilted_card()
        for p in LOCAL_POINTS:
            np.testing.assert_allclose(card.to_world_3d(*p)[:2], card.to_world(*p))

    def test_wrong_depth_gives_a_different_point(self):
        card = tilted_card()
        x, y, z = card.to_world_3d(100.0, 100.0)
        self.assertFalse(np.allclose(card.to_local(x, y, 0.0), (100.0, 100.0), atol=0.01))

    def test_singular_matrix(self):
        node = Node().then_scale(0.0, 1.0).composed()
        with self.assertRaises(NotInvertibleError):
            node.to_local(1.0, 2.0, 0.0)

    def test_degenerate_w(self):
        node = Node().with_parent_perspective(500.0, 0.0, 0.0).composed()
        # the inverse projection sends world z = -500 to infinity
        with self.assertRaises(DegenerateProjectionError):
            node.to_local(3.0, 4.0, -500.0)


class TestToWorldDegenerate(unittest.TestCase):
    def setUp(self):
        # lifting the plane to the focal depth puts it at infinity
        self.node = (
            Node()
            .with_parent_perspective(500.0, 0.0, 0.0)
            .then_translate_z(500.0 - 78.0)
            .composed()
        )

    def test_to_world_falls_back_to_origin(self):
        self.assertEqual(self.node.to_world(0.0, 0.0), (0.0, 0.0))
        self.assertEqual(self.node.to_world(10.0, 5.0), (0.0, 0.0))

    def test_to_world_3d_raises(self):
        with self.assertRaises(DegenerateProjectionError):
            self.node.to_world_3d(10.0, 5.0)


class TestRayCast(unittest.TestCase):
    def test_self_consistency_with_perspective(self):
        card = tilted_card()
        for p in LOCAL_POINTS:
            screen = card.to_world(*p)
            back = card.ray_cast_to_local(*screen)
            np.testing.assert_allclose(back, p, atol=0.01, err_msg=f"ray cast of {p}")

    def test_self_consistency_for_child(self):
        child = (
            Node()
            .with_position(10.0, 10.0)
            .then_rotate_y(20.0)
            .with_pivot(17.5, 40.0)
            .composed(tilted_card())
        )
        for p in [(0.0, 0.0), (35.0, 0.0), (35.0, 80.0), (17.5, 40.0)]:
            np.testing.assert_allclose(child.ray_cast_to_local(*child.to_world(*p)), p, atol=0.01)

    def test_self_consistency_without_perspective(self):
        node = Node().with_pivot(50, 50).then_rotate_x(60).then_rotate_z(10).composed()
        for p in LOCAL_POINTS:
            np.testing.assert_allclose(node.ray_cast_to_local(*node.to_world(*p)), p, atol=0.01)

    def test_flat_node_matches_to_local(self):
        node = flat_node()
        for p in LOCAL_POINTS:
            x, y = node.to_world(*p)
            np.testing.assert_allclose(node.ray_cast_to_local(x, y), node.to_local(x, y, 0.0), atol=1e-9)

    def test_edge_on_view(self):
        node = Node().then_rotate_y(90.0).composed()
        with self.assertRaises(DegenerateProjectionError):
            node.ray_cast_to_local(10.0, 10.0)

    def test_singular_matrix(self):
        node = Node().then_scale(1.0, 0.0).composed()
        with self.assertRaises(NotInvertibleError):
            node.ray_cast_to_local(10.0, 10.0)

    def test_errors_share_a_base(self):
        for node in (Node().then_rotate_y(90.0).composed(), Node().then_scale(0.0, 0.0).composed()):
            with self.assertRaises(TransformError):
                node.ray_cast_to_local(1.0, 1.0)


class TestHitTestRect(unittest.TestCase):
    def test_inside_and_outside(self):
        card = tilted_card()
        self.assertTrue(card.hit_test_rect(*card.to_world(50.0, 50.0), 100.0, 100.0))
        self.assertTrue(card.hit_test_rect(*card.to_world(99.0, 1.0), 100.0, 100.0))
        self.assertFalse(card.hit_test_rect(*card.to_world(150.0, 50.0), 100.0, 100.0))
        self.assertFalse(card.hit_test_rect(*card.to_world(50.0, -10.0), 100.0, 100.0))

    def test_no_local_image_is_a_miss(self):
        edge_on = Node().then_rotate_y(90.0).composed()
        self.assertFalse(edge_on.hit_test_rect(0.0, 0.0, 100.0, 100.0))
        singular = Node().then_scale(0.0, 0.0).composed()
        self.assertFalse(singular.hit_test_rect(0.0, 0.0, 100.0, 100.0))


if __name__ == "__main__":
    unittest.main()
