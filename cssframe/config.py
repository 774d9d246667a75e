"""
Numeric Tolerances
==================
Central registry for the thresholds used by the point mappers.

Exports:
    W_EPSILON (float): smallest |w| accepted by a homogeneous divide.
    PARALLEL_EPSILON (float): smallest |dz| of a ray before it counts as
        parallel to a node's plane.
    DETERMINANT_EPSILON (float): largest |det| still treated as singular.
    ALLCLOSE_RTOL, ALLCLOSE_ATOL (float): tolerances for matrix equality.
"""

W_EPSILON: float = 1e-6
PARALLEL_EPSILON: float = 1e-6
DETERMINANT_EPSILON: float = 1e-12

ALLCLOSE_RTOL: float = 1e-5
ALLCLOSE_ATOL: float = 1e-8
