"""
Placement Transforms

Fastener parts are positioned with 4x4 homogeneous transformation matrices
composed in numpy and converted to a kernel ``gp_Trsf`` only when applied to
a shape. Rotations, translations and uniform scales all go through the same
path, so a placement can be built up by matrix products and applied once.

Convention: matrices act on column vectors, so ``compose(A, B)`` applies B
first, then A.
"""

from __future__ import annotations

import math

import cadquery as cq
import numpy as np
from OCP.BRepBuilderAPI import BRepBuilderAPI_Transform
from OCP.gp import gp_Trsf

# =============================================================================
# MATRIX CONSTRUCTION
# =============================================================================


def translation_matrix(x: float, y: float, z: float) -> np.ndarray:
    """Create 4x4 translation matrix."""
    T = np.eye(4)
    T[0, 3] = x
    T[1, 3] = y
    T[2, 3] = z
    return T


def rotation_matrix_x(angle_deg: float) -> np.ndarray:
    """Create 4x4 rotation matrix around X axis."""
    angle = math.radians(angle_deg)
    c, s = math.cos(angle), math.sin(angle)
    R = np.eye(4)
    R[1, 1] = c
    R[1, 2] = -s
    R[2, 1] = s
    R[2, 2] = c
    return R


def scale_matrix(factor: float) -> np.ndarray:
    """Create 4x4 uniform scale matrix about the origin."""
    if factor <= 0:
        raise ValueError(f"Scale factor must be positive, got {factor}")
    S = np.eye(4)
    S[0, 0] = factor
    S[1, 1] = factor
    S[2, 2] = factor
    return S


def compose(*matrices: np.ndarray) -> np.ndarray:
    """Multiply matrices left to right; the rightmost is applied first."""
    result = np.eye(4)
    for M in matrices:
        result = result @ M
    return result


def about_point(M: np.ndarray, point: tuple[float, float, float]) -> np.ndarray:
    """Conjugate a linear transform so it acts about ``point`` instead of the origin."""
    x, y, z = point
    return compose(translation_matrix(x, y, z), M, translation_matrix(-x, -y, -z))


def rotation_about_x_through(angle_deg: float, point: tuple[float, float, float]) -> np.ndarray:
    """Rotation about an axis parallel to X passing through ``point``."""
    return about_point(rotation_matrix_x(angle_deg), point)


def scale_about(factor: float, point: tuple[float, float, float]) -> np.ndarray:
    """Uniform scale about ``point``."""
    return about_point(scale_matrix(factor), point)


def transform_point(T: np.ndarray, point: tuple[float, float, float]) -> tuple[float, float, float]:
    """Apply a 4x4 transform to a point."""
    p = T @ np.array([point[0], point[1], point[2], 1.0])
    return (float(p[0]), float(p[1]), float(p[2]))


# =============================================================================
# KERNEL CONVERSION
# =============================================================================


def matrix_to_trsf(T: np.ndarray) -> gp_Trsf:
    """Convert a rigid or uniformly scaled 4x4 matrix to a gp_Trsf."""
    trsf = gp_Trsf()
    trsf.SetValues(
        float(T[0, 0]), float(T[0, 1]), float(T[0, 2]), float(T[0, 3]),
        float(T[1, 0]), float(T[1, 1]), float(T[1, 2]), float(T[1, 3]),
        float(T[2, 0]), float(T[2, 1]), float(T[2, 2]), float(T[2, 3]),
    )
    return trsf


def apply_transform_to_shape(shape: cq.Shape, T: np.ndarray) -> cq.Shape:
    """Apply 4x4 transformation matrix to a CadQuery shape, returning a new shape."""
    op = BRepBuilderAPI_Transform(shape.wrapped, matrix_to_trsf(T), True)
    return cq.Shape.cast(op.Shape())
