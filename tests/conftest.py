"""Shared fixtures for boltgen tests."""

from __future__ import annotations

import math

import cadquery as cq
import pytest

from boltgen.fasteners.parameters import BoltParameters, HeadSpec, HeadType, NutSpec, ShankSpec, ThreadSpec


def z_slab(shape: cq.Shape, z_min: float, z_max: float, radius: float = 100.0) -> cq.Shape:
    """Part of ``shape`` between two Z planes."""
    slab = cq.Solid.makeCylinder(radius, z_max - z_min, pnt=cq.Vector(0, 0, z_min))
    return shape.intersect(slab)


def cylinder_volume(diameter: float, height: float) -> float:
    return math.pi * (diameter / 2.0) ** 2 * height


@pytest.fixture
def m6_thread() -> ThreadSpec:
    return ThreadSpec(major_diameter=6.0, pitch=1.0)


@pytest.fixture
def m6_shank() -> ShankSpec:
    """M6 x 20 shank with a 5 mm grip and 0.1 mm body tolerance."""
    return ShankSpec(nominal_diameter=6.0, total_length=20.0, grip_length=5.0, body_tolerance=0.1)


@pytest.fixture
def m6_params(m6_thread) -> BoltParameters:
    return BoltParameters(
        thread=m6_thread,
        shank=ShankSpec(nominal_diameter=6.0, total_length=12.0),
        head=HeadSpec(type=HeadType.HEX, width_across_flats=10.0, height=4.0),
        nut=NutSpec(generate=True, width_across_flats=10.0, height=5.2),
        name="m6_test",
    )
