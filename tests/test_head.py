"""Tests for the bolt head builder."""

from __future__ import annotations

import math

import pytest

from boltgen.errors import ValidationError
from boltgen.features.hex_prism import hexagon_area
from boltgen.fasteners.head import HeadBuilder, make_head
from boltgen.fasteners.parameters import HeadSpec, HeadType
from boltgen.solids import is_manifold_solid

from conftest import cylinder_volume


class TestHeadStyles:
    """Geometry of each head style."""

    def test_hex_head(self, m6_thread):
        head = make_head(m6_thread, HeadSpec(type=HeadType.HEX, width_across_flats=10.0, height=4.0))
        assert is_manifold_solid(head)
        assert abs(head.Volume() - hexagon_area(10.0) * 4.0) < 1e-6

    def test_socket_cap_head(self, m6_thread):
        spec = HeadSpec(type=HeadType.SOCKET_CAP, width_across_flats=10.0, height=6.0, socket_size=5.0, socket_depth=3.0)
        head = make_head(m6_thread, spec)
        assert is_manifold_solid(head)
        expected = cylinder_volume(10.0, 6.0) - hexagon_area(5.0) * 3.0
        assert abs(head.Volume() - expected) < 1e-4 * expected

    def test_socket_opens_at_top(self, m6_thread):
        spec = HeadSpec(type=HeadType.SOCKET_CAP, width_across_flats=10.0, height=6.0, socket_size=5.0, socket_depth=3.0)
        head = make_head(m6_thread, spec)
        assert not head.isInside((0.0, 0.0, 5.5))
        assert head.isInside((0.0, 0.0, 1.0))

    def test_flat_head(self, m6_thread):
        head = make_head(m6_thread, HeadSpec(type=HeadType.FLAT, width_across_flats=12.0, height=3.0))
        assert abs(head.Volume() - cylinder_volume(12.0, 3.0)) < 1e-6

    def test_countersunk_modeled_as_flat(self, m6_thread):
        spec = HeadSpec(type=HeadType.COUNTERSUNK, width_across_flats=12.0, height=3.0)
        with pytest.warns(UserWarning, match="Countersunk"):
            head = make_head(m6_thread, spec)
        assert abs(head.Volume() - cylinder_volume(12.0, 3.0)) < 1e-6

    def test_washer_face_below_head(self, m6_thread):
        spec = HeadSpec(width_across_flats=10.0, height=4.0, washer_face_diameter=9.0, washer_face_thickness=0.5)
        builder = HeadBuilder(m6_thread, spec)
        head = builder.build()
        assert is_manifold_solid(head)
        assert builder.total_height == 4.5
        bb = head.BoundingBox()
        assert abs(bb.zmin) < 1e-6
        assert abs(bb.zmax - 4.5) < 1e-6
        expected = hexagon_area(10.0) * 4.0 + cylinder_volume(9.0, 0.5)
        assert abs(head.Volume() - expected) < 1e-4 * expected


class TestHeadValidation:
    """Validation happens before any geometry is built."""

    def test_oversized_socket_rejected_before_geometry(self, m6_thread, monkeypatch):
        """Socket 12 across a 10 mm head (limit 9) fails without touching the kernel."""

        def no_geometry(self):
            raise AssertionError("geometry built before validation")

        monkeypatch.setattr(HeadBuilder, "_socket_cap", no_geometry)
        spec = HeadSpec(type=HeadType.SOCKET_CAP, width_across_flats=10.0, height=6.0, socket_size=12.0, socket_depth=3.0)
        with pytest.raises(ValidationError) as excinfo:
            HeadBuilder(m6_thread, spec).build()
        assert excinfo.value.field == "head.socket_size"

    def test_head_narrower_than_thread_rejected(self, m6_thread):
        with pytest.raises(ValidationError) as excinfo:
            make_head(m6_thread, HeadSpec(width_across_flats=5.0, height=4.0))
        assert excinfo.value.field == "head.width_across_flats"

    def test_zero_height_rejected(self, m6_thread):
        with pytest.raises(ValidationError):
            make_head(m6_thread, HeadSpec(width_across_flats=10.0, height=0.0))

    def test_unknown_type_builds_hex(self, m6_thread):
        with pytest.warns(UserWarning):
            spec = HeadSpec(type="mushroom", width_across_flats=10.0, height=4.0)
        head = make_head(m6_thread, spec)
        assert abs(head.Volume() - hexagon_area(10.0) * 4.0) < 1e-6
        assert math.isclose(head.BoundingBox().xlen, 10.0, rel_tol=1e-4)
