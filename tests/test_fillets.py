"""Tests for boolean helpers, multi-solid selection and best-effort fillets."""

from __future__ import annotations

import cadquery as cq
import pytest

from boltgen.errors import ConstructionError
from boltgen.fasteners.fillets import (
    FilletResult,
    clamp_fillet_radius,
    junction_fillet,
    safe_edge_fillet,
)
from boltgen.solids import cut_solid, fuse_solid, is_manifold_solid, largest_solid


def _box(size: float, x: float = 0.0) -> cq.Solid:
    return cq.Solid.makeBox(size, size, size, pnt=cq.Vector(x, 0, 0))


class TestLargestSolid:
    """Greatest-volume selection over multi-solid results."""

    def test_selects_larger_of_two_disjoint_solids(self):
        small, large = _box(1.0), _box(2.0, x=5.0)
        compound = cq.Compound.makeCompound([small, large])
        selected = largest_solid(compound)
        assert abs(selected.Volume() - 8.0) < 1e-9

    def test_order_does_not_matter(self):
        small, large = _box(1.0), _box(2.0, x=5.0)
        compound = cq.Compound.makeCompound([large, small])
        assert abs(largest_solid(compound).Volume() - 8.0) < 1e-9

    def test_fuse_of_disjoint_solids_keeps_larger(self):
        fused = fuse_solid(_box(1.0), _box(2.0, x=5.0), "fuse")
        assert abs(fused.Volume() - 8.0) < 1e-6

    def test_cut_splitting_body_keeps_larger_piece(self):
        """A slot through a bar leaves a short and a long piece."""
        bar = cq.Solid.makeBox(10.0, 1.0, 1.0)
        slot = cq.Solid.makeBox(1.0, 3.0, 3.0, pnt=cq.Vector(2.0, -1.0, -1.0))
        piece = cut_solid(bar, slot, "shank")
        assert abs(piece.Volume() - 7.0) < 1e-6

    def test_empty_result_raises(self):
        with pytest.raises(ConstructionError) as excinfo:
            cut_solid(_box(1.0), cq.Solid.makeBox(3.0, 3.0, 3.0, pnt=cq.Vector(-1, -1, -1)), "thread")
        assert excinfo.value.stage == "thread"
        assert "no solids" in str(excinfo.value)

    def test_manifold_check(self):
        assert is_manifold_solid(_box(1.0))
        assert not is_manifold_solid(cq.Compound.makeCompound([_box(1.0), _box(1.0, x=5.0)]))


class TestFilletClamp:
    """The applied radius never exceeds 10 % of the reference size."""

    @pytest.mark.parametrize("requested", [0.7, 1.0, 5.0, 100.0])
    def test_clamped_to_tenth_of_diameter(self, requested):
        assert clamp_fillet_radius(requested, 6.0) <= 0.6 + 1e-12

    def test_small_radius_unchanged(self):
        assert clamp_fillet_radius(0.2, 6.0) == 0.2

    def test_safe_edge_fillet_reports_clamped_radius(self):
        box = cq.Solid.makeBox(10.0, 10.0, 10.0)
        result = safe_edge_fillet(box, 5.0, reference_size=6.0)
        assert result.radius <= 0.6 + 1e-12
        assert result.requested_radius == 5.0
        assert result.applied
        assert result.edges == 12
        assert result.shape.Volume() < box.Volume()


class TestBestEffortFillet:
    """Fillets that cannot be built return the input solid unchanged."""

    def test_not_requested(self):
        box = _box(2.0)
        result = safe_edge_fillet(box, 0.0, reference_size=10.0)
        assert not result.applied
        assert result.shape is box
        assert result.reason == "not requested"

    def test_no_qualifying_edges(self):
        """Edges of length 1 are too short for r = 0.5 (needs > 2)."""
        box = _box(1.0)
        result = safe_edge_fillet(box, 0.5, reference_size=100.0)
        assert not result.applied
        assert result.shape is box
        assert result.edges == 0
        assert "no suitable edges" in result.reason

    def test_failed_fillet_keeps_original(self):
        """A radius far larger than the faces cannot be built."""
        box = _box(2.0)
        result = junction_fillet(box, 10.0, plane_z=0.0)
        assert isinstance(result, FilletResult)
        assert not result.applied
        assert result.shape is box
        assert result.edges == 4
        assert result.reason

    def test_junction_fillet_selects_edges_near_plane(self):
        box = cq.Solid.makeBox(4.0, 4.0, 4.0)
        result = junction_fillet(box, 0.3, plane_z=4.0)
        assert result.edges == 4
        assert result.applied
        assert is_manifold_solid(result.shape)

    def test_describe(self):
        box = _box(1.0)
        skipped = safe_edge_fillet(box, 0.5, reference_size=100.0)
        assert "skipped" in skipped.describe()
        applied = junction_fillet(cq.Solid.makeBox(4.0, 4.0, 4.0), 0.3, plane_z=4.0)
        assert "applied" in applied.describe()
