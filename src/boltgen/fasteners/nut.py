"""
Hex Nut Assembly

The internal thread is cut with an actual externally threaded rod rather
than modeled separately, so a nut always meshes with a bolt built from the
same thread definition.

1. Hex blank of width s and height h, with an optional washer face at the base
2. Cutter: a threaded shank (no grip) of length h + 2 x overlap, centered on
   the nut so it protrudes from both faces, scaled about the nut's
   mid-height by 1 + tolerance/d for running clearance
3. Subtract the cutter; if that fails, bore a plain clearance hole instead
4. Best-effort edge fillet clamped to 10 % of s
"""

from __future__ import annotations

import logging

import cadquery as cq
import numpy as np

from ..errors import ConstructionError
from ..features.hex_prism import make_hex_prism
from ..solids import cut_solid, fuse_solid
from .bolt import Fastener
from .fillets import safe_edge_fillet
from .parameters import BoltParameters, ShankSpec
from .shank import ShankBuilder
from .transforms import apply_transform_to_shape, compose, scale_about, translation_matrix

logger = logging.getLogger(__name__)

# Cutter protrusion beyond each nut face
CUTTER_OVERLAP = 5.0

# Washer face penetrates the hex body by this fraction of its thickness
WASHER_OVERLAP = 0.5


class NutAssembler:
    """Builds the hex nut matching a bolt parameter set."""

    def __init__(self, params: BoltParameters):
        self.params = params
        self.diagnostics: list[str] = []

    @property
    def scale_factor(self) -> float:
        """Radial clearance scale: 1 + tolerance / d."""
        return 1.0 + self.params.nut.tolerance / self.params.thread.major_diameter

    @property
    def name(self) -> str:
        return f"{self.params.name}_nut"

    def validate(self) -> None:
        self.params.thread.validate()
        self.params.nut.validate(self.params.thread)

    def blank(self) -> cq.Solid:
        """Hex blank spanning z in [0, h], washer face included."""
        nut = self.params.nut
        if not nut.has_washer_face:
            return make_hex_prism(nut.width_across_flats, nut.height)

        c = nut.washer_face_thickness
        body = make_hex_prism(nut.width_across_flats, nut.height - c).translate(cq.Vector(0, 0, c))
        washer = cq.Solid.makeCylinder(nut.washer_face_diameter / 2.0, c * (1.0 + WASHER_OVERLAP))
        return fuse_solid(body, washer, "nut")

    def cutter_transform(self) -> np.ndarray:
        """Centers the cutter on the nut, then scales it about the nut mid-height."""
        h = self.params.nut.height
        return compose(
            scale_about(self.scale_factor, (0.0, 0.0, h / 2.0)),
            translation_matrix(0.0, 0.0, -CUTTER_OVERLAP),
        )

    def cutter(self) -> cq.Solid:
        """
        Threaded rod used to cut the nut thread, positioned and scaled.

        Spans roughly z in [-overlap, h + overlap] (times the clearance scale).
        """
        thread = self.params.thread
        rod = ShankSpec(
            nominal_diameter=thread.major_diameter,
            total_length=self.params.nut.height + 2.0 * CUTTER_OVERLAP,
        )
        shank = ShankBuilder(thread, rod).build()
        return apply_transform_to_shape(shank, self.cutter_transform())

    def clearance_bore(self) -> cq.Solid:
        """Plain through hole of radius d/2 x scale, used when the thread cut fails."""
        radius = 0.5 * self.params.thread.major_diameter * self.scale_factor
        height = self.params.nut.height + 2.0 * CUTTER_OVERLAP
        return cq.Solid.makeCylinder(radius, height, pnt=cq.Vector(0, 0, -CUTTER_OVERLAP))

    def build(self) -> Fastener:
        """
        Build the nut.

        Raises:
            ValidationError: If the thread or nut definition is invalid
            ConstructionError: If even the clearance bore cannot be cut
        """
        self.validate()
        self.diagnostics = []
        nut = self.params.nut
        logger.info("Building nut %r: s=%.4g m=%.4g tol=%.4g", self.name, nut.width_across_flats, nut.height, nut.tolerance)

        blank = self.blank()
        try:
            body = cut_solid(blank, self.cutter(), "nut")
        except ConstructionError as e:
            logger.warning("Nut thread cut failed (%s), boring plain clearance hole", e)
            self.diagnostics.append(f"thread cut failed, plain clearance bore used: {e}")
            body = cut_solid(blank, self.clearance_bore(), "nut")

        result = Fastener("nut", self.name, body, self.params, list(self.diagnostics))
        result.shape = result.record_fillet(
            safe_edge_fillet(body, nut.edge_fillet_radius, nut.width_across_flats, "nut edge fillet")
        )
        logger.info("Nut %r complete: volume %.6g", self.name, result.volume)
        return result


def make_nut(params: BoltParameters) -> Fastener:
    """Build the hex nut for a parameter set."""
    return NutAssembler(params).build()
