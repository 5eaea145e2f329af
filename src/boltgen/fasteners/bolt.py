"""
Bolt Assembly

Assembles a bolt from a shank and a head along the Z axis:

1. Build the shank and rotate it 180° about X through its midpoint so the
   chamfered tip ends at z = 0 and the grip at z = L.
2. Build the head and place its base at z = L - overlap, where the overlap
   (0.1, or L/2 for very short shanks) keeps the fuse from producing two
   solids touching on a face.
3. Fuse and keep the greatest-volume solid.
4. Best-effort underhead fillet on the edges near the junction plane.
5. Best-effort global edge fillet, radius clamped to 10 % of d, applied only
   to edges longer than four radii.

Fillet failures never abort the build; they are recorded on the returned
``Fastener``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import cadquery as cq

from ..solids import fuse_solid, is_manifold_solid
from .fillets import FilletResult, junction_fillet, safe_edge_fillet
from .head import HeadBuilder
from .parameters import BoltParameters
from .shank import ShankBuilder
from .transforms import apply_transform_to_shape, rotation_about_x_through, translation_matrix

logger = logging.getLogger(__name__)

# Axial overlap between head and shank
FUSE_OVERLAP = 0.1

# Shanks at or below this length overlap the head by half their length instead
SHORT_SHANK_LENGTH = 0.2


def fuse_overlap(total_length: float) -> float:
    """Head/shank overlap for a shank of the given length."""
    return FUSE_OVERLAP if total_length > SHORT_SHANK_LENGTH else 0.5 * total_length


@dataclass
class Fastener:
    """
    A generated fastener solid with its build record.

    Attributes:
        kind: "bolt" or "nut"
        name: Output name (file stem)
        shape: The solid
        parameters: Parameters the solid was built from
        diagnostics: Notes about clamping, fallbacks and skipped fillets
        fillets: Outcome of every fillet request
    """

    kind: str
    name: str
    shape: cq.Solid
    parameters: BoltParameters
    diagnostics: list[str] = field(default_factory=list)
    fillets: list[FilletResult] = field(default_factory=list)

    @property
    def volume(self) -> float:
        return self.shape.Volume()

    @property
    def is_valid(self) -> bool:
        return is_manifold_solid(self.shape)

    def record_fillet(self, result: FilletResult) -> cq.Solid:
        """Store a fillet outcome and return the solid to continue with."""
        self.fillets.append(result)
        if not result.applied and result.reason != "not requested":
            self.diagnostics.append(result.describe())
        return result.shape


class BoltAssembler:
    """Builds a complete bolt from a parameter set."""

    def __init__(self, params: BoltParameters):
        self.params = params
        self.shank_builder = ShankBuilder(params.thread, params.shank)
        self.head_builder = HeadBuilder(params.thread, params.head)

    @property
    def overlap(self) -> float:
        return fuse_overlap(self.params.shank.total_length)

    @property
    def junction_z(self) -> float:
        """Z of the plane where the head's underside meets the shank."""
        return self.params.shank.total_length - self.overlap

    def validate(self) -> None:
        """Run every parameter check before any geometry is built."""
        self.params.validate()
        self.head_builder.validate()

    def build_shank(self) -> cq.Solid:
        """Shank flipped so the tip is at z = 0 and the grip ends at z = L."""
        shank = self.shank_builder.build()
        L = self.params.shank.total_length
        return apply_transform_to_shape(shank, rotation_about_x_through(180.0, (0.0, 0.0, L / 2.0)))

    def build_head(self) -> cq.Solid:
        """Head with its base at the junction plane."""
        head = self.head_builder.build()
        return apply_transform_to_shape(head, translation_matrix(0.0, 0.0, self.junction_z))

    def build(self) -> Fastener:
        """
        Build the bolt.

        Returns:
            Fastener holding the bolt solid and its diagnostics

        Raises:
            ValidationError: If the parameters are invalid (before any geometry)
            ConstructionError: If a mandatory boolean step fails
        """
        self.validate()
        params = self.params
        logger.info("Building bolt %r", params.name)

        shank = self.build_shank()
        head = self.build_head()
        solid = fuse_solid(shank, head, "fuse")

        bolt = Fastener("bolt", params.name, solid, params)
        bolt.diagnostics.extend(self.shank_builder.diagnostics)

        solid = bolt.record_fillet(junction_fillet(solid, params.head.underhead_fillet_radius, self.junction_z))
        solid = bolt.record_fillet(
            safe_edge_fillet(solid, params.shank.edge_fillet_radius, params.thread.major_diameter)
        )
        bolt.shape = solid

        if params.material.describe():
            bolt.diagnostics.append(f"material: {params.material.describe()}")
        logger.info("Bolt %r complete: volume %.6g", params.name, bolt.volume)
        return bolt


def make_bolt(params: BoltParameters) -> Fastener:
    """Build a bolt from a parameter set."""
    return BoltAssembler(params).build()
