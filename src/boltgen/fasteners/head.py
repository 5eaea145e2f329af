"""
Bolt Head Builder

Builds the head standing on the XY plane. With a washer face the bearing
cylinder occupies z in [0, c] and the head body sits on top of it, so the
head spans z in [0, c + k]; without one the head spans z in [0, k].

Head styles:
- HEX: hexagonal prism of width across flats s
- SOCKET_CAP: cylinder of diameter s with a hex socket cut from the top
- FLAT: cylinder of diameter s
- COUNTERSUNK: built as FLAT (the cone is not modeled)
"""

from __future__ import annotations

import logging
import warnings

import cadquery as cq

from ..errors import ValidationError
from ..features.hex_prism import make_hex_prism
from ..solids import cut_solid, fuse_solid
from .parameters import HeadSpec, HeadType, ThreadSpec

logger = logging.getLogger(__name__)

# Socket tool extends above the top face by this fraction of the head height
SOCKET_EXTENSION = 0.1

# Washer face penetrates the head body by this fraction of its thickness
WASHER_OVERLAP = 0.5


class HeadBuilder:
    """Builds a bolt head from a head definition."""

    def __init__(self, thread: ThreadSpec, head: HeadSpec):
        self.thread = thread
        self.head = head

    @property
    def washer_thickness(self) -> float:
        return self.head.washer_face_thickness if self.head.has_washer_face else 0.0

    @property
    def total_height(self) -> float:
        """Height of the head including the washer face."""
        return self.head.height + self.washer_thickness

    def validate(self) -> None:
        """
        Check every dimension needed for the selected head style.

        Raises:
            ValidationError: On missing or inconsistent dimensions
        """
        self.head.validate()
        if self.head.width_across_flats <= self.thread.major_diameter:
            raise ValidationError(
                "head.width_across_flats",
                f"must exceed thread major diameter {self.thread.major_diameter} (got {self.head.width_across_flats})",
            )

    def build(self) -> cq.Solid:
        """
        Build the head.

        Raises:
            ValidationError: Before any geometry if the head definition is invalid
            ConstructionError: If a boolean step fails
        """
        self.validate()
        head = self.head
        logger.info("Building %s head: s=%.4g k=%.4g", head.type.name, head.width_across_flats, head.height)

        if head.type is HeadType.SOCKET_CAP:
            body = self._socket_cap()
        elif head.type in (HeadType.FLAT, HeadType.COUNTERSUNK):
            if head.type is HeadType.COUNTERSUNK:
                warnings.warn("Countersunk heads are modeled as flat cylinders", stacklevel=2)
            body = cq.Solid.makeCylinder(head.width_across_flats / 2.0, head.height)
        else:
            body = make_hex_prism(head.width_across_flats, head.height)

        if head.has_washer_face:
            body = self._add_washer_face(body)
        return body

    def _socket_cap(self) -> cq.Solid:
        head = self.head
        body = cq.Solid.makeCylinder(head.width_across_flats / 2.0, head.height)

        extension = SOCKET_EXTENSION * head.height
        socket = make_hex_prism(head.socket_size, head.socket_depth + extension)
        socket = socket.translate(cq.Vector(0, 0, head.height - head.socket_depth))
        return cut_solid(body, socket, "head")

    def _add_washer_face(self, body: cq.Solid) -> cq.Solid:
        c = self.head.washer_face_thickness
        lifted = body.translate(cq.Vector(0, 0, c))
        washer = cq.Solid.makeCylinder(self.head.washer_face_diameter / 2.0, c * (1.0 + WASHER_OVERLAP))
        return fuse_solid(lifted, washer, "head")


def make_head(thread: ThreadSpec, head: HeadSpec) -> cq.Solid:
    """Build a bolt head standing on z = 0."""
    return HeadBuilder(thread, head).build()
