"""
Threaded Shank Builder

Builds the shank of a bolt standing on the XY plane, spanning exactly
z in [0, L]. The unthreaded grip (if any) is nearest z = 0 and the thread
runs up to the chamfered tip at z = L.

Construction:
1. Over-length blank (L + 4P) of the body diameter (d - body tolerance)
2. Cut the helical thread tool, built at the same over-length. If the kernel
   returns nothing usable, retry with both lengths offset by a fraction of a
   pitch, then cut the blank in short axial segments and fuse them back
3. Grip: cut a mask over [-eps, g] and fuse back a plain cylinder over [0, g]
4. Trim everything above z = L
5. Cut the revolved lead-in chamfer tool at the tip

A threaded length shorter than one pitch yields a plain cylinder.
"""

from __future__ import annotations

import logging

import cadquery as cq

from ..errors import ConstructionError
from ..features.revolve_profile import Point3, make_revolved_profile
from ..features.thread_profile import make_thread_tool
from ..solids import cut_solid, fuse_solid
from .parameters import ShankSpec, ThreadSpec

logger = logging.getLogger(__name__)

# Extra blank length beyond L, in pitches
OVER_LENGTH_PITCHES = 4.0

# Axial overlap of the grip mask below z = 0, in pitches
GRIP_MASK_OVERLAP = 0.1

# Smallest inner radius of the chamfer tool, as a fraction of d
MIN_CHAMFER_INNER_FRACTION = 0.1

# Blank and tool extension, in pitches, for the second thread cut attempt
RETRY_EXTENSION_PITCHES = 0.37

# Segment length, in pitches, for the segmented thread cut
SEGMENT_PITCHES = 3.3

# A thread cut must remove at least this fraction of the blank volume
MIN_THREAD_REMOVAL = 0.01

# Blank remainders shorter than this are not cut as a separate segment
SEGMENT_TOLERANCE = 1e-6


class ShankBuilder:
    """
    Builds a threaded shank from a thread and shank definition.

    Attributes:
        thread: Thread definition
        shank: Shank definition
        diagnostics: Notes about clamping and fallbacks taken during the last build
    """

    def __init__(self, thread: ThreadSpec, shank: ShankSpec):
        self.thread = thread
        self.shank = shank
        self.diagnostics: list[str] = []

    @property
    def radius(self) -> float:
        """Radius of the blank, nominal diameter minus body tolerance, halved."""
        return self.shank.body_diameter / 2.0

    @property
    def grip_length(self) -> float:
        """Grip length after clamping to leave the minimum number of full threads."""
        return self.shank.effective_grip_length(self.thread.pitch)

    @property
    def threaded_length(self) -> float:
        return self.shank.total_length - self.grip_length

    @property
    def over_length(self) -> float:
        return self.shank.total_length + OVER_LENGTH_PITCHES * self.thread.pitch

    def validate(self) -> None:
        self.thread.validate()
        self.shank.validate()

    def chamfer_points(self) -> list[Point3]:
        """Lead-in chamfer profile at the tip (45°, one pitch deep at the surface)."""
        d = self.thread.major_diameter
        p = self.thread.pitch
        L = self.shank.total_length
        inner = max(0.5 * d - p, MIN_CHAMFER_INNER_FRACTION * d)
        return [
            (inner, 0.0, L),
            (inner, 0.0, L + p),
            (d, 0.0, L + p),
            (d, 0.0, L - (d - inner)),
        ]

    def build(self) -> cq.Solid:
        """
        Build the shank.

        Returns:
            Shank solid spanning z in [0, total_length]

        Raises:
            ValidationError: If the thread or shank definition is invalid
            ConstructionError: If a mandatory boolean step fails
        """
        self.validate()
        self.diagnostics = []

        L = self.shank.total_length
        p = self.thread.pitch

        if self.shank.grip_length > self.grip_length:
            self._note(
                f"grip length clamped from {self.shank.grip_length:g} to {self.grip_length:g} "
                f"to keep full threads below the tip"
            )

        if self.threaded_length < p:
            self._note(f"threaded length {self.threaded_length:.4g} < pitch {p:g}, building plain cylinder")
            return cq.Solid.makeCylinder(self.radius, L)

        logger.info(
            "Building shank: d=%.4g P=%.4g L=%.4g grip=%.4g", self.shank.nominal_diameter, p, L, self.grip_length
        )
        body = self._threaded_blank()
        if self.grip_length > 0:
            body = self._restore_grip(body)
        body = self._trim(body)
        return self._cut_chamfer(body)

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _threaded_blank(self) -> cq.Solid:
        """Over-length blank with the thread cut, trying each cut strategy in turn."""
        attempts = [
            ("direct", self._cut_direct),
            ("extended", self._cut_extended),
            ("segmented", self._cut_segmented),
        ]
        failures = []
        for name, attempt in attempts:
            try:
                return attempt()
            except ConstructionError as e:
                logger.warning("Shank: %s thread cut failed (%s)", name, e)
                failures.append(f"{name}: {e}")
                self._note(f"{name} thread cut failed: {e}")

        raise ConstructionError(
            "thread",
            "every thread cut strategy failed (" + "; ".join(failures) + ")",
            {"major_diameter": self.thread.major_diameter, "pitch": self.thread.pitch, "length": self.over_length},
        )

    def _thread_tool(self, length: float) -> cq.Solid:
        return make_thread_tool(self.thread.effective_minor_diameter, self.thread.pitch, length)

    def _checked_cut(self, blank: cq.Solid, tool: cq.Solid) -> cq.Solid:
        """Cut the thread tool from a blank, rejecting results that kept the blank intact."""
        body = cut_solid(blank, tool, "thread")
        if body.Volume() > (1.0 - MIN_THREAD_REMOVAL) * blank.Volume():
            raise ConstructionError("thread", "thread cut removed no material", {"volume": body.Volume()})
        return body

    def _cut_direct(self) -> cq.Solid:
        blank = cq.Solid.makeCylinder(self.radius, self.over_length)
        return self._checked_cut(blank, self._thread_tool(self.over_length))

    def _cut_extended(self) -> cq.Solid:
        # Moves the tool's end caps and the blank's top face off their usual alignment
        extension = RETRY_EXTENSION_PITCHES * self.thread.pitch
        blank = cq.Solid.makeCylinder(self.radius, self.over_length + extension)
        return self._checked_cut(blank, self._thread_tool(self.over_length + 2.0 * extension))

    def _cut_segmented(self) -> cq.Solid:
        """Cut the thread from short blank segments and fuse them back together."""
        tool = self._thread_tool(self.over_length)
        step = SEGMENT_PITCHES * self.thread.pitch

        body = None
        z = 0.0
        while self.over_length - z > SEGMENT_TOLERANCE:
            height = min(step, self.over_length - z)
            segment = cq.Solid.makeCylinder(self.radius, height, pnt=cq.Vector(0, 0, z))
            piece = self._checked_cut(segment, tool)
            body = piece if body is None else fuse_solid(body, piece, "thread")
            z += step
        return body.clean()

    def _restore_grip(self, body: cq.Solid) -> cq.Solid:
        grip = self.grip_length
        eps = GRIP_MASK_OVERLAP * self.thread.pitch
        mask = cq.Solid.makeCylinder(self.shank.nominal_diameter, grip + eps, pnt=cq.Vector(0, 0, -eps))
        body = cut_solid(body, mask, "shank")
        plain = cq.Solid.makeCylinder(self.radius, grip)
        return fuse_solid(body, plain, "shank")

    def _trim(self, body: cq.Solid) -> cq.Solid:
        L = self.shank.total_length
        height = self.over_length - L + 2.0 * self.thread.pitch
        mask = cq.Solid.makeCylinder(2.0 * self.shank.nominal_diameter, height, pnt=cq.Vector(0, 0, L))
        return cut_solid(body, mask, "shank")

    def _cut_chamfer(self, body: cq.Solid) -> cq.Solid:
        tool = make_revolved_profile(self.chamfer_points())
        return cut_solid(body, tool, "chamfer")

    def _note(self, message: str) -> None:
        logger.info("Shank: %s", message)
        self.diagnostics.append(message)


def make_shank(thread: ThreadSpec, shank: ShankSpec) -> cq.Solid:
    """Build a threaded shank spanning z in [0, L]."""
    return ShankBuilder(thread, shank).build()
