"""
Best-effort fillet operations.

Fillets are cosmetic: a fastener solid is valid without them. Every fillet
request therefore follows the same policy:

1. Clamp the requested radius to a safe maximum for the part.
2. Keep only edges the radius can actually round (edge length > 4 x radius).
3. Build the fillet; on any kernel failure or invalid result keep the input
   solid unchanged.

The outcome is always a ``FilletResult`` holding either the filleted solid
or the original one, plus the numbers needed to explain what happened.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import cadquery as cq
from OCP.BRepFilletAPI import BRepFilletAPI_MakeFillet

from ..errors import ConstructionError
from ..solids import edge_centroid_z, edge_length, largest_solid

logger = logging.getLogger(__name__)

# Requests at or below this radius are treated as "no fillet"
MIN_FILLET_RADIUS = 0.01

# Safe radius as a fraction of the reference feature size
SAFE_RADIUS_FRACTION = 0.1

# An edge qualifies only if it is longer than this many radii
EDGE_LENGTH_FACTOR = 4.0

# Half-width of the slab around the head/shank junction plane
JUNCTION_TOLERANCE = 0.2


@dataclass
class FilletResult:
    """
    Outcome of a best-effort fillet.

    Attributes:
        shape: Filleted solid, or the unchanged input when not applied
        applied: True if the fillet was built and kept
        requested_radius: Radius asked for by the caller
        radius: Radius actually used (after clamping), 0 when skipped early
        edges: Number of edges handed to the fillet builder
        reason: Why the fillet was skipped or dropped (empty when applied)
        label: Which fillet this was ("edge fillet", "underhead fillet", ...)
    """

    shape: cq.Shape
    applied: bool
    requested_radius: float
    radius: float = 0.0
    edges: int = 0
    reason: str = ""
    label: str = "fillet"

    def describe(self) -> str:
        if self.applied:
            return f"{self.label}: applied r={self.radius:.4g} to {self.edges} edges"
        text = f"{self.label}: skipped ({self.reason})"
        if self.radius and self.radius != self.requested_radius:
            text += f"; requested r={self.requested_radius:.4g}, clamped r={self.radius:.4g}"
        return text


def clamp_fillet_radius(requested: float, reference_size: float, fraction: float = SAFE_RADIUS_FRACTION) -> float:
    """Clamp a fillet radius to ``fraction`` of a reference feature size."""
    max_safe = fraction * reference_size
    if requested > max_safe:
        logger.info("Fillet: clamping radius from %.4g to safe max %.4g", requested, max_safe)
        return max_safe
    return requested


def fillet_edges(shape: cq.Shape, edges: Iterable[cq.Edge], radius: float) -> cq.Solid:
    """Fillet the given edges with a constant radius.

    Raises:
        ConstructionError: If the fillet builder fails or yields no solid
    """
    maker = BRepFilletAPI_MakeFillet(shape.wrapped)
    count = 0
    for edge in edges:
        maker.Add(radius, edge.wrapped)
        count += 1

    maker.Build()
    if not maker.IsDone():
        raise ConstructionError("fillet", "fillet build incomplete", {"radius": radius, "edges": count})

    return largest_solid(cq.Shape.cast(maker.Shape()), "fillet")


def best_effort_fillet(
    shape: cq.Shape,
    requested_radius: float,
    radius: float,
    edge_filter: Callable[[cq.Edge], bool],
    label: str,
) -> FilletResult:
    """Fillet the edges accepted by ``edge_filter``; never raises.

    Args:
        shape: Solid to fillet
        requested_radius: Radius the caller asked for (reported back)
        radius: Radius to use, already clamped
        edge_filter: Predicate selecting candidate edges
        label: Name used in diagnostics

    Returns:
        FilletResult with the filleted solid, or the input solid unchanged
    """
    edges = [edge for edge in shape.Edges() if edge_filter(edge)]
    if not edges:
        logger.info("%s: no suitable edges found, skipping", label)
        return FilletResult(shape, False, requested_radius, radius, 0, "no suitable edges", label)

    logger.info("%s: applying radius %.4g to %d edges", label, radius, len(edges))
    try:
        filleted = fillet_edges(shape, edges, radius)
    except Exception as e:
        logger.warning("%s failed (%s), keeping original geometry", label, e)
        return FilletResult(shape, False, requested_radius, radius, len(edges), f"fillet failed: {e}", label)

    if not filleted.isValid() or filleted.Volume() <= 0:
        logger.warning("%s produced invalid geometry, keeping original geometry", label)
        return FilletResult(shape, False, requested_radius, radius, len(edges), "fillet result invalid", label)

    return FilletResult(filleted, True, requested_radius, radius, len(edges), "", label)


def safe_edge_fillet(
    shape: cq.Shape,
    requested_radius: float,
    reference_size: float,
    label: str = "edge fillet",
) -> FilletResult:
    """Clamp, validate and selectively apply a global edge fillet.

    The radius is clamped to 10 % of ``reference_size`` and only edges longer
    than four radii are rounded.
    """
    if requested_radius <= MIN_FILLET_RADIUS:
        return FilletResult(shape, False, requested_radius, 0.0, 0, "not requested", label)

    radius = clamp_fillet_radius(requested_radius, reference_size)
    min_length = EDGE_LENGTH_FACTOR * radius
    return best_effort_fillet(
        shape,
        requested_radius,
        radius,
        lambda edge: edge_length(edge) > min_length,
        label,
    )


def junction_fillet(
    shape: cq.Shape,
    radius: float,
    plane_z: float,
    tolerance: float = JUNCTION_TOLERANCE,
    label: str = "underhead fillet",
) -> FilletResult:
    """Fillet the edges lying near the plane ``z = plane_z``."""
    if radius <= 0:
        return FilletResult(shape, False, radius, 0.0, 0, "not requested", label)

    return best_effort_fillet(
        shape,
        radius,
        radius,
        lambda edge: abs(edge_centroid_z(edge) - plane_z) < tolerance,
        label,
    )
