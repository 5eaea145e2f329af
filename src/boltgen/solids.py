"""
Boolean helpers and measurements over kernel solids.

The kernel's cut and fuse return compounds that may legally hold several
disjoint solids. Every mandatory boolean in the pipeline goes through
``cut_solid`` / ``fuse_solid`` which reduce the result to the single solid of
greatest volume, and turn kernel failures or empty results into a
``ConstructionError`` naming the stage.
"""

from __future__ import annotations

import logging

import cadquery as cq

from .errors import ConstructionError

logger = logging.getLogger(__name__)


def solids_of(shape: cq.Shape) -> list[cq.Solid]:
    """Enumerate the solids contained in a (possibly compound) shape."""
    return list(shape.Solids())


def largest_solid(shape: cq.Shape, stage: str = "fuse") -> cq.Solid:
    """Select the solid with the greatest enclosed volume.

    Args:
        shape: Boolean result (solid or compound)
        stage: Pipeline stage reported if the result is empty

    Returns:
        The greatest-volume solid. Ties keep the first solid found.

    Raises:
        ConstructionError: If the shape holds no solid
    """
    solids = solids_of(shape)
    if not solids:
        raise ConstructionError(stage, "boolean produced no solids")

    selected = solids[0]
    max_volume = selected.Volume()
    for solid in solids[1:]:
        vol = solid.Volume()
        if vol > max_volume:
            max_volume = vol
            selected = solid

    if len(solids) > 1:
        logger.debug("%s: %d solids in result, kept largest (volume %.6g)", stage, len(solids), max_volume)
    return selected


def cut_solid(body: cq.Shape, tool: cq.Shape, stage: str) -> cq.Solid:
    """Subtract ``tool`` from ``body`` and return the greatest-volume solid."""
    try:
        result = body.cut(tool)
    except Exception as e:
        raise ConstructionError(stage, f"boolean cut failed: {e}") from e
    return largest_solid(result, stage)


def fuse_solid(a: cq.Shape, b: cq.Shape, stage: str) -> cq.Solid:
    """Fuse two shapes and return the greatest-volume solid."""
    try:
        result = a.fuse(b)
    except Exception as e:
        raise ConstructionError(stage, f"boolean fuse failed: {e}") from e
    return largest_solid(result, stage)


def volume(shape: cq.Shape) -> float:
    """Enclosed volume of a shape."""
    return shape.Volume()


def edge_length(edge: cq.Edge) -> float:
    """Length of an edge."""
    return edge.Length()


def edge_centroid_z(edge: cq.Edge) -> float:
    """Z coordinate of the edge's centre of mass."""
    return edge.Center().z


def is_manifold_solid(shape: cq.Shape) -> bool:
    """True for a valid shape holding exactly one solid of positive volume."""
    solids = solids_of(shape)
    return len(solids) == 1 and shape.isValid() and solids[0].Volume() > 0
