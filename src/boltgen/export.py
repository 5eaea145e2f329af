"""
File export: BREP, STEP and STL.

- BREP is the kernel's native format and is written as-is.
- STEP files are expected in millimetres. When the working unit is metres
  the shape is scaled by 1000 before writing.
- STL triangulation uses a deflection relative to the shape's size: the
  linear tolerance is a fraction of the bounding-box diagonal, the angular
  tolerance a fixed angle, both chosen by a quality preset.

Fasteners are written as ``<name>.<ext>``; nuts already carry the
``_nut`` suffix in their name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import cadquery as cq

from .fasteners.transforms import apply_transform_to_shape, scale_matrix

if TYPE_CHECKING:
    from .fasteners.bolt import Fastener

logger = logging.getLogger(__name__)

# Millimetres per working unit
UNIT_TO_MM = {
    "mm": 1.0,
    "m": 1000.0,
}

# quality -> (linear deflection as a fraction of the bbox diagonal, angular deflection in rad)
STL_QUALITY = {
    "fine": (0.001, 0.25),
    "normal": (0.002, 0.35),
    "coarse": (0.005, 0.5),
}

EXPORT_FORMATS = {
    "brep": ".brep",
    "step": ".step",
    "stl": ".stl",
}

_SUFFIX_FORMATS = {
    ".brep": "brep",
    ".brp": "brep",
    ".step": "step",
    ".stp": "step",
    ".stl": "stl",
}


def step_scale_factor(unit: str) -> float:
    """Scale applied before STEP export for the given working unit."""
    try:
        return UNIT_TO_MM[unit]
    except KeyError:
        raise ValueError(f"Unknown working unit {unit!r}. Valid units: {list(UNIT_TO_MM)}") from None


def stl_tolerances(shape: cq.Shape, quality: str = "normal") -> tuple[float, float]:
    """
    Linear and angular deflection for triangulating ``shape``.

    Returns:
        (linear tolerance in model units, angular tolerance in radians)
    """
    try:
        fraction, angular = STL_QUALITY[quality]
    except KeyError:
        raise ValueError(f"Unknown STL quality {quality!r}. Valid presets: {list(STL_QUALITY)}") from None

    diagonal = shape.BoundingBox().DiagonalLength
    return fraction * diagonal, angular


def format_for_path(path: str | Path) -> str:
    """Export format implied by a file suffix."""
    suffix = Path(path).suffix.lower()
    try:
        return _SUFFIX_FORMATS[suffix]
    except KeyError:
        raise ValueError(f"Cannot export to {suffix or 'no suffix'!r}. Valid suffixes: {list(_SUFFIX_FORMATS)}") from None


def export_brep(shape: cq.Shape, path: str | Path) -> Path:
    """Write the shape in the native BREP format."""
    path = Path(path)
    shape.exportBrep(str(path))
    logger.info("Exported BREP: %s", path)
    return path


def export_step(shape: cq.Shape, path: str | Path, unit: str = "mm") -> Path:
    """Write the shape as STEP, converting the working unit to millimetres."""
    path = Path(path)
    factor = step_scale_factor(unit)
    if factor != 1.0:
        shape = apply_transform_to_shape(shape, scale_matrix(factor))
    cq.exporters.export(shape, str(path), exportType="STEP")
    logger.info("Exported STEP: %s (scale %g)", path, factor)
    return path


def export_stl(shape: cq.Shape, path: str | Path, quality: str = "normal") -> Path:
    """Write the shape as STL with a size-relative deflection."""
    path = Path(path)
    tolerance, angular_tolerance = stl_tolerances(shape, quality)
    cq.exporters.export(
        shape,
        str(path),
        exportType="STL",
        tolerance=tolerance,
        angularTolerance=angular_tolerance,
    )
    logger.info("Exported STL: %s (tolerance %.4g, angular %.3g)", path, tolerance, angular_tolerance)
    return path


def export_shape(shape: cq.Shape, path: str | Path, unit: str = "mm", quality: str = "normal") -> Path:
    """Export to the format implied by the file suffix."""
    fmt = format_for_path(path)
    if fmt == "brep":
        return export_brep(shape, path)
    if fmt == "step":
        return export_step(shape, path, unit)
    return export_stl(shape, path, quality)


def export_fastener(
    fastener: Fastener,
    output_dir: str | Path,
    formats: Iterable[str] = ("step",),
    unit: str = "mm",
    quality: str = "normal",
) -> list[Path]:
    """
    Write a fastener in each requested format.

    Args:
        fastener: Generated bolt or nut
        output_dir: Target directory (created if missing)
        formats: Any of "brep", "step", "stl"
        unit: Working unit of the model
        quality: STL quality preset

    Returns:
        Paths of the written files
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for fmt in formats:
        try:
            suffix = EXPORT_FORMATS[fmt.lower()]
        except KeyError:
            raise ValueError(f"Unknown export format {fmt!r}. Valid formats: {list(EXPORT_FORMATS)}") from None
        written.append(export_shape(fastener.shape, output_dir / f"{fastener.name}{suffix}", unit, quality))
    return written
