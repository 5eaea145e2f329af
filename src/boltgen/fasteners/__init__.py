"""
Fasteners Module

Parametric bolts and hex nuts built from thread, shank, head and nut
definitions.
"""

# Parameter model
from .parameters import (
    MIN_FULL_THREADS,
    BoltParameters,
    HeadSpec,
    HeadType,
    MaterialSpec,
    NutSpec,
    ShankSpec,
    ThreadSpec,
    parse_head_type,
)

# Standard size table
from .dimensions import (
    INCH,
    THREAD_TABLE,
    ThreadDimensions,
    available_threads,
    get_thread_dimensions,
    inch_to_mm,
)

# Placement transforms
from .transforms import (
    apply_transform_to_shape,
    compose,
    rotation_about_x_through,
    rotation_matrix_x,
    scale_about,
    transform_point,
    translation_matrix,
)

# Best-effort fillets
from .fillets import (
    FilletResult,
    clamp_fillet_radius,
    junction_fillet,
    safe_edge_fillet,
)

# Builders
from .shank import ShankBuilder, make_shank
from .head import HeadBuilder, make_head
from .bolt import BoltAssembler, Fastener, fuse_overlap, make_bolt
from .nut import NutAssembler, make_nut

__all__ = [
    # Parameters
    "MIN_FULL_THREADS",
    "BoltParameters",
    "HeadSpec",
    "HeadType",
    "MaterialSpec",
    "NutSpec",
    "ShankSpec",
    "ThreadSpec",
    "parse_head_type",
    # Dimensions
    "INCH",
    "THREAD_TABLE",
    "ThreadDimensions",
    "available_threads",
    "get_thread_dimensions",
    "inch_to_mm",
    # Transforms
    "apply_transform_to_shape",
    "compose",
    "rotation_about_x_through",
    "rotation_matrix_x",
    "scale_about",
    "transform_point",
    "translation_matrix",
    # Fillets
    "FilletResult",
    "clamp_fillet_radius",
    "junction_fillet",
    "safe_edge_fillet",
    # Builders
    "ShankBuilder",
    "make_shank",
    "HeadBuilder",
    "make_head",
    "BoltAssembler",
    "Fastener",
    "fuse_overlap",
    "make_bolt",
    "NutAssembler",
    "make_nut",
]
