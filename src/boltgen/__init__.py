"""
boltgen - parametric bolt and nut solid generator.

Turns a handful of scalar parameters (thread size, length, head style,
head/nut dimensions, fillet radii, tolerances) into watertight CadQuery
solids of ISO/ASME-style bolts and hex nuts, and writes them to BREP, STEP
or STL.

Example:
    from boltgen import BoltParameters, make_bolt, make_nut, export_fastener

    params = BoltParameters.from_designation("M8", 30, grip_length=10, generate_nut=True)
    bolt = make_bolt(params)
    nut = make_nut(params)
    export_fastener(bolt, "out", formats=["step", "stl"])
"""

__version__ = "0.1.0"

from .errors import BoltgenError, ConstructionError, ValidationError
from .solids import cut_solid, fuse_solid, is_manifold_solid, largest_solid
from .features import (
    make_helical_sweep,
    make_hex_prism,
    make_revolved_profile,
    make_thread_tool,
    thread_profile_points,
)
from .fasteners import (
    BoltAssembler,
    BoltParameters,
    Fastener,
    FilletResult,
    HeadBuilder,
    HeadSpec,
    HeadType,
    MaterialSpec,
    NutAssembler,
    NutSpec,
    ShankBuilder,
    ShankSpec,
    ThreadSpec,
    available_threads,
    get_thread_dimensions,
    make_bolt,
    make_head,
    make_nut,
    make_shank,
)
from .export import export_brep, export_fastener, export_shape, export_step, export_stl
from .config import BatchConfig, FastenerConfig, OutputSettings
from .batch import BuildOutcome, build_fasteners, run_batch

__all__ = [
    "__version__",
    # Errors
    "BoltgenError",
    "ConstructionError",
    "ValidationError",
    # Solids
    "cut_solid",
    "fuse_solid",
    "is_manifold_solid",
    "largest_solid",
    # Features
    "make_helical_sweep",
    "make_hex_prism",
    "make_revolved_profile",
    "make_thread_tool",
    "thread_profile_points",
    # Fasteners
    "BoltAssembler",
    "BoltParameters",
    "Fastener",
    "FilletResult",
    "HeadBuilder",
    "HeadSpec",
    "HeadType",
    "MaterialSpec",
    "NutAssembler",
    "NutSpec",
    "ShankBuilder",
    "ShankSpec",
    "ThreadSpec",
    "available_threads",
    "get_thread_dimensions",
    "make_bolt",
    "make_head",
    "make_nut",
    "make_shank",
    # Export
    "export_brep",
    "export_fastener",
    "export_shape",
    "export_step",
    "export_stl",
    # Batch
    "BatchConfig",
    "FastenerConfig",
    "OutputSettings",
    "BuildOutcome",
    "build_fasteners",
    "run_batch",
]
