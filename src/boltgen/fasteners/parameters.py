"""
Fastener parameter model.

The parameter set mirrors a flat struct of thread, shank, head and nut
fields. Every spec is an immutable dataclass; ``validate()`` methods enforce
the dimensional invariants and raise ``ValidationError`` naming the offending
field before any kernel geometry is attempted.

All lengths are in the working unit (millimetres unless configured
otherwise).
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass, field, replace
from enum import Enum

from ..errors import ValidationError
from .dimensions import ThreadDimensions, get_thread_dimensions

# =============================================================================
# CONSTANTS
# =============================================================================

# ISO 68-1 basic profile: 60° included angle
THREAD_ANGLE_DEG = 60.0

# Minor diameter of the external thread: d3 = d - 1.0825P (ISO 724 rounded)
MINOR_DIAMETER_FACTOR = 1.0825

# Pitch diameter: d2 = d - 0.6495P
PITCH_DIAMETER_FACTOR = 0.649519

# External thread depth h3 = 0.6134P
THREAD_DEPTH_FACTOR = 0.614

# Full threads guaranteed between grip and tip
MIN_FULL_THREADS = 3

# Socket must leave a wall around it
SOCKET_SIZE_LIMIT = 0.9


# =============================================================================
# HEAD TYPES
# =============================================================================


class HeadType(Enum):
    """Supported head styles. Values match the integer codes of the CLI."""

    HEX = 0
    SOCKET_CAP = 1
    FLAT = 2
    COUNTERSUNK = 3


def parse_head_type(value: HeadType | str | int) -> HeadType:
    """Coerce an enum member, a name ("hex", "socket_cap") or a code (0-3).

    Unknown values fall back to HEX with a warning.
    """
    if isinstance(value, HeadType):
        return value
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        for head_type in HeadType:
            if head_type.value == value:
                return head_type
    elif isinstance(value, str):
        key = value.strip().upper().replace("-", "_").replace(" ", "_")
        if key in HeadType.__members__:
            return HeadType[key]
        if key.isdigit():
            return parse_head_type(int(key))

    warnings.warn(f"Unknown head type {value!r}, using HEX", stacklevel=2)
    return HeadType.HEX


# =============================================================================
# SPECS
# =============================================================================


def _require_positive(name: str, value: float) -> None:
    if value is None or not math.isfinite(value) or value <= 0:
        raise ValidationError(name, f"must be > 0 (got {value})")


def _require_non_negative(name: str, value: float) -> None:
    if value is None or not math.isfinite(value) or value < 0:
        raise ValidationError(name, f"must be >= 0 (got {value})")


@dataclass(frozen=True)
class ThreadSpec:
    """External thread definition.

    Attributes:
        major_diameter: Nominal outer thread diameter (d)
        pitch: Axial distance between adjacent crests (P)
        minor_diameter: Root diameter (d3). Derived from d and P when None or <= 0.
        angle: Included flank angle. Only 60° is supported.
    """

    major_diameter: float
    pitch: float
    minor_diameter: float | None = None
    angle: float = THREAD_ANGLE_DEG

    @property
    def effective_minor_diameter(self) -> float:
        """Minor diameter, derived as d - 1.0825P when not given."""
        if self.minor_diameter is not None and self.minor_diameter > 0:
            return self.minor_diameter
        return self.major_diameter - MINOR_DIAMETER_FACTOR * self.pitch

    @property
    def pitch_diameter(self) -> float:
        """Basic pitch diameter d2."""
        return self.major_diameter - PITCH_DIAMETER_FACTOR * self.pitch

    @property
    def thread_depth(self) -> float:
        """Radial depth of the cutting tooth (0.614P)."""
        return THREAD_DEPTH_FACTOR * self.pitch

    def validate(self) -> None:
        _require_positive("thread.major_diameter", self.major_diameter)
        _require_positive("thread.pitch", self.pitch)
        minor = self.effective_minor_diameter
        if minor <= 0:
            raise ValidationError(
                "thread.minor_diameter",
                f"must be > 0 (got {minor:.4g}; pitch {self.pitch} too coarse for d={self.major_diameter})",
            )
        if minor >= self.major_diameter:
            raise ValidationError(
                "thread.minor_diameter",
                f"must be smaller than major diameter {self.major_diameter} (got {minor})",
            )
        if abs(self.angle - THREAD_ANGLE_DEG) > 1e-9:
            raise ValidationError("thread.angle", f"only {THREAD_ANGLE_DEG:g}° threads are supported (got {self.angle})")


@dataclass(frozen=True)
class ShankSpec:
    """Shank definition.

    Attributes:
        nominal_diameter: Nominal shank diameter (d)
        total_length: Length under the head (L)
        grip_length: Unthreaded length next to the head (ls)
        body_tolerance: Diametral under-cut of the blank for fit
        edge_fillet_radius: Requested radius for the global edge fillet
    """

    nominal_diameter: float
    total_length: float
    grip_length: float = 0.0
    body_tolerance: float = 0.0
    edge_fillet_radius: float = 0.0

    @property
    def body_diameter(self) -> float:
        """Diameter of the blank: nominal diameter minus body tolerance."""
        return self.nominal_diameter - self.body_tolerance

    def effective_grip_length(self, pitch: float) -> float:
        """Grip length clamped so at least MIN_FULL_THREADS pitches stay threaded."""
        return max(0.0, min(self.grip_length, self.total_length - MIN_FULL_THREADS * pitch))

    def validate(self) -> None:
        _require_positive("shank.nominal_diameter", self.nominal_diameter)
        _require_positive("shank.total_length", self.total_length)
        _require_non_negative("shank.grip_length", self.grip_length)
        _require_non_negative("shank.body_tolerance", self.body_tolerance)
        _require_non_negative("shank.edge_fillet_radius", self.edge_fillet_radius)
        if self.body_tolerance >= self.nominal_diameter:
            raise ValidationError(
                "shank.body_tolerance",
                f"must be smaller than nominal diameter {self.nominal_diameter} (got {self.body_tolerance})",
            )


@dataclass(frozen=True)
class HeadSpec:
    """Head definition.

    Attributes:
        type: Head style
        width_across_flats: s for hex heads; outer diameter for cylindrical heads
        height: Head height (k), excluding the washer face
        washer_face_diameter: Bearing washer face diameter (dw), 0 for none
        washer_face_thickness: Bearing washer face thickness (c), 0 for none
        underhead_fillet_radius: Fillet between head and shank (r), 0 for none
        socket_size: Across-flats size of the hex socket (SOCKET_CAP only)
        socket_depth: Depth of the hex socket (SOCKET_CAP only)
    """

    type: HeadType = HeadType.HEX
    width_across_flats: float = 0.0
    height: float = 0.0
    washer_face_diameter: float = 0.0
    washer_face_thickness: float = 0.0
    underhead_fillet_radius: float = 0.0
    socket_size: float = 0.0
    socket_depth: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "type", parse_head_type(self.type))

    @property
    def width_across_corners(self) -> float:
        """Corner-to-corner width of a hex head (e = 2s/sqrt(3))."""
        return self.width_across_flats * 2.0 / math.sqrt(3.0)

    @property
    def has_washer_face(self) -> bool:
        return self.washer_face_diameter > 0 and self.washer_face_thickness > 0

    def validate(self) -> None:
        _require_positive("head.width_across_flats", self.width_across_flats)
        _require_positive("head.height", self.height)
        _require_non_negative("head.washer_face_diameter", self.washer_face_diameter)
        _require_non_negative("head.washer_face_thickness", self.washer_face_thickness)
        _require_non_negative("head.underhead_fillet_radius", self.underhead_fillet_radius)
        if self.has_washer_face and self.washer_face_thickness >= self.height:
            raise ValidationError(
                "head.washer_face_thickness",
                f"must be smaller than head height {self.height} (got {self.washer_face_thickness})",
            )
        if self.washer_face_diameter > self.width_across_flats:
            raise ValidationError(
                "head.washer_face_diameter",
                f"must not exceed head width {self.width_across_flats} (got {self.washer_face_diameter})",
            )

        if self.type is HeadType.SOCKET_CAP:
            _require_positive("head.socket_size", self.socket_size)
            _require_positive("head.socket_depth", self.socket_depth)
            limit = SOCKET_SIZE_LIMIT * self.width_across_flats
            if self.socket_size >= limit:
                raise ValidationError(
                    "head.socket_size",
                    f"must be < {SOCKET_SIZE_LIMIT:g} x head diameter = {limit:.4g} (got {self.socket_size})",
                )
            if self.socket_depth > self.height:
                raise ValidationError(
                    "head.socket_depth",
                    f"must not exceed head height {self.height} (got {self.socket_depth})",
                )


@dataclass(frozen=True)
class NutSpec:
    """Hex nut definition.

    Attributes:
        generate: Whether a nut is produced alongside the bolt
        width_across_flats: Hex size (s)
        height: Nut height (m)
        washer_face_diameter: Bearing washer face diameter, 0 for none
        washer_face_thickness: Bearing washer face thickness
        tolerance: Radial clearance added to the cutting thread
        edge_fillet_radius: Requested radius for the edge fillet
    """

    generate: bool = False
    width_across_flats: float = 0.0
    height: float = 0.0
    washer_face_diameter: float = 0.0
    washer_face_thickness: float = 0.5
    tolerance: float = 0.0
    edge_fillet_radius: float = 0.0

    @property
    def has_washer_face(self) -> bool:
        return self.washer_face_diameter > 0 and self.washer_face_thickness > 0

    def validate(self, thread: ThreadSpec) -> None:
        _require_positive("nut.width_across_flats", self.width_across_flats)
        _require_positive("nut.height", self.height)
        _require_non_negative("nut.washer_face_diameter", self.washer_face_diameter)
        _require_non_negative("nut.washer_face_thickness", self.washer_face_thickness)
        _require_non_negative("nut.tolerance", self.tolerance)
        _require_non_negative("nut.edge_fillet_radius", self.edge_fillet_radius)
        if self.width_across_flats <= thread.major_diameter:
            raise ValidationError(
                "nut.width_across_flats",
                f"must exceed thread major diameter {thread.major_diameter} (got {self.width_across_flats})",
            )
        if self.has_washer_face and self.washer_face_thickness >= self.height:
            raise ValidationError(
                "nut.washer_face_thickness",
                f"must be smaller than nut height {self.height} (got {self.washer_face_thickness})",
            )
        if self.washer_face_diameter > self.width_across_flats:
            raise ValidationError(
                "nut.washer_face_diameter",
                f"must not exceed nut width {self.width_across_flats} (got {self.washer_face_diameter})",
            )


@dataclass(frozen=True)
class MaterialSpec:
    """Descriptive material data. Carried through, never affects geometry."""

    property_class: str = ""  # e.g. "8.8"
    material_type: str = ""  # e.g. "Steel"
    coating: str = ""  # e.g. "Zinc"

    def describe(self) -> str:
        return " ".join(part for part in (self.material_type, self.property_class, self.coating) if part)


@dataclass(frozen=True)
class BoltParameters:
    """Complete parameter set for a bolt and its optional mating nut."""

    thread: ThreadSpec
    shank: ShankSpec
    head: HeadSpec
    nut: NutSpec = field(default_factory=NutSpec)
    material: MaterialSpec = field(default_factory=MaterialSpec)
    name: str = "bolt"

    def validate(self) -> None:
        """Validate every spec. Raises ValidationError on the first violation."""
        self.thread.validate()
        self.shank.validate()
        if self.shank.body_diameter <= self.thread.effective_minor_diameter:
            raise ValidationError(
                "shank.body_tolerance",
                f"blank diameter {self.shank.body_diameter:.4g} must exceed thread minor diameter "
                f"{self.thread.effective_minor_diameter:.4g}",
            )
        self.head.validate()
        if self.nut.generate:
            self.nut.validate(self.thread)

    def with_length(self, total_length: float) -> BoltParameters:
        """Copy with a different shank length."""
        return replace(self, shank=replace(self.shank, total_length=total_length))

    @classmethod
    def from_designation(
        cls,
        designation: str,
        length: float,
        *,
        head_type: HeadType | str | int = HeadType.HEX,
        grip_length: float = 0.0,
        body_tolerance: float = 0.0,
        generate_nut: bool = False,
        nut_tolerance: float = 0.0,
        edge_fillet_radius: float = 0.0,
        underhead_fillet_radius: float = 0.0,
        name: str | None = None,
    ) -> BoltParameters:
        """Build parameters from a standard size in the dimension table.

        Args:
            designation: Thread designation, e.g. "M8" or "1/4-20 UNC"
            length: Length under the head
            head_type: Head style; socket cap heads use the ISO 4762 columns
            grip_length: Unthreaded length next to the head
            body_tolerance: Diametral under-cut of the shank blank
            generate_nut: Whether a mating nut should be produced
            nut_tolerance: Radial clearance of the nut thread
            edge_fillet_radius: Requested global edge fillet for bolt and nut
            underhead_fillet_radius: Requested head/shank fillet
            name: Output name (defaults to a name derived from the designation)

        Returns:
            BoltParameters populated from the table
        """
        dims = get_thread_dimensions(designation)
        head_type = parse_head_type(head_type)
        head = _head_from_dimensions(dims, head_type, underhead_fillet_radius)

        if name is None:
            slug = dims.designation.replace("/", "_").replace('"', "").replace(" ", "_").replace("-", "_")
            name = f"{slug}x{length:g}"

        return cls(
            thread=ThreadSpec(major_diameter=dims.major_diameter, pitch=dims.pitch),
            shank=ShankSpec(
                nominal_diameter=dims.major_diameter,
                total_length=length,
                grip_length=grip_length,
                body_tolerance=body_tolerance,
                edge_fillet_radius=edge_fillet_radius,
            ),
            head=head,
            nut=NutSpec(
                generate=generate_nut,
                width_across_flats=dims.nut_width_across_flats,
                height=dims.nut_height,
                tolerance=nut_tolerance,
                edge_fillet_radius=edge_fillet_radius,
            ),
            name=name,
        )


def _head_from_dimensions(dims: ThreadDimensions, head_type: HeadType, fillet: float) -> HeadSpec:
    if head_type is HeadType.SOCKET_CAP:
        if dims.socket_size <= 0:
            raise ValidationError("head.socket_size", f"no socket cap dimensions for {dims.designation}")
        return HeadSpec(
            type=head_type,
            width_across_flats=dims.socket_head_diameter,
            height=dims.socket_head_height,
            underhead_fillet_radius=fillet,
            socket_size=dims.socket_size,
            socket_depth=0.5 * dims.socket_head_height,
        )
    if head_type in (HeadType.FLAT, HeadType.COUNTERSUNK):
        return HeadSpec(
            type=head_type,
            width_across_flats=dims.head_width_across_flats,
            height=dims.head_height,
            underhead_fillet_radius=fillet,
        )
    return HeadSpec(
        type=HeadType.HEX,
        width_across_flats=dims.head_width_across_flats,
        height=dims.head_height,
        underhead_fillet_radius=fillet,
    )
