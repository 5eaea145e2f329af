"""
Standard Thread, Head and Nut Dimensions

Read-only lookup table mapping a thread designation to the dimensions needed
to build a bolt and its nut. The table is built once at import time and is
never mutated; lookups return frozen dataclasses.

References:
- ISO 261 / ISO 262: ISO general purpose metric screw threads (coarse pitch)
- ISO 4017: Hexagon head screws (s, k)
- ISO 4762: Hexagon socket head cap screws (dk, k, s)
- ISO 4032: Hexagon nuts, style 1 (s, m)
- ASME B1.1: Unified inch screw threads (UNC/UNF/UNEF)
- ASME B18.2.1 / B18.2.2 / B18.3: Inch hex bolts, nuts and socket cap screws
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

INCH = 25.4  # mm per inch


def inch_to_mm(inch: float) -> float:
    """Convert inches to millimetres."""
    return INCH * inch


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class ThreadDimensions:
    """
    Dimensions of one standard fastener size (mm).

    Attributes:
        designation: Thread designation (e.g. "M8", "1/4-20 UNC")
        major_diameter: Nominal major diameter (d)
        pitch: Thread pitch (P)
        head_width_across_flats: Hex head width across flats (s)
        head_height: Hex head height (k)
        nut_width_across_flats: Hex nut width across flats (s)
        nut_height: Hex nut height (m)
        socket_head_diameter: Socket cap head diameter (dk), 0 if not tabulated
        socket_head_height: Socket cap head height (k), 0 if not tabulated
        socket_size: Hex socket size (s), 0 if not tabulated
    """

    designation: str
    major_diameter: float
    pitch: float
    head_width_across_flats: float
    head_height: float
    nut_width_across_flats: float
    nut_height: float
    socket_head_diameter: float = 0.0
    socket_head_height: float = 0.0
    socket_size: float = 0.0

    @property
    def threads_per_inch(self) -> float:
        """Threads per inch equivalent of the pitch."""
        return INCH / self.pitch


def _metric(d, p, s, k, nut_s, nut_m, dk, socket_k, socket_s) -> ThreadDimensions:
    return ThreadDimensions(
        designation=f"M{d:g}",
        major_diameter=d,
        pitch=p,
        head_width_across_flats=s,
        head_height=k,
        nut_width_across_flats=nut_s,
        nut_height=nut_m,
        socket_head_diameter=dk,
        socket_head_height=socket_k,
        socket_size=socket_s,
    )


def _unified(name, d, tpi, s, k, nut_s, nut_m, dk=0.0, socket_k=0.0, socket_s=0.0) -> ThreadDimensions:
    # Inch dimensions, converted to mm
    return ThreadDimensions(
        designation=name,
        major_diameter=inch_to_mm(d),
        pitch=inch_to_mm(1.0 / tpi),
        head_width_across_flats=inch_to_mm(s),
        head_height=inch_to_mm(k),
        nut_width_across_flats=inch_to_mm(nut_s),
        nut_height=inch_to_mm(nut_m),
        socket_head_diameter=inch_to_mm(dk),
        socket_head_height=inch_to_mm(socket_k),
        socket_size=inch_to_mm(socket_s),
    )


# =============================================================================
# DIMENSION TABLE
# =============================================================================

_THREADS: list[ThreadDimensions] = [
    # ISO metric coarse
    #        d     P     s     k    nut s  nut m   dk   k    socket
    _metric(3, 0.5, 5.5, 2.0, 5.5, 2.4, 5.5, 3.0, 2.5),
    _metric(4, 0.7, 7.0, 2.8, 7.0, 3.2, 7.0, 4.0, 3.0),
    _metric(5, 0.8, 8.0, 3.5, 8.0, 4.7, 8.5, 5.0, 4.0),
    _metric(6, 1.0, 10.0, 4.0, 10.0, 5.2, 10.0, 6.0, 5.0),
    _metric(8, 1.25, 13.0, 5.3, 13.0, 6.8, 13.0, 8.0, 6.0),
    _metric(10, 1.5, 16.0, 6.4, 16.0, 8.4, 16.0, 10.0, 8.0),
    _metric(12, 1.75, 18.0, 7.5, 18.0, 10.8, 18.0, 12.0, 10.0),
    _metric(16, 2.0, 24.0, 10.0, 24.0, 14.8, 24.0, 16.0, 14.0),
    _metric(20, 2.5, 30.0, 12.5, 30.0, 18.0, 30.0, 20.0, 17.0),
    _metric(24, 3.0, 36.0, 15.0, 36.0, 21.5, 36.0, 24.0, 19.0),
    # Unified inch
    _unified('1/4"-20 UNC', 0.250, 20, 7 / 16, 11 / 64, 7 / 16, 7 / 32, 0.375, 0.250, 3 / 16),
    _unified('1/4"-28 UNF', 0.250, 28, 7 / 16, 11 / 64, 7 / 16, 7 / 32, 0.375, 0.250, 3 / 16),
    _unified('1/4"-32 UNEF', 0.250, 32, 7 / 16, 11 / 64, 7 / 16, 7 / 32),
    _unified('5/16"-18 UNC', 0.3125, 18, 1 / 2, 7 / 32, 1 / 2, 17 / 64, 0.469, 0.3125, 1 / 4),
    _unified('5/16"-24 UNF', 0.3125, 24, 1 / 2, 7 / 32, 1 / 2, 17 / 64, 0.469, 0.3125, 1 / 4),
    _unified('5/16"-32 UNEF', 0.3125, 32, 1 / 2, 7 / 32, 1 / 2, 17 / 64),
]

THREAD_TABLE: Mapping[str, ThreadDimensions] = MappingProxyType({t.designation: t for t in _THREADS})


def _normalize(designation: str) -> str:
    return designation.strip().upper().replace('"', "").replace(" ", "").replace("-", "")


_LOOKUP: Mapping[str, ThreadDimensions] = MappingProxyType({_normalize(k): v for k, v in THREAD_TABLE.items()})


def get_thread_dimensions(designation: str) -> ThreadDimensions:
    """
    Look up a standard size.

    Matching ignores case, spaces, dashes and inch marks, so "m8", "M8" and
    '1/4-20 UNC' / '1/4"-20 UNC' resolve to the same entry. A metric fine
    pitch may be given as "M8x1.0"; the head and nut columns of the coarse
    entry are reused with the requested pitch.

    Args:
        designation: Thread designation

    Returns:
        ThreadDimensions for the size

    Raises:
        ValueError: If the designation is not in the table
    """
    key = _normalize(designation)
    dims = _LOOKUP.get(key)
    if dims is not None:
        return dims

    if "X" in key:
        base, _, pitch_text = key.partition("X")
        coarse = _LOOKUP.get(base)
        if coarse is not None:
            try:
                pitch = float(pitch_text)
            except ValueError:
                pitch = 0.0
            if pitch > 0:
                return ThreadDimensions(
                    designation=f"{coarse.designation}x{pitch:g}",
                    major_diameter=coarse.major_diameter,
                    pitch=pitch,
                    head_width_across_flats=coarse.head_width_across_flats,
                    head_height=coarse.head_height,
                    nut_width_across_flats=coarse.nut_width_across_flats,
                    nut_height=coarse.nut_height,
                    socket_head_diameter=coarse.socket_head_diameter,
                    socket_head_height=coarse.socket_head_height,
                    socket_size=coarse.socket_size,
                )

    raise ValueError(f"No dimensions for thread {designation!r}. Valid sizes: {list(THREAD_TABLE.keys())}")


def available_threads() -> list[str]:
    """List the designations in the table."""
    return list(THREAD_TABLE.keys())
