"""
Error taxonomy for fastener generation.

Two families of failures exist:

- ValidationError: the caller supplied parameters that cannot describe a
  fastener (missing head dimensions, socket larger than the head, ...).
  Always raised before any kernel geometry is constructed.
- ConstructionError: the geometry kernel failed on a mandatory step (thread
  subtraction, head/shank fuse, helical sweep). Carries the stage name and
  the numeric parameters that led to it.

Optional cosmetic steps (fillets) never raise; see ``fillets.FilletResult``.
"""

from __future__ import annotations

from typing import Any


class BoltgenError(Exception):
    """Base class for all boltgen errors."""


class ValidationError(BoltgenError, ValueError):
    """Raised when a parameter violates a dimensional constraint.

    Attributes:
        field: Dotted name of the offending parameter (e.g. "head.socket_size")
        constraint: Human-readable constraint that was violated
    """

    def __init__(self, field: str, constraint: str):
        self.field = field
        self.constraint = constraint
        super().__init__(f"{field}: {constraint}")


class ConstructionError(BoltgenError, RuntimeError):
    """Raised when a mandatory kernel operation fails.

    Attributes:
        stage: Pipeline stage ("helix", "chamfer", "thread", "shank", "head",
            "fuse", "nut", "fillet")
        details: Numeric parameters involved in the failing operation
    """

    def __init__(self, stage: str, message: str, details: dict[str, Any] | None = None):
        self.stage = stage
        self.details = dict(details or {})
        text = f"{stage}: {message}"
        if self.details:
            params = ", ".join(f"{k}={_format_value(v)}" for k, v in self.details.items())
            text = f"{text} ({params})"
        super().__init__(text)


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)
