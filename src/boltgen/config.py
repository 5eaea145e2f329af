"""
Configuration schema for batch fastener generation.

A batch file lists fasteners to build and the output settings shared by all
of them. Each fastener is given by a standard designation (looked up in the
dimension table), by explicit thread/shank/head/nut mappings, or by a
designation plus overrides.

Example:

    version: "1.0"
    settings:
      output_dir: out
      formats: [step, stl]
      stl_quality: normal
      unit: mm
    fasteners:
      - designation: M8
        length: 30
        head: {type: socket_cap}
        shank: {grip_length: 10}
        nut: {generate: true, tolerance: 0.1}
      - name: custom
        length: 12
        thread: {major_diameter: 5, pitch: 0.8}
        head: {type: hex, width_across_flats: 8, height: 3.5}
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Literal

import yaml

from .errors import ValidationError
from .export import EXPORT_FORMATS, STL_QUALITY, UNIT_TO_MM
from .fasteners.parameters import (
    BoltParameters,
    HeadSpec,
    MaterialSpec,
    NutSpec,
    ShankSpec,
    ThreadSpec,
    parse_head_type,
)


def _override(spec, overrides: dict[str, Any], section: str):
    """Copy a spec dataclass with the given fields replaced."""
    names = {f.name for f in fields(spec)}
    for key in overrides:
        if key not in names:
            raise ValidationError(f"{section}.{key}", f"unknown field (valid: {sorted(names)})")
    return replace(spec, **overrides)


def _build(cls, values: dict[str, Any], section: str):
    """Construct a spec dataclass from a mapping, naming unknown or missing fields."""
    names = {f.name for f in fields(cls)}
    for key in values:
        if key not in names:
            raise ValidationError(f"{section}.{key}", f"unknown field (valid: {sorted(names)})")
    try:
        return cls(**values)
    except TypeError as e:
        raise ValidationError(section, str(e)) from None


@dataclass
class OutputSettings:
    """
    Output settings shared by every fastener in a batch.

    Attributes:
        output_dir: Directory the files are written to
        formats: Export formats ("brep", "step", "stl")
        stl_quality: STL deflection preset ("fine", "normal", "coarse")
        unit: Working unit of the model ("mm" or "m")
    """

    output_dir: str = "."
    formats: list[str] = field(default_factory=lambda: ["step"])
    stl_quality: str = "normal"
    unit: Literal["mm", "m"] = "mm"

    def __post_init__(self):
        # A single format may be given as a plain string in YAML
        if isinstance(self.formats, str):
            self.formats = [self.formats]
        self.formats = [f.lower() for f in self.formats]
        for fmt in self.formats:
            if fmt not in EXPORT_FORMATS:
                raise ValidationError("settings.formats", f"unknown format {fmt!r} (valid: {list(EXPORT_FORMATS)})")
        if self.stl_quality not in STL_QUALITY:
            raise ValidationError(
                "settings.stl_quality", f"unknown preset {self.stl_quality!r} (valid: {list(STL_QUALITY)})"
            )
        if self.unit not in UNIT_TO_MM:
            raise ValidationError("settings.unit", f"unknown unit {self.unit!r} (valid: {list(UNIT_TO_MM)})")


@dataclass
class FastenerConfig:
    """
    Configuration for one bolt (and optionally its nut).

    Attributes:
        designation: Standard size, e.g. "M8" or "1/4-20 UNC"
        length: Length under the head
        name: Output file stem
        thread: ThreadSpec fields
        shank: ShankSpec fields
        head: HeadSpec fields ("type" accepts names or codes 0-3)
        nut: NutSpec fields
        material: MaterialSpec fields
    """

    designation: str | None = None
    length: float | None = None
    name: str | None = None
    thread: dict[str, Any] = field(default_factory=dict)
    shank: dict[str, Any] = field(default_factory=dict)
    head: dict[str, Any] = field(default_factory=dict)
    nut: dict[str, Any] = field(default_factory=dict)
    material: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Empty YAML mappings load as None
        for section in ("thread", "shank", "head", "nut", "material"):
            if getattr(self, section) is None:
                setattr(self, section, {})

    @property
    def label(self) -> str:
        return self.name or self.designation or "fastener"

    def to_parameters(self) -> BoltParameters:
        """
        Resolve the configuration into validated bolt parameters.

        Raises:
            ValidationError: On unknown fields or violated invariants
            ValueError: If the designation is not in the dimension table
        """
        shank_overrides = dict(self.shank)
        length = shank_overrides.pop("total_length", self.length)
        if length is None:
            raise ValidationError("length", "required (or give shank.total_length)")
        head_overrides = dict(self.head)
        head_type = parse_head_type(head_overrides.pop("type", "hex"))
        nut_overrides = dict(self.nut)

        if self.designation:
            params = BoltParameters.from_designation(
                self.designation,
                float(length),
                head_type=head_type,
                name=self.name,
            )
            params = replace(
                params,
                thread=_override(params.thread, self.thread, "thread"),
                shank=_override(params.shank, shank_overrides, "shank"),
                head=_override(params.head, head_overrides, "head"),
                nut=_override(params.nut, nut_overrides, "nut"),
                material=_build(MaterialSpec, self.material, "material"),
            )
        else:
            thread = _build(ThreadSpec, self.thread, "thread")
            shank_overrides.setdefault("nominal_diameter", thread.major_diameter)
            params = BoltParameters(
                thread=thread,
                shank=_build(ShankSpec, {"total_length": float(length), **shank_overrides}, "shank"),
                head=_build(HeadSpec, {"type": head_type, **head_overrides}, "head"),
                nut=_build(NutSpec, nut_overrides, "nut"),
                material=_build(MaterialSpec, self.material, "material"),
                name=self.name or "bolt",
            )

        params.validate()
        return params


@dataclass
class BatchConfig:
    """
    Root configuration of a batch file.

    Attributes:
        version: Config file version (currently "1.0")
        settings: Output settings
        fasteners: Fasteners to build
    """

    version: str = "1.0"
    settings: OutputSettings = field(default_factory=OutputSettings)
    fasteners: list[FastenerConfig] = field(default_factory=list)

    def __post_init__(self):
        # Handle nested mappings from YAML
        if self.settings is None:
            self.settings = OutputSettings()
        elif isinstance(self.settings, dict):
            self.settings = OutputSettings(**self.settings)
        self.fasteners = [FastenerConfig(**f) if isinstance(f, dict) else f for f in self.fasteners or []]

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> BatchConfig:
        """Load a batch configuration from a YAML file."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the batch configuration to a YAML file."""
        with open(yaml_path, "w") as f:
            yaml.dump(self._to_dict(), f, default_flow_style=False, sort_keys=False)

    def _to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "settings": {
                "output_dir": self.settings.output_dir,
                "formats": list(self.settings.formats),
                "stl_quality": self.settings.stl_quality,
                "unit": self.settings.unit,
            },
            "fasteners": [self._fastener_to_dict(f) for f in self.fasteners],
        }

    def _fastener_to_dict(self, fastener: FastenerConfig) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key in ("designation", "length", "name"):
            value = getattr(fastener, key)
            if value is not None:
                result[key] = value
        for key in ("thread", "shank", "head", "nut", "material"):
            value = getattr(fastener, key)
            if value:
                result[key] = dict(value)
        return result
