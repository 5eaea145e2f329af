"""Tests for the parameter model, validation and the dimension table."""

from __future__ import annotations

import dataclasses

import pytest

from boltgen.errors import BoltgenError, ConstructionError, ValidationError
from boltgen.fasteners.dimensions import (
    INCH,
    THREAD_TABLE,
    available_threads,
    get_thread_dimensions,
    inch_to_mm,
)
from boltgen.fasteners.parameters import (
    BoltParameters,
    HeadSpec,
    HeadType,
    MaterialSpec,
    NutSpec,
    ShankSpec,
    ThreadSpec,
    parse_head_type,
)


class TestErrors:
    """Tests for the error taxonomy."""

    def test_validation_error_names_field_and_constraint(self):
        err = ValidationError("head.socket_size", "must be < 9")
        assert err.field == "head.socket_size"
        assert err.constraint == "must be < 9"
        assert "head.socket_size" in str(err)
        assert isinstance(err, ValueError)
        assert isinstance(err, BoltgenError)

    def test_construction_error_carries_stage_and_details(self):
        err = ConstructionError("helix", "pipe shell construction failed", {"pitch": 1.0})
        assert err.stage == "helix"
        assert err.details == {"pitch": 1.0}
        assert "helix" in str(err)
        assert "pitch=1" in str(err)
        assert isinstance(err, RuntimeError)


class TestThreadSpec:
    """Tests for thread definitions."""

    def test_minor_diameter_derived(self):
        thread = ThreadSpec(major_diameter=6.0, pitch=1.0)
        assert abs(thread.effective_minor_diameter - 4.9175) < 1e-9

    def test_explicit_minor_diameter_kept(self):
        thread = ThreadSpec(major_diameter=6.0, pitch=1.0, minor_diameter=5.0)
        assert thread.effective_minor_diameter == 5.0

    def test_pitch_diameter_and_depth(self):
        thread = ThreadSpec(major_diameter=10.0, pitch=1.5)
        assert abs(thread.pitch_diameter - (10.0 - 0.649519 * 1.5)) < 1e-9
        assert abs(thread.thread_depth - 0.614 * 1.5) < 1e-9

    @pytest.mark.parametrize("kwargs, field", [
        ({"major_diameter": 0.0, "pitch": 1.0}, "thread.major_diameter"),
        ({"major_diameter": 6.0, "pitch": 0.0}, "thread.pitch"),
        ({"major_diameter": 6.0, "pitch": -1.0}, "thread.pitch"),
        ({"major_diameter": 1.0, "pitch": 1.0}, "thread.minor_diameter"),
        ({"major_diameter": 6.0, "pitch": 1.0, "minor_diameter": 7.0}, "thread.minor_diameter"),
        ({"major_diameter": 6.0, "pitch": 1.0, "angle": 55.0}, "thread.angle"),
    ])
    def test_invalid_threads(self, kwargs, field):
        with pytest.raises(ValidationError) as excinfo:
            ThreadSpec(**kwargs).validate()
        assert excinfo.value.field == field

    def test_specs_are_immutable(self):
        thread = ThreadSpec(major_diameter=6.0, pitch=1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            thread.pitch = 2.0


class TestShankSpec:
    """Tests for shank definitions and grip clamping."""

    def test_body_diameter(self):
        shank = ShankSpec(nominal_diameter=6.0, total_length=20.0, body_tolerance=0.1)
        assert abs(shank.body_diameter - 5.9) < 1e-12

    def test_grip_within_limit_unchanged(self):
        shank = ShankSpec(nominal_diameter=6.0, total_length=20.0, grip_length=5.0)
        assert shank.effective_grip_length(1.0) == 5.0

    def test_grip_clamped_to_leave_three_threads(self):
        shank = ShankSpec(nominal_diameter=6.0, total_length=20.0, grip_length=19.0)
        assert shank.effective_grip_length(1.0) == 17.0

    def test_grip_clamped_to_zero_for_short_shank(self):
        shank = ShankSpec(nominal_diameter=6.0, total_length=2.0, grip_length=1.0)
        assert shank.effective_grip_length(1.0) == 0.0

    @pytest.mark.parametrize("kwargs, field", [
        ({"total_length": 0.0}, "shank.total_length"),
        ({"total_length": 10.0, "grip_length": -1.0}, "shank.grip_length"),
        ({"total_length": 10.0, "body_tolerance": -0.1}, "shank.body_tolerance"),
        ({"total_length": 10.0, "body_tolerance": 6.0}, "shank.body_tolerance"),
    ])
    def test_invalid_shanks(self, kwargs, field):
        with pytest.raises(ValidationError) as excinfo:
            ShankSpec(nominal_diameter=6.0, **kwargs).validate()
        assert excinfo.value.field == field


class TestHeadSpec:
    """Tests for head definitions."""

    def test_type_coerced_from_name(self):
        assert HeadSpec(type="socket_cap").type is HeadType.SOCKET_CAP

    def test_type_coerced_from_code(self):
        assert HeadSpec(type=2).type is HeadType.FLAT

    def test_unknown_type_falls_back_to_hex(self):
        with pytest.warns(UserWarning, match="Unknown head type"):
            assert parse_head_type("carriage") is HeadType.HEX

    def test_width_across_corners(self):
        head = HeadSpec(width_across_flats=10.0, height=4.0)
        assert abs(head.width_across_corners - 11.547005) < 1e-6

    def test_socket_larger_than_limit_rejected(self):
        """Socket 12 exceeds 0.9 x 10 = 9."""
        head = HeadSpec(type=HeadType.SOCKET_CAP, width_across_flats=10.0, height=6.0, socket_size=12.0, socket_depth=3.0)
        with pytest.raises(ValidationError) as excinfo:
            head.validate()
        assert excinfo.value.field == "head.socket_size"

    def test_socket_deeper_than_head_rejected(self):
        head = HeadSpec(type=HeadType.SOCKET_CAP, width_across_flats=10.0, height=6.0, socket_size=5.0, socket_depth=7.0)
        with pytest.raises(ValidationError) as excinfo:
            head.validate()
        assert excinfo.value.field == "head.socket_depth"

    def test_socket_cap_requires_socket_dimensions(self):
        head = HeadSpec(type=HeadType.SOCKET_CAP, width_across_flats=10.0, height=6.0)
        with pytest.raises(ValidationError) as excinfo:
            head.validate()
        assert excinfo.value.field == "head.socket_size"

    def test_socket_fields_ignored_for_hex(self):
        HeadSpec(type=HeadType.HEX, width_across_flats=10.0, height=4.0, socket_size=50.0).validate()

    def test_washer_thicker_than_head_rejected(self):
        head = HeadSpec(width_across_flats=10.0, height=4.0, washer_face_diameter=9.0, washer_face_thickness=4.0)
        with pytest.raises(ValidationError) as excinfo:
            head.validate()
        assert excinfo.value.field == "head.washer_face_thickness"

    def test_washer_wider_than_head_rejected(self):
        head = HeadSpec(width_across_flats=10.0, height=4.0, washer_face_diameter=12.0, washer_face_thickness=0.5)
        with pytest.raises(ValidationError) as excinfo:
            head.validate()
        assert excinfo.value.field == "head.washer_face_diameter"

    @pytest.mark.parametrize("kwargs, field", [
        ({"width_across_flats": 0.0, "height": 4.0}, "head.width_across_flats"),
        ({"width_across_flats": 10.0, "height": 0.0}, "head.height"),
        ({"width_across_flats": 10.0, "height": 4.0, "underhead_fillet_radius": -1.0}, "head.underhead_fillet_radius"),
    ])
    def test_missing_dimensions_rejected(self, kwargs, field):
        with pytest.raises(ValidationError) as excinfo:
            HeadSpec(**kwargs).validate()
        assert excinfo.value.field == field


class TestNutSpec:
    """Tests for nut definitions."""

    def test_nut_must_be_wider_than_thread(self, m6_thread):
        with pytest.raises(ValidationError) as excinfo:
            NutSpec(generate=True, width_across_flats=6.0, height=5.0).validate(m6_thread)
        assert excinfo.value.field == "nut.width_across_flats"

    def test_negative_tolerance_rejected(self, m6_thread):
        with pytest.raises(ValidationError) as excinfo:
            NutSpec(generate=True, width_across_flats=10.0, height=5.0, tolerance=-0.1).validate(m6_thread)
        assert excinfo.value.field == "nut.tolerance"

    def test_default_washer_thickness(self):
        assert NutSpec().washer_face_thickness == 0.5
        assert not NutSpec().has_washer_face


class TestBoltParameters:
    """Tests for the complete parameter set."""

    def test_valid_parameters_pass(self, m6_params):
        m6_params.validate()

    def test_nut_only_validated_when_generated(self, m6_thread):
        params = BoltParameters(
            thread=m6_thread,
            shank=ShankSpec(nominal_diameter=6.0, total_length=10.0),
            head=HeadSpec(width_across_flats=10.0, height=4.0),
        )
        params.validate()

    def test_blank_must_exceed_minor_diameter(self, m6_thread):
        params = BoltParameters(
            thread=m6_thread,
            shank=ShankSpec(nominal_diameter=6.0, total_length=10.0, body_tolerance=1.5),
            head=HeadSpec(width_across_flats=10.0, height=4.0),
        )
        with pytest.raises(ValidationError) as excinfo:
            params.validate()
        assert excinfo.value.field == "shank.body_tolerance"

    def test_with_length(self, m6_params):
        longer = m6_params.with_length(40.0)
        assert longer.shank.total_length == 40.0
        assert m6_params.shank.total_length == 12.0

    def test_from_designation_hex(self):
        params = BoltParameters.from_designation("M8", 30.0, grip_length=10.0)
        assert params.thread.major_diameter == 8.0
        assert params.thread.pitch == 1.25
        assert params.head.type is HeadType.HEX
        assert params.head.width_across_flats == 13.0
        assert params.shank.grip_length == 10.0
        assert params.name == "M8x30"
        params.validate()

    def test_from_designation_socket_cap(self):
        params = BoltParameters.from_designation("M6", 20.0, head_type="socket_cap")
        assert params.head.type is HeadType.SOCKET_CAP
        assert params.head.width_across_flats == 10.0
        assert params.head.socket_size == 5.0
        assert params.head.socket_depth == 3.0
        params.validate()

    def test_from_designation_without_socket_data(self):
        with pytest.raises(ValidationError):
            BoltParameters.from_designation('1/4"-32 UNEF', 20.0, head_type=HeadType.SOCKET_CAP)

    def test_from_designation_nut(self):
        params = BoltParameters.from_designation("M10", 40.0, generate_nut=True, nut_tolerance=0.1)
        assert params.nut.generate
        assert params.nut.width_across_flats == 16.0
        assert params.nut.height == 8.4
        assert params.nut.tolerance == 0.1

    def test_inch_designation_name_is_file_safe(self):
        params = BoltParameters.from_designation("1/4-20 UNC", 25.4)
        assert "/" not in params.name
        assert '"' not in params.name

    def test_material_is_descriptive_only(self):
        material = MaterialSpec(property_class="8.8", material_type="Steel", coating="Zinc")
        assert material.describe() == "Steel 8.8 Zinc"
        assert MaterialSpec().describe() == ""


class TestDimensionTable:
    """Tests for the standard size lookup."""

    def test_metric_coarse_sizes_present(self):
        for size in ("M3", "M4", "M5", "M6", "M8", "M10", "M12", "M16", "M20", "M24"):
            assert size in THREAD_TABLE

    @pytest.mark.parametrize("designation, d, p", [
        ("M6", 6.0, 1.0),
        ("m8", 8.0, 1.25),
        (" M10 ", 10.0, 1.5),
    ])
    def test_metric_lookup(self, designation, d, p):
        dims = get_thread_dimensions(designation)
        assert dims.major_diameter == d
        assert dims.pitch == p

    def test_inch_lookup_ignores_formatting(self):
        a = get_thread_dimensions('1/4"-20 UNC')
        b = get_thread_dimensions("1/4-20 unc")
        assert a is b
        assert abs(a.major_diameter - 6.35) < 1e-9
        assert abs(a.pitch - 25.4 / 20) < 1e-9
        assert abs(a.threads_per_inch - 20.0) < 1e-9

    def test_fine_pitch_designation(self):
        dims = get_thread_dimensions("M8x1.0")
        assert dims.major_diameter == 8.0
        assert dims.pitch == 1.0
        assert dims.head_width_across_flats == 13.0

    def test_unknown_designation(self):
        with pytest.raises(ValueError, match="No dimensions"):
            get_thread_dimensions("M7")

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            THREAD_TABLE["M99"] = THREAD_TABLE["M6"]

    def test_available_threads(self):
        names = available_threads()
        assert "M6" in names
        assert '1/4"-20 UNC' in names

    def test_inch_conversion(self):
        assert inch_to_mm(1.0) == INCH == 25.4

    def test_nuts_wider_than_threads(self):
        for dims in THREAD_TABLE.values():
            assert dims.nut_width_across_flats > dims.major_diameter
            assert dims.head_width_across_flats > dims.major_diameter
