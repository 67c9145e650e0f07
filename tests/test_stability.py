"""
Unit Tests for Stability Analysis

Tests for parameter validation, load analysis, safety factors and the
analysis result snapshot.
"""

import json
import logging
import math

import pytest

from damsection.errors import InputError
from damsection.geometry.primitives import Point2D
from damsection.geometry.properties import compute_geometric_properties
from damsection.profile.models import MaterialProperties, MaterialZone, Profile
from damsection.stability.analyze import analyze_profile, resolve_material
from damsection.stability.loads import (
    LoadAnalysis,
    calculate_net_water_pressure,
    calculate_seismic_force,
    calculate_uplift_force,
    compute_loads,
)
from damsection.stability.parameters import (
    AnalysisParameters,
    parameters_from_dict,
    validate_parameters,
)
from damsection.stability.safety import (
    INFINITE_SAFETY_FACTOR,
    calculate_overturning_safety_factor,
    calculate_sliding_safety_factor,
    evaluate_stability,
    format_safety_factor,
)

SCENARIO_A_PARAMS = AnalysisParameters(upstream_water_level=40.0, downstream_water_level=5.0,
                                       friction_coefficient=0.75, water_unit_weight=9.8)


class TestAnalysisParameters:
    """Tests for parameter defaults, parsing and validation."""

    def test_defaults_when_constructed_then_match_documented_values(self):
        p = AnalysisParameters()
        assert p.upstream_water_level == 100.0
        assert p.downstream_water_level == 10.0
        assert p.water_unit_weight == 9.8
        assert p.seismic_coefficient == 0.0
        assert p.friction_coefficient == 0.75
        assert p.required_sliding_safety_factor == 3.0
        assert p.required_overturning_safety_factor == 1.5
        assert p.consider_uplift is True
        assert p.uplift_reduction_factor == 0.8

    def test_from_dict_when_unknown_keys_then_ignores_them(self):
        p = parameters_from_dict({'upstream_water_level': 40.0, 'comment': 'x'})
        assert p.upstream_water_level == 40.0
        assert p.downstream_water_level == 10.0

    def test_validate_when_defaults_then_no_warnings(self):
        assert validate_parameters(AnalysisParameters()) == []

    def test_validate_when_several_violations_then_raises_once_with_all(self):
        p = AnalysisParameters(upstream_water_level=-1.0, water_unit_weight=0.0,
                               friction_coefficient=2.0, seismic_coefficient=0.5,
                               uplift_reduction_factor=1.5)
        with pytest.raises(InputError) as excinfo:
            validate_parameters(p)
        assert len(excinfo.value.errors) == 5

    def test_validate_when_negative_downstream_then_raises(self):
        with pytest.raises(InputError, match="Downstream"):
            validate_parameters(AnalysisParameters(downstream_water_level=-0.5))

    def test_validate_when_non_finite_then_raises(self):
        with pytest.raises(InputError, match="finite"):
            validate_parameters(AnalysisParameters(seismic_coefficient=math.nan))

    def test_validate_when_uplift_flag_is_string_then_raises(self):
        with pytest.raises(InputError, match="consider_uplift"):
            validate_parameters(parameters_from_dict({"consider_uplift": "false"}))

    def test_validate_when_numeric_field_is_bool_then_raises(self):
        with pytest.raises(InputError, match="friction_coefficient"):
            validate_parameters(AnalysisParameters(friction_coefficient=True))

    def test_validate_when_upstream_not_above_downstream_then_warns(self, caplog):
        p = AnalysisParameters(upstream_water_level=5.0, downstream_water_level=10.0)
        with caplog.at_level(logging.WARNING):
            warnings = validate_parameters(p)
        assert len(warnings) == 1
        assert warnings[0] in caplog.text

    def test_validate_when_required_factor_at_most_one_then_warns(self):
        p = AnalysisParameters(required_sliding_safety_factor=1.0)
        assert len(validate_parameters(p)) == 1

    def test_validate_when_range_bounds_then_accepted(self):
        p = AnalysisParameters(friction_coefficient=1.5, seismic_coefficient=0.4,
                               uplift_reduction_factor=1.0, downstream_water_level=0.0)
        validate_parameters(p)


class TestLoads:
    """Tests for the individual load formulas."""

    def test_net_water_pressure_when_tailwater_higher_then_zero(self):
        assert calculate_net_water_pressure(5.0, 10.0, 9.8) == 0.0

    def test_net_water_pressure_when_scenario_a_then_matches_hand_value(self):
        assert calculate_net_water_pressure(40.0, 5.0, 9.8) == pytest.approx(7717.5)

    def test_uplift_when_scenario_a_then_uses_average_head(self):
        assert calculate_uplift_force(40.0, 5.0, 25.0, 9.8, 0.8) == pytest.approx(4410.0)

    def test_seismic_when_coefficient_zero_then_zero(self):
        assert calculate_seismic_force(22200.0, 0.0) == 0.0

    def test_compute_loads_when_scenario_a_then_matches_hand_values(self, scenario_a_contour):
        g = compute_geometric_properties(scenario_a_contour)
        loads = compute_loads(g, SCENARIO_A_PARAMS, MaterialProperties(density=24.0))
        assert loads.self_weight == pytest.approx(22200.0)
        assert loads.net_water_pressure == pytest.approx(7717.5)
        assert loads.uplift_force == pytest.approx(4410.0)
        assert loads.seismic_force == 0.0
        assert loads.effective_normal_force == pytest.approx(17790.0)

    def test_compute_loads_when_uplift_disabled_then_zero_uplift(self, scenario_a_contour):
        g = compute_geometric_properties(scenario_a_contour)
        params = AnalysisParameters(upstream_water_level=40.0, downstream_water_level=5.0,
                                    consider_uplift=False)
        loads = compute_loads(g, params, MaterialProperties())
        assert loads.uplift_force == 0.0
        assert loads.effective_normal_force == loads.self_weight

    def test_to_dict_when_rendered_then_includes_derived_forces(self):
        data = LoadAnalysis(100.0, 30.0, 20.0, 5.0).to_dict()
        assert data['effective_normal_force'] == 80.0
        assert data['horizontal_force'] == 35.0


class TestSafetyFactors:
    """Tests for sliding and overturning safety factors."""

    def test_sliding_when_no_horizontal_force_then_infinite_sentinel(self):
        sf, warnings = calculate_sliding_safety_factor(LoadAnalysis(1000.0, 0.0, 100.0, 0.0), 0.75)
        assert sf == INFINITE_SAFETY_FACTOR
        assert not math.isnan(sf)
        assert warnings == []

    def test_sliding_when_uplift_exceeds_weight_then_zero_with_warning(self):
        sf, warnings = calculate_sliding_safety_factor(LoadAnalysis(1000.0, 500.0, 1200.0, 0.0), 0.75)
        assert sf == 0.0
        assert len(warnings) == 1

    def test_sliding_when_scenario_a_then_matches_hand_value(self):
        sf, _ = calculate_sliding_safety_factor(LoadAnalysis(22200.0, 7717.5, 4410.0, 0.0), 0.75)
        assert sf == pytest.approx(13342.5 / 7717.5)

    def test_overturning_when_scenario_a_then_matches_hand_value(self, scenario_a_contour):
        g = compute_geometric_properties(scenario_a_contour)
        loads = LoadAnalysis(22200.0, 7717.5, 4410.0, 0.0)
        assert calculate_overturning_safety_factor(g, loads) == pytest.approx(340000 / 128625)

    def test_overturning_when_no_driving_moment_then_infinite_sentinel(self, scenario_a_contour):
        g = compute_geometric_properties(scenario_a_contour)
        loads = LoadAnalysis(22200.0, 0.0, 0.0, 0.0)
        assert calculate_overturning_safety_factor(g, loads) == INFINITE_SAFETY_FACTOR

    def test_overturning_when_centroid_beyond_toe_then_negative_and_unstable(self):
        overhang = [Point2D(0, 0), Point2D(10, 0), Point2D(40, 10), Point2D(30, 10)]
        g = compute_geometric_properties(overhang)
        loads = LoadAnalysis(2400.0, 490.0, 0.0, 0.0)
        sf = calculate_overturning_safety_factor(g, loads)
        assert sf < 0
        assert not evaluate_stability(g, loads, SCENARIO_A_PARAMS).overturning_stable

    def test_format_when_sentinel_then_renders_inf(self):
        assert format_safety_factor(INFINITE_SAFETY_FACTOR) == "inf"
        assert format_safety_factor(1.23456) == "1.235"

    def test_evaluate_when_thresholds_then_flags_follow_factors(self, scenario_a_contour):
        g = compute_geometric_properties(scenario_a_contour)
        loads = LoadAnalysis(22200.0, 7717.5, 4410.0, 0.0)
        s = evaluate_stability(g, loads, SCENARIO_A_PARAMS)
        assert s.sliding_stable is False
        assert s.overturning_stable is True
        assert s.overall_stable is False
        assert s.resisting_moment == pytest.approx(340000.0)
        assert s.overturning_moment == pytest.approx(128625.0)


class TestAnalyzeProfile:
    """Tests for analyze_profile and AnalysisResult."""

    def test_analyze_when_scenario_a_then_matches_hand_values(self, scenario_a_profile):
        result = analyze_profile(scenario_a_profile, SCENARIO_A_PARAMS)
        assert result.loads.self_weight == pytest.approx(22200.0)
        assert result.loads.net_water_pressure == pytest.approx(7717.5)
        assert result.sliding_safety_factor == pytest.approx(1.72886, rel=1e-4)
        assert result.overturning_safety_factor == pytest.approx(2.6433, rel=1e-4)
        assert result.overall_stable is False

    def test_analyze_when_equal_levels_and_no_seismic_then_sliding_infinite(self, scenario_a_profile):
        params = AnalysisParameters(upstream_water_level=10.0, downstream_water_level=10.0)
        result = analyze_profile(scenario_a_profile, params)
        assert result.sliding_safety_factor == INFINITE_SAFETY_FACTOR
        assert result.sliding_stable is True

    def test_analyze_when_invalid_parameters_then_raises_before_computing(self, scenario_a_profile):
        with pytest.raises(InputError):
            analyze_profile(scenario_a_profile, AnalysisParameters(friction_coefficient=-0.1))

    def test_analyze_when_contour_too_short_then_raises(self):
        profile = Profile.from_points([(0, 0), (1, 0)])
        with pytest.raises(InputError):
            analyze_profile(profile, AnalysisParameters())

    def test_analyze_when_material_given_then_overrides_zone(self, scenario_a_profile):
        result = analyze_profile(scenario_a_profile, SCENARIO_A_PARAMS,
                                 MaterialProperties(density=25.0))
        assert result.loads.self_weight == pytest.approx(925.0 * 25.0)

    def test_analyze_when_advisory_parameters_then_warnings_recorded(self, scenario_a_profile):
        params = AnalysisParameters(upstream_water_level=5.0, downstream_water_level=10.0)
        result = analyze_profile(scenario_a_profile, params)
        assert result.loads.net_water_pressure == 0.0
        assert any("downstream" in w.lower() for w in result.warnings)

    def test_resolve_material_when_no_zones_then_c30(self, caplog):
        profile = Profile.from_points([(0, 0), (10, 0), (10, 10)])
        with caplog.at_level(logging.WARNING):
            material = resolve_material(profile)
        assert material.grade == "C30"
        assert "C30" in caplog.text

    def test_resolve_material_when_several_zones_then_largest_wins(self):
        small = MaterialZone("small", [(0, 0), (1, 0), (1, 1)], MaterialProperties(density=20.0))
        large = MaterialZone("large", [(0, 0), (10, 0), (10, 10)], MaterialProperties(density=26.0))
        profile = Profile.from_points([(0, 0), (10, 0), (10, 10)], material_zones=(small, large))
        assert resolve_material(profile).density == 26.0

    def test_to_dict_when_rendered_then_json_serializable(self, scenario_a_profile):
        data = analyze_profile(scenario_a_profile, SCENARIO_A_PARAMS).to_dict()
        text = json.dumps(data)
        assert data['validator'] == 'stability'
        assert data['passed'] is False
        assert data['summary']['result'] == 'FAIL'
        assert 'sliding' in json.loads(text)['stability']

    def test_report_when_generated_then_contains_factors_and_markers(self, scenario_a_profile):
        report = analyze_profile(scenario_a_profile, SCENARIO_A_PARAMS).generate_report()
        assert "Sliding SF: 1.729" in report
        assert "Overturning SF: 2.643" in report
        assert "FAIL" in report
        assert "PASS" in report

    def test_report_when_sentinel_then_renders_inf(self, scenario_a_profile):
        params = AnalysisParameters(upstream_water_level=10.0, downstream_water_level=10.0)
        report = analyze_profile(scenario_a_profile, params).generate_report()
        assert "Sliding SF: inf" in report
