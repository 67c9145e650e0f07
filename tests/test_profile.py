"""
Unit Tests for Profile Models

Tests for issues and severity ordering, materials, the profile record,
feature identification and dict serialization.
"""

import json
import logging

import pytest

from damsection.errors import InputError
from damsection.geometry.primitives import Point2D
from damsection.profile.features import (
    find_crest_center,
    find_downstream_toe,
    find_slope_changes,
    find_upstream_heel,
    identify_geometric_features,
)
from damsection.profile.models import (
    BaseConstraint,
    BoundaryConditionKind,
    FeatureKind,
    GeometryIssue,
    IssueSeverity,
    IssueType,
    MaterialProperties,
    MaterialZone,
    Profile,
    ProfileGeometry,
    ValidationStatus,
)
from damsection.profile.serialization import material_from_dict, profile_from_dict, profile_to_dict


def _issue(severity, issue_type=IssueType.INVALID_DIMENSIONS):
    return GeometryIssue(type=issue_type, severity=severity, description="test")


class TestIssueSeverity:
    """Tests for the explicit severity ordering."""

    def test_ordering_when_compared_then_info_lowest_critical_highest(self):
        assert IssueSeverity.INFO < IssueSeverity.WARNING < IssueSeverity.ERROR < IssueSeverity.CRITICAL

    def test_ordering_when_sorted_then_follows_rank(self):
        shuffled = [IssueSeverity.ERROR, IssueSeverity.INFO, IssueSeverity.CRITICAL, IssueSeverity.WARNING]
        assert sorted(shuffled) == [IssueSeverity.INFO, IssueSeverity.WARNING,
                                    IssueSeverity.ERROR, IssueSeverity.CRITICAL]

    def test_compare_when_other_type_then_raises_type_error(self):
        with pytest.raises(TypeError):
            IssueSeverity.INFO < 1


class TestGeometryIssue:
    """Tests for GeometryIssue records."""

    def test_is_blocking_when_error_or_worse_then_true(self):
        assert _issue(IssueSeverity.ERROR).is_blocking
        assert _issue(IssueSeverity.CRITICAL).is_blocking
        assert not _issue(IssueSeverity.WARNING).is_blocking

    def test_issue_when_created_then_immutable(self):
        issue = _issue(IssueSeverity.INFO)
        with pytest.raises(AttributeError):
            issue.description = "changed"

    def test_to_dict_when_location_set_then_renders_pair(self):
        issue = GeometryIssue(type=IssueType.OPEN_CONTOUR, severity=IssueSeverity.ERROR,
                              description="gap", location=Point2D(1, 2))
        data = issue.to_dict()
        assert data['location'] == (1, 2)
        assert data['severity'] == "error"
        assert data['type'] == "open_contour"


class TestMaterial:
    """Tests for materials and zones."""

    def test_standard_concrete_when_c25_then_uses_grade_table(self):
        m = MaterialProperties.standard_concrete("c25")
        assert m.grade == "C25"
        assert m.compressive_strength == 25.0
        assert m.density == 24.0

    def test_standard_concrete_when_unknown_grade_then_c30_values(self):
        m = MaterialProperties.standard_concrete("C99")
        assert m.compressive_strength == 30.0

    def test_is_valid_when_density_zero_then_false(self):
        assert MaterialProperties().is_valid()
        assert not MaterialProperties(density=0.0).is_valid()

    def test_zone_when_raw_pairs_then_coerced_to_points(self):
        zone = MaterialZone("z", [(0, 0), (2, 0), (2, 2), (0, 2)])
        assert zone.boundary[1] == Point2D(2.0, 0.0)
        assert zone.area == pytest.approx(4.0)
        assert zone.centroid == Point2D(1.0, 1.0)


class TestProfile:
    """Tests for the profile record."""

    def test_geometry_when_short_hole_then_dropped(self):
        geometry = ProfileGeometry(main_contour=[(0, 0), (4, 0), (4, 4)],
                                   inner_contours=[[(1, 1), (2, 1)]])
        assert geometry.inner_contours == ()

    def test_with_inner_contour_when_added_then_original_unchanged(self):
        geometry = ProfileGeometry(main_contour=[(0, 0), (4, 0), (4, 4)])
        extended = geometry.with_inner_contour([(1, 1), (2, 1), (2, 2)])
        assert len(extended.inner_contours) == 1
        assert geometry.inner_contours == ()
        assert extended.id != geometry.id

    def test_from_points_when_geometry_keywords_then_split_correctly(self):
        profile = Profile.from_points([(0, 0), (4, 0), (4, 4)], name="p",
                                      foundation_contour=[(0, 0), (4, 0)])
        assert profile.name == "p"
        assert len(profile.foundation_contour) == 2
        assert profile.status == ValidationStatus.PENDING

    def test_add_issue_when_blocking_then_pending_becomes_has_issues(self):
        profile = Profile.from_points([(0, 0), (4, 0), (4, 4)])
        profile.add_issue(_issue(IssueSeverity.WARNING))
        assert profile.status == ValidationStatus.PENDING
        profile.add_issue(_issue(IssueSeverity.ERROR))
        assert profile.status == ValidationStatus.HAS_ISSUES
        assert profile.has_blocking_issues
        assert not profile.has_critical_issues

    def test_clear_issues_when_has_issues_then_back_to_pending(self):
        profile = Profile.from_points([(0, 0), (4, 0), (4, 4)])
        profile.add_issue(_issue(IssueSeverity.CRITICAL))
        profile.clear_issues()
        assert profile.issues == ()
        assert profile.status == ValidationStatus.PENDING

    def test_issue_queries_when_mixed_then_filter(self):
        profile = Profile.from_points([(0, 0), (4, 0), (4, 4)])
        profile.add_issue(_issue(IssueSeverity.INFO, IssueType.SEGMENT_LENGTH))
        profile.add_issue(_issue(IssueSeverity.WARNING, IssueType.INVALID_SLOPE))
        assert len(profile.issues_by_type(IssueType.INVALID_SLOPE)) == 1
        assert len(profile.issues_by_severity(IssueSeverity.INFO)) == 1

    def test_issues_when_returned_then_cannot_modify_record(self):
        profile = Profile.from_points([(0, 0), (4, 0), (4, 4)])
        profile.add_issue(_issue(IssueSeverity.INFO))
        assert isinstance(profile.issues, tuple)


class TestFeatureIdentification:
    """Tests for heel, toe, crest and slope-change detection."""

    def test_finders_when_scenario_a_then_locate_corners(self, scenario_a_contour):
        assert find_upstream_heel(scenario_a_contour) == Point2D(0, 0)
        assert find_downstream_toe(scenario_a_contour) == Point2D(25, 0)
        assert find_crest_center(scenario_a_contour) == Point2D(5.0, 50)

    def test_slope_changes_when_scenario_a_then_crest_corners_only(self, scenario_a_contour):
        assert find_slope_changes(scenario_a_contour) == [Point2D(0, 50), Point2D(10, 50)]

    def test_slope_changes_when_zero_length_edge_then_skipped(self):
        contour = [Point2D(0, 0), Point2D(0, 0), Point2D(5, 0), Point2D(10, 0)]
        assert find_slope_changes(contour) == []

    def test_slope_changes_when_duplicate_before_turn_then_turn_reported(self):
        contour = [Point2D(0, 0), Point2D(0, 0), Point2D(5, 0), Point2D(5, 5)]
        assert find_slope_changes(contour) == [Point2D(5, 0)]

    def test_identify_when_profile_then_sets_features(self, scenario_a_profile):
        identify_geometric_features(scenario_a_profile)
        features = scenario_a_profile.features
        assert features.get(FeatureKind.UPSTREAM_HEEL) == Point2D(0, 0)
        assert features.has(FeatureKind.CREST_CENTER)
        assert not features.has(FeatureKind.DRAINAGE_SYSTEM)

    def test_identify_when_failure_then_logged_not_raised(self, caplog, monkeypatch):
        def broken(contour):
            raise ZeroDivisionError("no crest")

        monkeypatch.setattr("damsection.profile.features.find_crest_center", broken)
        profile = Profile.from_points([(0, 0), (4, 0), (4, 4)])
        with caplog.at_level(logging.WARNING):
            identify_geometric_features(profile)
        assert "Feature identification failed" in caplog.text
        assert profile.features.slope_changes == []


class TestSerialization:
    """Tests for profile_from_dict and profile_to_dict."""

    def test_from_dict_when_full_artifact_then_builds_profile(self, well_formed_dict):
        profile = profile_from_dict(well_formed_dict)
        assert profile.name == "well formed"
        assert len(profile.main_contour) == 6
        assert profile.material_zones[0].properties.grade == "C30"
        assert profile.water_levels.upstream == 35.0
        assert profile.features.get(FeatureKind.DRAINAGE_SYSTEM) == Point2D(8, 2)
        assert profile.boundary_conditions.get(BoundaryConditionKind.FOUNDATION).constraint == BaseConstraint.FIXED

    def test_from_dict_when_minimal_then_defaults(self):
        profile = profile_from_dict({"main_contour": [[0, 0], [1, 0], [1, 1]]})
        assert profile.material_zones == ()
        assert profile.water_levels.upstream == 0.0
        assert not profile.boundary_conditions.has(BoundaryConditionKind.FOUNDATION)

    def test_material_from_dict_when_explicit_fields_then_used(self):
        m = material_from_dict({"name": "rock", "density": 26.5})
        assert m.name == "rock"
        assert m.density == 26.5

    def test_material_from_dict_when_grade_and_override_then_grade_values_kept(self):
        m = material_from_dict({"grade": "C25", "density": 23.0})
        assert m.grade == "C25"
        assert m.density == 23.0
        assert m.compressive_strength == 25.0
        assert m.tensile_strength == MaterialProperties.standard_concrete("C25").tensile_strength

    def test_from_dict_when_zone_has_no_boundary_then_dropped(self, well_formed_dict, caplog):
        well_formed_dict["material_zones"].append({"name": "empty", "properties": {"grade": "C20"}})
        with caplog.at_level(logging.WARNING):
            profile = profile_from_dict(well_formed_dict)
        assert [z.name for z in profile.material_zones] == ["body"]
        assert "empty" in caplog.text

    def test_from_dict_when_coordinate_not_numeric_then_input_error(self):
        with pytest.raises(InputError, match="Point 1"):
            profile_from_dict({"main_contour": [[0, 0], [1, "x"], [1, 1]]})

    def test_from_dict_when_constraint_unknown_then_input_error(self):
        data = {"main_contour": [[0, 0], [1, 0], [1, 1]],
                "boundary_conditions": {"foundation": {"constraint": "glued"}}}
        with pytest.raises(InputError, match="Malformed profile data"):
            profile_from_dict(data)

    def test_from_dict_when_section_is_wrong_type_then_input_error(self):
        data = {"main_contour": [[0, 0], [1, 0], [1, 1]], "features": ["heel"]}
        with pytest.raises(InputError):
            profile_from_dict(data)

    def test_to_dict_when_round_tripped_then_inputs_preserved(self, well_formed_dict):
        data = profile_to_dict(profile_from_dict(well_formed_dict))
        json.dumps(data)
        again = profile_from_dict(data)
        assert again.main_contour == profile_from_dict(well_formed_dict).main_contour
        assert again.features.drainage_system == Point2D(8, 2)
        assert again.boundary_conditions.has(BoundaryConditionKind.FOUNDATION)
