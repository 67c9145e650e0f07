"""Engineering checks: foundation, drainage, material zones and proportions."""

from typing import List

from ..geometry.primitives import GEOMETRIC_TOLERANCE, Point2D
from ..geometry.properties import base_width, has_finite_coordinates
from ..profile.models import (
    FeatureKind, GeometryIssue, IssueSeverity, IssueType, Profile
)

APPLICABLE_STANDARDS = ("SL 319-2018", "DL/T 5108-2020")

MAX_HEIGHT_TO_BASE_RATIO = 2.0
MIN_CREST_WIDTH = 3.0  # m


def _distance_to_contour(point: Point2D, contour) -> float:
    return min(point.distance_to(p) for p in contour)


def check_foundation(profile: Profile) -> List[GeometryIssue]:
    foundation = profile.foundation_contour
    if len(foundation) < 2:
        return [GeometryIssue(
            type=IssueType.MISSING_FOUNDATION,
            severity=IssueSeverity.ERROR,
            description="Foundation contact line is missing",
            suggested_fix="Include the foundation in the model or mark the foundation line manually",
        )]

    contour = profile.main_contour
    if not contour:
        return []
    start_gap = _distance_to_contour(foundation[0], contour)
    end_gap = _distance_to_contour(foundation[-1], contour)
    if start_gap > GEOMETRIC_TOLERANCE or end_gap > GEOMETRIC_TOLERANCE:
        return [GeometryIssue(
            type=IssueType.MISSING_FOUNDATION,
            severity=IssueSeverity.WARNING,
            description="Foundation line is poorly connected to the section contour",
            location=foundation[0] if start_gap > GEOMETRIC_TOLERANCE else foundation[-1],
            suggested_fix="Check the dam/foundation connection or the extraction tolerance",
            auto_fixable=True,
        )]
    return []


def check_drainage(profile: Profile) -> List[GeometryIssue]:
    if profile.features.has(FeatureKind.DRAINAGE_SYSTEM):
        return []
    return [GeometryIssue(
        type=IssueType.MISSING_DRAINAGE_SYSTEM,
        severity=IssueSeverity.WARNING,
        description="No drainage system feature found",
        suggested_fix="Check that drainage galleries and drain holes are modelled",
    )]


def check_material_zones(profile: Profile) -> List[GeometryIssue]:
    """Zones must exist; each overlapping pair of zone bounds is reported."""
    zones = profile.material_zones
    if not zones:
        return [GeometryIssue(
            type=IssueType.MISSING_MATERIAL_ZONES,
            severity=IssueSeverity.WARNING,
            description="No material zones defined",
            suggested_fix="Assign material properties to the parts of the section",
            auto_fixable=True,
        )]

    issues = []
    for i, first in enumerate(zones):
        for second in zones[i + 1:]:
            if first.bounding_box.overlaps(second.bounding_box):
                issues.append(GeometryIssue(
                    type=IssueType.MATERIAL_ZONE_OVERLAP,
                    severity=IssueSeverity.WARNING,
                    description=f"Material zones '{first.name}' and '{second.name}' overlap",
                    suggested_fix="Adjust the zone boundaries or merge the overlapping zones",
                ))
    return issues


def check_proportions(profile: Profile) -> List[GeometryIssue]:
    """Height over base width: a slender section needs a detailed check."""
    contour = profile.main_contour
    if len(contour) < 3 or not has_finite_coordinates(contour):
        return []

    ys = [p.y for p in contour]
    height = max(ys) - min(ys)
    ratio = height / max(base_width(contour), 0.1)
    if ratio > MAX_HEIGHT_TO_BASE_RATIO:
        return [GeometryIssue(
            type=IssueType.INVALID_DIMENSIONS,
            severity=IssueSeverity.WARNING,
            description=f"Height/base ratio {ratio:.2f} may be too large; verify stability",
            suggested_fix="Run a detailed stability analysis or adjust the section",
        )]
    return []


def check_crest_width(profile: Profile) -> List[GeometryIssue]:
    contour = profile.main_contour
    if not contour:
        return []

    top = max(p.y for p in contour)
    xs = [p.x for p in contour if abs(p.y - top) < GEOMETRIC_TOLERANCE]
    if len(xs) < 2:
        return []

    width = max(xs) - min(xs)
    if width < MIN_CREST_WIDTH:
        return [GeometryIssue(
            type=IssueType.INVALID_DIMENSIONS,
            severity=IssueSeverity.WARNING,
            description=f"Crest width {width:.1f}m may be below the code minimum",
            suggested_fix="Check the crest design against the applicable standards",
        )]
    return []


def run_engineering_checks(profile: Profile) -> List[GeometryIssue]:
    issues = []
    issues += check_foundation(profile)
    issues += check_drainage(profile)
    issues += check_material_zones(profile)
    issues += check_proportions(profile)
    issues += check_crest_width(profile)
    return issues
