"""
Geometry checks of the main contour.

Closure, overall dimensions, face slopes, segment lengths and
self-intersection. Thresholds are typical values for concrete gravity
dams; a section outside them is flagged for review, not rejected.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..geometry.primitives import GEOMETRIC_TOLERANCE, Point2D, to_array
from ..geometry.properties import has_finite_coordinates
from ..profile.models import GeometryIssue, IssueSeverity, IssueType, Profile

MIN_DAM_HEIGHT = 5.0         # m
MAX_DAM_HEIGHT = 300.0       # m
MIN_ASPECT_RATIO = 0.5       # width / height
MAX_ASPECT_RATIO = 15.0
MIN_UPSTREAM_SLOPE = 0.05
MAX_UPSTREAM_SLOPE = 1.0
MIN_DOWNSTREAM_SLOPE = 0.7
MAX_DOWNSTREAM_SLOPE = 1.5
MAX_SEGMENT_LENGTH = 50.0    # m
MIN_SEGMENT_LENGTH = 0.01    # m


def check_contour_closure(contour: Sequence[Point2D]) -> List[GeometryIssue]:
    if len(contour) < 3:
        return [GeometryIssue(
            type=IssueType.OPEN_CONTOUR,
            severity=IssueSeverity.CRITICAL,
            description="Main contour is missing or has fewer than 3 points",
            suggested_fix="Make sure the section contains at least 3 valid points",
        )]

    first, last = contour[0], contour[-1]
    gap = first.distance_to(last)
    if gap > GEOMETRIC_TOLERANCE:
        return [GeometryIssue(
            type=IssueType.OPEN_CONTOUR,
            severity=IssueSeverity.ERROR,
            description=f"Section contour is not closed: start and end are {gap:.3f}m apart",
            location=first.midpoint(last),
            suggested_fix="Check the extraction parameters so the cut plane fully crosses the dam",
            auto_fixable=True,
        )]
    return []


def check_coordinates(contour: Sequence[Point2D]) -> List[GeometryIssue]:
    if has_finite_coordinates(contour):
        return []
    bad = next(p for p in contour if not (np.isfinite(p.x) and np.isfinite(p.y)))
    return [GeometryIssue(
        type=IssueType.INVALID_COORDINATES,
        severity=IssueSeverity.CRITICAL,
        description=f"Section contour contains a non-finite coordinate {bad}",
        suggested_fix="Check the projection of the model onto the section plane",
    )]


def aspect_ratio(width: float, height: float) -> float:
    return width / max(height, 0.1)


def check_dimensions(contour: Sequence[Point2D],
                     metrics: Dict[str, float]) -> List[GeometryIssue]:
    """Height and width/height ratio; records both in ``metrics``."""
    arr = to_array(contour)
    width = float(arr[:, 0].max() - arr[:, 0].min())
    height = float(arr[:, 1].max() - arr[:, 1].min())
    ratio = aspect_ratio(width, height)

    metrics['width'] = width
    metrics['height'] = height
    metrics['aspect_ratio'] = ratio

    issues = []
    if height < MIN_DAM_HEIGHT:
        issues.append(GeometryIssue(
            type=IssueType.INVALID_DIMENSIONS,
            severity=IssueSeverity.WARNING,
            description=f"Dam height {height:.1f}m is below the usual minimum of {MIN_DAM_HEIGHT}m",
            suggested_fix="Check the model units or the extraction range",
        ))
    if height > MAX_DAM_HEIGHT:
        issues.append(GeometryIssue(
            type=IssueType.INVALID_DIMENSIONS,
            severity=IssueSeverity.WARNING,
            description=f"Dam height {height:.1f}m exceeds the usual maximum of {MAX_DAM_HEIGHT}m",
            suggested_fix="If this is an extra-high dam, adjust the validation thresholds",
        ))
    if ratio < MIN_ASPECT_RATIO or ratio > MAX_ASPECT_RATIO:
        issues.append(GeometryIssue(
            type=IssueType.INVALID_DIMENSIONS,
            severity=IssueSeverity.WARNING,
            description=f"Width/height ratio {ratio:.2f} looks unreasonable",
            suggested_fix="Check the section direction or the dam axis definition",
        ))
    return issues


def face_slope(points: np.ndarray) -> float:
    """Rise over run of a set of face points; 0 when undefined."""
    if len(points) < 2:
        return 0.0
    dx = float(points[:, 0].max() - points[:, 0].min())
    dy = float(points[:, 1].max() - points[:, 1].min())
    return dy / dx if dx > 0 else 0.0


def face_slopes(contour: Sequence[Point2D]) -> Tuple[float, float]:
    """
    Upstream and downstream face slopes.

    Vertices left of the mean X belong to the upstream face, those right
    of it to the downstream face.
    """
    arr = to_array(contour)
    center_x = arr[:, 0].mean()
    upstream = arr[arr[:, 0] < center_x]
    downstream = arr[arr[:, 0] > center_x]
    return face_slope(upstream), face_slope(downstream)


def check_slopes(contour: Sequence[Point2D],
                 metrics: Dict[str, float]) -> List[GeometryIssue]:
    upstream, downstream = face_slopes(contour)
    metrics['upstream_slope'] = upstream
    metrics['downstream_slope'] = downstream

    issues = []
    if not MIN_UPSTREAM_SLOPE <= upstream <= MAX_UPSTREAM_SLOPE:
        issues.append(GeometryIssue(
            type=IssueType.INVALID_SLOPE,
            severity=IssueSeverity.WARNING,
            description=(f"Upstream face slope {upstream:.3f} outside recommended range "
                         f"({MIN_UPSTREAM_SLOPE:.2f}-{MAX_UPSTREAM_SLOPE:.2f})"),
            suggested_fix="Check the dam geometry or the slope calculation",
        ))
    if not MIN_DOWNSTREAM_SLOPE <= downstream <= MAX_DOWNSTREAM_SLOPE:
        issues.append(GeometryIssue(
            type=IssueType.INVALID_SLOPE,
            severity=IssueSeverity.WARNING,
            description=(f"Downstream face slope {downstream:.3f} outside recommended range "
                         f"({MIN_DOWNSTREAM_SLOPE:.2f}-{MAX_DOWNSTREAM_SLOPE:.2f})"),
            suggested_fix="Check the dam geometry or the slope calculation",
        ))
    return issues


def check_segment_lengths(contour: Sequence[Point2D]) -> List[GeometryIssue]:
    """Consecutive segments only; the closing segment is not checked."""
    issues = []
    for p1, p2 in zip(contour[:-1], contour[1:]):
        length = p1.distance_to(p2)
        if length > MAX_SEGMENT_LENGTH:
            issues.append(GeometryIssue(
                type=IssueType.SEGMENT_LENGTH,
                severity=IssueSeverity.WARNING,
                description=f"Segment of {length:.2f}m is too long and may reduce accuracy",
                location=p1.midpoint(p2),
                suggested_fix="Increase the extraction resolution or check the source model",
            ))
        if length < MIN_SEGMENT_LENGTH:
            issues.append(GeometryIssue(
                type=IssueType.SEGMENT_LENGTH,
                severity=IssueSeverity.INFO,
                description=f"Segment of {length:.4f}m is negligibly short",
                location=p1.midpoint(p2),
                suggested_fix="Remove redundant points",
                auto_fixable=True,
            ))
    return issues


def segment_intersection(p1: Point2D, p2: Point2D,
                         p3: Point2D, p4: Point2D) -> Optional[Point2D]:
    """
    Intersection point of segments p1-p2 and p3-p4, or None.

    Nearly parallel segments (denominator below the geometric tolerance)
    never intersect.
    """
    d = (p4.y - p3.y) * (p2.x - p1.x) - (p4.x - p3.x) * (p2.y - p1.y)
    if abs(d) < GEOMETRIC_TOLERANCE:
        return None

    t1 = ((p4.x - p3.x) * (p1.y - p3.y) - (p4.y - p3.y) * (p1.x - p3.x)) / d
    t2 = ((p2.x - p1.x) * (p1.y - p3.y) - (p2.y - p1.y) * (p1.x - p3.x)) / d
    if 0.0 <= t1 <= 1.0 and 0.0 <= t2 <= 1.0:
        return Point2D(p1.x + t1 * (p2.x - p1.x), p1.y + t1 * (p2.y - p1.y))
    return None


def check_self_intersection(contour: Sequence[Point2D]) -> List[GeometryIssue]:
    """
    Pairwise test of non-adjacent segments.

    The pair formed by the first and the last segment shares the closing
    vertex and is skipped.
    """
    n = len(contour)
    if n < 4:
        return []

    issues = []
    for i in range(n - 1):
        for j in range(i + 2, n - 1):
            if i == 0 and j == n - 2:
                continue
            hit = segment_intersection(contour[i], contour[i + 1], contour[j], contour[j + 1])
            if hit is not None:
                issues.append(GeometryIssue(
                    type=IssueType.SELF_INTERSECTION,
                    severity=IssueSeverity.ERROR,
                    description="Contour intersects itself; calculations may be wrong",
                    location=hit,
                    suggested_fix="Check the extraction algorithm or the source model",
                ))
    return issues


def run_geometry_checks(profile: Profile) -> Tuple[List[GeometryIssue], Dict[str, float]]:
    """
    All geometry checks of one profile.

    Returns:
        (issues, metrics)
    """
    contour = profile.main_contour
    metrics: Dict[str, float] = {}

    issues = check_contour_closure(contour)
    if len(contour) < 3:
        return issues, metrics

    invalid = check_coordinates(contour)
    if invalid:
        return issues + invalid, metrics

    issues += check_dimensions(contour, metrics)
    issues += check_slopes(contour, metrics)
    issues += check_segment_lengths(contour)
    issues += check_self_intersection(contour)
    return issues, metrics
