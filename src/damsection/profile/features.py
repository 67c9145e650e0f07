"""
Feature point identification for dam sections.

Locates the upstream heel, downstream toe, crest center and the vertices
where the face slope changes. Results are written to the profile's
FeaturePoints; the geometry itself is never touched.
"""

import logging
import math
from typing import List, Sequence

from ..geometry.primitives import Point2D
from .models import FeatureKind, Profile

logger = logging.getLogger(__name__)

# Direction change between consecutive edges that marks a slope change (degrees)
SLOPE_CHANGE_THRESHOLD_DEG = 15.0

# Vertices within this distance of the highest point belong to the crest (m)
CREST_TOLERANCE = 0.1


def find_upstream_heel(contour: Sequence[Point2D]) -> Point2D:
    """Lowest of the leftmost vertices."""
    return min(contour, key=lambda p: (p.x, p.y))


def find_downstream_toe(contour: Sequence[Point2D]) -> Point2D:
    """Lowest of the rightmost vertices."""
    return min(contour, key=lambda p: (-p.x, p.y))


def find_crest_center(contour: Sequence[Point2D]) -> Point2D:
    max_y = max(p.y for p in contour)
    crest = [p for p in contour if abs(p.y - max_y) < CREST_TOLERANCE]
    avg_x = sum(p.x for p in crest) / len(crest)
    return Point2D(avg_x, max_y)


def find_slope_changes(contour: Sequence[Point2D],
                       threshold_deg: float = SLOPE_CHANGE_THRESHOLD_DEG) -> List[Point2D]:
    """
    Interior vertices where the boundary turns by more than threshold_deg.

    Zero-length edges have no direction and are skipped.
    """
    changes = []
    for i in range(1, len(contour) - 1):
        p1, p2, p3 = contour[i - 1], contour[i], contour[i + 1]
        if p1 == p2 or p2 == p3:
            continue
        angle1 = math.atan2(p2.y - p1.y, p2.x - p1.x)
        angle2 = math.atan2(p3.y - p2.y, p3.x - p2.x)
        diff = angle2 - angle1
        # wrap to [-pi, pi]
        diff = (diff + math.pi) % (2 * math.pi) - math.pi
        if abs(math.degrees(diff)) > threshold_deg:
            changes.append(p2)
    return changes


def identify_geometric_features(profile: Profile) -> None:
    """
    Populate heel, toe, crest center and slope-change points of a profile.

    Drainage and gravity-load features are supplied by the caller and are
    left untouched. A failure here never propagates: feature points are
    an aid to validation, not a prerequisite.
    """
    contour = profile.main_contour
    if not contour:
        return

    try:
        features = profile.features
        features.set(FeatureKind.UPSTREAM_HEEL, find_upstream_heel(contour))
        features.set(FeatureKind.DOWNSTREAM_TOE, find_downstream_toe(contour))
        features.set(FeatureKind.CREST_CENTER, find_crest_center(contour))
        features.slope_changes = find_slope_changes(contour)
    except (ValueError, ZeroDivisionError, TypeError) as e:
        logger.warning("Feature identification failed for %s: %s", profile.name, e)
        return

    logger.debug("Identified %d slope changes on %s",
                 len(profile.features.slope_changes), profile.name)
