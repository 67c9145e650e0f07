"""
Section property calculations for a polygonal cross-section.

This module provides the closed-form polygon formulas used by the load
analyzer and the validation passes: shoelace area, first-moment centroid,
bounding dimensions, base/crest width and second moments of area.

All functions take a contour (sequence of Point2D, implicitly closed) and
reject contours with fewer than three points or non-finite coordinates.
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Dict, Any, Sequence, Tuple

import numpy as np

from ..errors import InputError
from .primitives import (
    BoundingBox2D, Contour, Point2D, LEVEL_TOLERANCE, to_array
)

logger = logging.getLogger(__name__)


def _all_finite(arr: np.ndarray) -> bool:
    return bool(np.all(np.isfinite(arr)))


def has_finite_coordinates(contour: Contour) -> bool:
    """True when every vertex coordinate is a finite number."""
    return _all_finite(to_array(contour))


def ensure_contour(contour: Contour, name: str = "contour") -> np.ndarray:
    """
    Check a contour and return its coordinates as an (n, 2) array.

    Raises:
        InputError: fewer than 3 points or any non-finite coordinate
    """
    if contour is None or len(contour) < 3:
        count = 0 if contour is None else len(contour)
        raise InputError(f"{name} needs at least 3 points, got {count}")
    arr = to_array(contour)
    if not _all_finite(arr):
        raise InputError(f"{name} contains non-finite coordinates")
    return arr


def _edges(arr: np.ndarray):
    """Split vertices into (x, y, x_next, y_next, cross) with wrap-around."""
    x = arr[:, 0]
    y = arr[:, 1]
    xn = np.roll(x, -1)
    yn = np.roll(y, -1)
    cross = x * yn - xn * y
    return x, y, xn, yn, cross


def signed_area(contour: Contour) -> float:
    """Shoelace area keeping orientation (positive = counter-clockwise)."""
    arr = ensure_contour(contour)
    *_, cross = _edges(arr)
    return float(cross.sum() / 2.0)


def polygon_area(contour: Contour) -> float:
    """Shoelace area, absolute value (m²)."""
    return abs(signed_area(contour))


def net_area(main_contour: Contour, inner_contours: Sequence[Contour] = ()) -> float:
    """Main contour area minus the area of every hole."""
    return polygon_area(main_contour) - sum(polygon_area(c) for c in inner_contours)


def polygon_centroid(contour: Contour) -> Point2D:
    """
    Centroid from the first moments of area.

    The edge accumulators are divided by 6 x the *signed* area so the
    result is correct for either vertex orientation. A zero-area contour
    has no centroid; the first vertex is returned and a warning logged.
    """
    arr = ensure_contour(contour)
    x, y, xn, yn, cross = _edges(arr)
    area = cross.sum() / 2.0

    if abs(area) < 1e-12:
        logger.warning("Degenerate contour with zero area; using first vertex as centroid")
        return Point2D(float(x[0]), float(y[0]))

    cx = ((x + xn) * cross).sum() / (6.0 * area)
    cy = ((y + yn) * cross).sum() / (6.0 * area)
    return Point2D(float(cx), float(cy))


def composite_centroid(main_contour: Contour,
                       inner_contours: Sequence[Contour] = ()) -> Point2D:
    """Centroid of the main contour with the holes removed."""
    main_centroid = polygon_centroid(main_contour)
    if not inner_contours:
        return main_centroid

    total = polygon_area(main_contour)
    mx = total * main_centroid.x
    my = total * main_centroid.y
    for hole in inner_contours:
        a = polygon_area(hole)
        c = polygon_centroid(hole)
        total -= a
        mx -= a * c.x
        my -= a * c.y

    if total <= 0:
        logger.warning("Holes consume the whole section; using main contour centroid")
        return main_centroid
    return Point2D(mx / total, my / total)


def bounding_box(contour: Contour) -> BoundingBox2D:
    """Axis-aligned bounds of all contour vertices."""
    arr = ensure_contour(contour)
    mins = arr.min(axis=0)
    maxs = arr.max(axis=0)
    return BoundingBox2D(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def _level_width(arr: np.ndarray, level: float, tolerance: float) -> float:
    on_level = arr[np.abs(arr[:, 1] - level) < tolerance]
    if len(on_level) < 2:
        return 0.0
    return float(on_level[:, 0].max() - on_level[:, 0].min())


def base_width(contour: Contour, tolerance: float = LEVEL_TOLERANCE) -> float:
    """Width of the vertices lying on the lowest Y level (dam base)."""
    arr = ensure_contour(contour)
    return _level_width(arr, arr[:, 1].min(), tolerance)


def top_width(contour: Contour, tolerance: float = LEVEL_TOLERANCE) -> float:
    """Width of the vertices lying on the highest Y level (dam crest)."""
    arr = ensure_contour(contour)
    return _level_width(arr, arr[:, 1].max(), tolerance)


def downstream_toe(contour: Contour, tolerance: float = LEVEL_TOLERANCE) -> Point2D:
    """Rightmost vertex on the base line: the overturning rotation point."""
    arr = ensure_contour(contour)
    base = arr[np.abs(arr[:, 1] - arr[:, 1].min()) < tolerance]
    idx = int(np.argmax(base[:, 0]))
    return Point2D(float(base[idx, 0]), float(base[idx, 1]))


def second_moments(contour: Contour) -> Tuple[float, float, float]:
    """
    Second moments of area about the coordinate axes.

    Ixx = Σ (yi² + yi·yi+1 + yi+1²)·ci / 12
    Iyy = Σ (xi² + xi·xi+1 + xi+1²)·ci / 12
    Ixy = Σ (xi·yi+1 + 2xi·yi + 2xi+1·yi+1 + xi+1·yi)·ci / 24

    where ci is the edge cross product. Reported as absolute values (m⁴).
    """
    arr = ensure_contour(contour)
    x, y, xn, yn, cross = _edges(arr)

    ixx = ((y * y + y * yn + yn * yn) * cross).sum() / 12.0
    iyy = ((x * x + x * xn + xn * xn) * cross).sum() / 12.0
    ixy = ((x * yn + 2 * x * y + 2 * xn * yn + xn * y) * cross).sum() / 24.0

    return abs(float(ixx)), abs(float(iyy)), abs(float(ixy))


@dataclass(frozen=True)
class GeometricProperties:
    """Derived section properties of one profile (per metre of dam length)."""
    area: float
    centroid: Point2D
    width: float
    height: float
    base_width: float
    top_width: float
    moment_of_inertia_x: float
    moment_of_inertia_y: float
    product_of_inertia: float
    base_level: float
    toe: Point2D

    @property
    def centroid_height(self) -> float:
        """Centroid elevation above the base (m)."""
        return self.centroid.y - self.base_level

    @property
    def toe_lever_arm(self) -> float:
        """
        Lever arm of the self-weight about the downstream toe (m).

        Positive while the centroid lies upstream of the toe; a centroid
        beyond the toe gives a negative arm and so a negative resisting
        moment.
        """
        return self.toe.x - self.centroid.x

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['centroid'] = self.centroid.as_tuple()
        data['toe'] = self.toe.as_tuple()
        return data


def compute_geometric_properties(main_contour: Contour,
                                 inner_contours: Sequence[Contour] = ()) -> GeometricProperties:
    """
    Compute every section property the stability analysis needs.

    Args:
        main_contour: Outer boundary of the section
        inner_contours: Holes (galleries, shafts) subtracted from the area

    Returns:
        GeometricProperties snapshot
    """
    bbox = bounding_box(main_contour)
    area = net_area(main_contour, inner_contours)
    if area <= 0 or not math.isfinite(area):
        logger.warning("Section has non-positive net area (%.4f m²)", area)

    ixx, iyy, ixy = second_moments(main_contour)

    return GeometricProperties(
        area=area,
        centroid=composite_centroid(main_contour, inner_contours),
        width=bbox.width,
        height=bbox.height,
        base_width=base_width(main_contour),
        top_width=top_width(main_contour),
        moment_of_inertia_x=ixx,
        moment_of_inertia_y=iyy,
        product_of_inertia=ixy,
        base_level=bbox.min_y,
        toe=downstream_toe(main_contour),
    )
