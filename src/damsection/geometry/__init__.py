# Planar geometry for dam cross-sections
#
# Primitives (points, vectors, bounding boxes) and the closed-form polygon
# formulas behind the section properties: area, centroid, widths and
# second moments of area.

from .primitives import (
    Point2D,
    Vector2D,
    BoundingBox2D,
    GEOMETRIC_TOLERANCE,
    LEVEL_TOLERANCE,
)

from .properties import (
    GeometricProperties,
    compute_geometric_properties,
    polygon_area,
    polygon_centroid,
    signed_area,
    base_width,
    top_width,
    second_moments,
)

__all__ = [
    # Primitives
    'Point2D',
    'Vector2D',
    'BoundingBox2D',
    'GEOMETRIC_TOLERANCE',
    'LEVEL_TOLERANCE',
    # Section properties
    'GeometricProperties',
    'compute_geometric_properties',
    'polygon_area',
    'polygon_centroid',
    'signed_area',
    'base_width',
    'top_width',
    'second_moments',
]
