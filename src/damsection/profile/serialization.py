"""
Build profiles from plain dicts and render them back.

The dict layout mirrors the JSON artifacts produced by the section
projector:

    {
      "name": "Section 0+120",
      "main_contour": [[0, 0], [0, 50], ...],
      "inner_contours": [[[...], ...]],
      "foundation_contour": [[-5, 0], [30, 0]],
      "material_zones": [{"name": "core", "boundary": [...],
                          "properties": {"density": 24.0, ...}}],
      "water_levels": {"upstream": 40.0, "downstream": 5.0},
      "features": {"drainage_system": [4, 2], "extra": {"gallery": [5, 5]}},
      "boundary_conditions": {"foundation": {"constraint": "fixed"}}
    }
"""

import logging
from dataclasses import replace
from typing import Dict, Any, Optional

from ..errors import InputError
from ..geometry.primitives import Point2D, as_points
from .models import (
    BaseConstraint, BoundaryCondition, BoundaryConditionKind, BoundaryConditions,
    FeatureKind, FeaturePoints, MaterialProperties, MaterialZone, Profile,
    ProfileGeometry, WaterLevels,
)

logger = logging.getLogger(__name__)

_MATERIAL_FIELDS = (
    'name', 'density', 'elastic_modulus', 'poisson_ratio', 'compressive_strength',
    'tensile_strength', 'friction_coefficient', 'grade',
)


def _point(raw) -> Optional[Point2D]:
    if raw is None:
        return None
    return as_points([raw])[0]


def material_from_dict(data: Dict[str, Any]) -> MaterialProperties:
    """
    Material from a dict.

    A 'grade' selects the standard concrete of that grade; any other
    field given overrides the grade value.
    """
    overrides = {k: data[k] for k in _MATERIAL_FIELDS if k in data and k != 'grade'}
    if 'grade' in data:
        return replace(MaterialProperties.standard_concrete(data['grade']), **overrides)
    return MaterialProperties(**overrides)


def _boundary_condition_from_dict(data: Dict[str, Any]) -> BoundaryCondition:
    return BoundaryCondition(
        constraint=BaseConstraint(data.get('constraint', 'fixed')),
        start=_point(data.get('start')),
        end=_point(data.get('end')),
        parameters=dict(data.get('parameters', {})),
    )


def _zones_from_list(raw_zones) -> tuple:
    """Material zones; a zone bounded by fewer than 3 points is dropped."""
    zones = []
    for i, z in enumerate(raw_zones):
        zone = MaterialZone(
            name=z.get('name', f"zone_{i + 1}"),
            boundary=z.get('boundary', ()),
            properties=material_from_dict(z.get('properties', {})),
        )
        if len(zone.boundary) < 3:
            logger.warning("Dropping material zone %r: boundary has %d points",
                           zone.name, len(zone.boundary))
            continue
        zones.append(zone)
    return tuple(zones)


def profile_from_dict(data: Dict[str, Any]) -> Profile:
    """
    Create a Profile from its dict form. Unknown keys are ignored.

    Raises:
        InputError: a value has the wrong shape or type
    """
    try:
        return _build_profile(data)
    except InputError:
        raise
    except (AttributeError, TypeError, ValueError) as exc:
        raise InputError(f"Malformed profile data: {exc}") from exc


def _build_profile(data: Dict[str, Any]) -> Profile:
    zones = _zones_from_list(data.get('material_zones', []))

    geometry = ProfileGeometry(
        main_contour=data.get('main_contour', ()),
        name=data.get('name', ''),
        inner_contours=data.get('inner_contours', ()),
        foundation_contour=data.get('foundation_contour', ()),
        material_zones=zones,
    )

    features = FeaturePoints()
    raw_features = data.get('features', {})
    for kind in FeatureKind:
        if kind.value in raw_features:
            features.set(kind, _point(raw_features[kind.value]))
    features.slope_changes = [_point(p) for p in raw_features.get('slope_changes', [])]
    features.extra = {k: _point(v) for k, v in raw_features.get('extra', {}).items()}

    conditions = BoundaryConditions()
    raw_conditions = data.get('boundary_conditions', {})
    for kind in BoundaryConditionKind:
        if kind.value in raw_conditions:
            conditions.set(kind, _boundary_condition_from_dict(raw_conditions[kind.value]))
    conditions.extra = {k: _boundary_condition_from_dict(v)
                        for k, v in raw_conditions.get('extra', {}).items()}

    raw_levels = data.get('water_levels', {})
    levels = WaterLevels(
        upstream=float(raw_levels.get('upstream', 0.0)),
        downstream=float(raw_levels.get('downstream', 0.0)),
    )

    return Profile(geometry, features=features, boundary_conditions=conditions,
                   water_levels=levels)


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    """Dict form of a profile's inputs (issues and status excluded)."""
    def points(seq):
        return [list(p.as_tuple()) for p in seq]

    def condition(bc: BoundaryCondition):
        return {
            'constraint': bc.constraint.value,
            'start': list(bc.start.as_tuple()) if bc.start else None,
            'end': list(bc.end.as_tuple()) if bc.end else None,
            'parameters': dict(bc.parameters),
        }

    features = {}
    for kind in FeatureKind:
        point = profile.features.get(kind)
        if point is not None:
            features[kind.value] = list(point.as_tuple())
    features['slope_changes'] = points(profile.features.slope_changes)
    features['extra'] = {k: list(v.as_tuple()) for k, v in profile.features.extra.items()}

    conditions = {}
    for kind in BoundaryConditionKind:
        bc = profile.boundary_conditions.get(kind)
        if bc is not None:
            conditions[kind.value] = condition(bc)
    conditions['extra'] = {k: condition(v) for k, v in profile.boundary_conditions.extra.items()}

    return {
        'id': profile.id,
        'name': profile.name,
        'main_contour': points(profile.main_contour),
        'inner_contours': [points(c) for c in profile.inner_contours],
        'foundation_contour': points(profile.foundation_contour),
        'material_zones': [
            {
                'name': z.name,
                'boundary': points(z.boundary),
                'properties': {k: getattr(z.properties, k) for k in _MATERIAL_FIELDS},
            }
            for z in profile.material_zones
        ],
        'water_levels': {
            'upstream': profile.water_levels.upstream,
            'downstream': profile.water_levels.downstream,
        },
        'features': features,
        'boundary_conditions': conditions,
    }
