"""
profile/models.py
=================
Data contracts for a dam cross-section and its validation state.

A section is split in two parts:

- ProfileGeometry: immutable geometry produced once by the external
  3D-to-2D projector (contours, foundation line, material zones).
- Profile: the geometry plus a mutable annotation record (feature points,
  boundary conditions, water levels, issues, validation status). Only
  feature identification and the validation engine write to it.

Every other module communicates through these types.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Any

from ..geometry.primitives import BoundingBox2D, Contour, Point2D, as_points
from ..geometry.properties import polygon_area, polygon_centroid


# ---------------------------------------------------------------------------
# Issues and status
# ---------------------------------------------------------------------------

class IssueSeverity(Enum):
    """
    Severity of a validation issue.

    Ordering is defined by an explicit rank table, not by declaration
    order: INFO < WARNING < ERROR < CRITICAL.
    """
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    IssueSeverity.INFO: 0,
    IssueSeverity.WARNING: 1,
    IssueSeverity.ERROR: 2,
    IssueSeverity.CRITICAL: 3,
}


class IssueType(Enum):
    OPEN_CONTOUR = "open_contour"
    INVALID_COORDINATES = "invalid_coordinates"
    SELF_INTERSECTION = "self_intersection"
    SEGMENT_LENGTH = "segment_length"
    INVALID_SLOPE = "invalid_slope"
    INVALID_DIMENSIONS = "invalid_dimensions"
    MISSING_FOUNDATION = "missing_foundation"
    MISSING_DRAINAGE_SYSTEM = "missing_drainage_system"
    MISSING_MATERIAL_ZONES = "missing_material_zones"
    MATERIAL_ZONE_OVERLAP = "material_zone_overlap"
    INVALID_MATERIAL = "invalid_material"
    WATER_LEVEL = "water_level"
    MISSING_BOUNDARY_CONDITION = "missing_boundary_condition"
    VALIDATION_FAILURE = "validation_failure"


class ValidationStatus(Enum):
    PENDING = "pending"
    USER_REVIEWING = "user_reviewing"
    NEEDS_ADJUSTMENT = "needs_adjustment"
    HAS_ISSUES = "has_issues"
    VALIDATED = "validated"
    CALCULATION_READY = "calculation_ready"


@dataclass(frozen=True)
class GeometryIssue:
    """
    One finding of the validation engine.

    Issues are never edited after creation; a profile's issue list only
    grows or is cleared as a whole.
    """
    type: IssueType
    severity: IssueSeverity
    description: str
    suggested_fix: str = ""
    location: Optional[Point2D] = None
    auto_fixable: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    discovered_at: datetime = field(default_factory=datetime.now)

    @property
    def is_blocking(self) -> bool:
        """Blocking issues must be resolved before calculation."""
        return self.severity >= IssueSeverity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type.value,
            'severity': self.severity.value,
            'description': self.description,
            'suggested_fix': self.suggested_fix,
            'location': self.location.as_tuple() if self.location else None,
            'auto_fixable': self.auto_fixable,
            'discovered_at': self.discovered_at.isoformat(),
        }


# ---------------------------------------------------------------------------
# Material
# ---------------------------------------------------------------------------

# Strength (MPa) and elastic modulus (GPa) per concrete grade
_CONCRETE_GRADES = {
    'C20': (20.0, 2.0, 25.5),
    'C25': (25.0, 2.5, 28.0),
    'C30': (30.0, 3.0, 30.0),
    'C35': (35.0, 3.5, 31.5),
    'C40': (40.0, 4.0, 32.5),
}


@dataclass(frozen=True)
class MaterialProperties:
    """
    Material properties of one zone.

    Attributes:
        name: Human-readable material name
        density: Unit weight in kN/m³
        elastic_modulus: Young's modulus in GPa
        poisson_ratio: Poisson ratio
        compressive_strength: Characteristic compressive strength in MPa
        tensile_strength: Characteristic tensile strength in MPa
        friction_coefficient: Concrete/rock friction coefficient
        grade: Concrete grade label
    """
    name: str = "C30 concrete"
    density: float = 24.0
    elastic_modulus: float = 30.0
    poisson_ratio: float = 0.18
    compressive_strength: float = 30.0
    tensile_strength: float = 3.0
    friction_coefficient: float = 0.75
    grade: str = "C30"

    def is_valid(self) -> bool:
        return (bool(self.name) and self.density > 0 and self.elastic_modulus > 0 and
                self.poisson_ratio > 0 and self.compressive_strength > 0 and
                self.tensile_strength > 0 and self.friction_coefficient > 0)

    def design_compressive_strength(self, safety_factor: float = 1.4) -> float:
        return self.compressive_strength / safety_factor

    @classmethod
    def standard_concrete(cls, grade: str = "C30") -> MaterialProperties:
        """Standard concrete for a grade; unknown grades get C30 values."""
        grade = grade.upper()
        fc, ft, e = _CONCRETE_GRADES.get(grade, _CONCRETE_GRADES['C30'])
        return cls(name=f"{grade} concrete", compressive_strength=fc,
                   tensile_strength=ft, elastic_modulus=e, grade=grade)


@dataclass(frozen=True)
class MaterialZone:
    """Named region of the section with its own material."""
    name: str
    boundary: Tuple[Point2D, ...]
    properties: MaterialProperties = field(default_factory=MaterialProperties)

    def __post_init__(self):
        object.__setattr__(self, 'boundary', as_points(self.boundary))

    @property
    def area(self) -> float:
        if len(self.boundary) < 3:
            return 0.0
        return polygon_area(self.boundary)

    @property
    def centroid(self) -> Point2D:
        if not self.boundary:
            return Point2D(0.0, 0.0)
        if self.area < 1e-6:
            return self.boundary[0]
        return polygon_centroid(self.boundary)

    @property
    def bounding_box(self) -> BoundingBox2D:
        return BoundingBox2D.from_points(self.boundary)


# ---------------------------------------------------------------------------
# Features and boundary conditions
# ---------------------------------------------------------------------------

class FeatureKind(Enum):
    UPSTREAM_HEEL = "upstream_heel"
    DOWNSTREAM_TOE = "downstream_toe"
    CREST_CENTER = "crest_center"
    DRAINAGE_SYSTEM = "drainage_system"
    GRAVITY_LOAD = "gravity_load"


@dataclass
class FeaturePoints:
    """
    Named feature points of a section.

    Well-known features are explicit fields; anything else goes into
    ``extra``.
    """
    upstream_heel: Optional[Point2D] = None
    downstream_toe: Optional[Point2D] = None
    crest_center: Optional[Point2D] = None
    drainage_system: Optional[Point2D] = None
    gravity_load: Optional[Point2D] = None
    slope_changes: List[Point2D] = field(default_factory=list)
    extra: Dict[str, Point2D] = field(default_factory=dict)

    def get(self, kind: FeatureKind) -> Optional[Point2D]:
        return getattr(self, kind.value)

    def set(self, kind: FeatureKind, point: Optional[Point2D]) -> None:
        setattr(self, kind.value, point)

    def has(self, kind: FeatureKind) -> bool:
        return self.get(kind) is not None


class BaseConstraint(Enum):
    FIXED = "fixed"
    VERTICAL_ONLY = "vertical_only"
    HORIZONTAL_ONLY = "horizontal_only"
    FREE = "free"


class BoundaryConditionKind(Enum):
    FOUNDATION = "foundation"
    UPSTREAM_PRESSURE = "upstream_pressure"
    DOWNSTREAM_PRESSURE = "downstream_pressure"
    UPLIFT = "uplift"


@dataclass(frozen=True)
class BoundaryCondition:
    """A constraint or pressure boundary applied along a line."""
    constraint: BaseConstraint = BaseConstraint.FIXED
    start: Optional[Point2D] = None
    end: Optional[Point2D] = None
    parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BoundaryConditions:
    """Boundary conditions keyed by kind, with an extension map."""
    foundation: Optional[BoundaryCondition] = None
    upstream_pressure: Optional[BoundaryCondition] = None
    downstream_pressure: Optional[BoundaryCondition] = None
    uplift: Optional[BoundaryCondition] = None
    extra: Dict[str, BoundaryCondition] = field(default_factory=dict)

    def get(self, kind: BoundaryConditionKind) -> Optional[BoundaryCondition]:
        return getattr(self, kind.value)

    def set(self, kind: BoundaryConditionKind, condition: Optional[BoundaryCondition]) -> None:
        setattr(self, kind.value, condition)

    def has(self, kind: BoundaryConditionKind) -> bool:
        return self.get(kind) is not None


@dataclass
class WaterLevels:
    """Reservoir and tailwater levels above the base (m)."""
    upstream: float = 0.0
    downstream: float = 0.0
    upstream_intersection: Optional[Point2D] = None
    downstream_intersection: Optional[Point2D] = None


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProfileGeometry:
    """
    Immutable geometry of one extracted section.

    Inner contours with fewer than three points cannot bound a hole and
    are dropped.
    """
    main_contour: Tuple[Point2D, ...]
    name: str = ""
    inner_contours: Tuple[Tuple[Point2D, ...], ...] = ()
    foundation_contour: Tuple[Point2D, ...] = ()
    material_zones: Tuple[MaterialZone, ...] = ()
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        object.__setattr__(self, 'main_contour', as_points(self.main_contour))
        holes = tuple(as_points(c) for c in self.inner_contours)
        object.__setattr__(self, 'inner_contours', tuple(c for c in holes if len(c) >= 3))
        object.__setattr__(self, 'foundation_contour', as_points(self.foundation_contour))
        object.__setattr__(self, 'material_zones', tuple(self.material_zones))

    def with_inner_contour(self, contour: Contour) -> ProfileGeometry:
        """Return a new geometry with one more hole; the receiver is unchanged."""
        return replace(self, inner_contours=self.inner_contours + (as_points(contour),),
                       id=str(uuid.uuid4()))

    @property
    def bounding_box(self) -> BoundingBox2D:
        return BoundingBox2D.from_points(self.main_contour)


class Profile:
    """
    A dam section ready for validation and analysis.

    Holds one immutable ProfileGeometry and the mutable annotation record
    keyed by the geometry's id. The geometry is never modified; the issue
    list is append-only and can only be cleared as a whole.

    Not safe for concurrent validation: callers serialise access to one
    Profile for the duration of a validation run.
    """

    def __init__(self, geometry: ProfileGeometry,
                 features: Optional[FeaturePoints] = None,
                 boundary_conditions: Optional[BoundaryConditions] = None,
                 water_levels: Optional[WaterLevels] = None):
        self._geometry = geometry
        self.features = features if features is not None else FeaturePoints()
        self.boundary_conditions = (boundary_conditions if boundary_conditions is not None
                                    else BoundaryConditions())
        self.water_levels = water_levels if water_levels is not None else WaterLevels()
        self._issues: List[GeometryIssue] = []
        self.status = ValidationStatus.PENDING

    @classmethod
    def from_points(cls, main_contour, name: str = "", **kwargs) -> Profile:
        """Build a profile from raw (x, y) pairs.

        Geometry keywords (inner_contours, foundation_contour, material_zones)
        go to ProfileGeometry; features, boundary_conditions and
        water_levels go to the annotation record.
        """
        geometry_keys = ('inner_contours', 'foundation_contour', 'material_zones')
        geometry_kwargs = {k: kwargs.pop(k) for k in geometry_keys if k in kwargs}
        geometry = ProfileGeometry(main_contour=main_contour, name=name, **geometry_kwargs)
        return cls(geometry, **kwargs)

    # Geometry delegation

    @property
    def geometry(self) -> ProfileGeometry:
        return self._geometry

    @property
    def id(self) -> str:
        return self._geometry.id

    @property
    def name(self) -> str:
        return self._geometry.name

    @property
    def main_contour(self) -> Tuple[Point2D, ...]:
        return self._geometry.main_contour

    @property
    def inner_contours(self) -> Tuple[Tuple[Point2D, ...], ...]:
        return self._geometry.inner_contours

    @property
    def foundation_contour(self) -> Tuple[Point2D, ...]:
        return self._geometry.foundation_contour

    @property
    def material_zones(self) -> Tuple[MaterialZone, ...]:
        return self._geometry.material_zones

    # Issues and status

    @property
    def issues(self) -> Tuple[GeometryIssue, ...]:
        return tuple(self._issues)

    def add_issue(self, issue: GeometryIssue) -> None:
        """Append an issue; a blocking issue flags a pending profile."""
        self._issues.append(issue)
        if issue.is_blocking and self.status == ValidationStatus.PENDING:
            self.status = ValidationStatus.HAS_ISSUES

    def clear_issues(self) -> None:
        self._issues.clear()
        if self.status == ValidationStatus.HAS_ISSUES:
            self.status = ValidationStatus.PENDING

    def issues_by_type(self, issue_type: IssueType) -> List[GeometryIssue]:
        return [i for i in self._issues if i.type == issue_type]

    def issues_by_severity(self, severity: IssueSeverity) -> List[GeometryIssue]:
        return [i for i in self._issues if i.severity == severity]

    @property
    def has_critical_issues(self) -> bool:
        return any(i.severity >= IssueSeverity.CRITICAL for i in self._issues)

    @property
    def has_blocking_issues(self) -> bool:
        return any(i.is_blocking for i in self._issues)

    @property
    def requires_user_review(self) -> bool:
        return self.has_blocking_issues

    @property
    def is_validation_passed(self) -> bool:
        return self.status in (ValidationStatus.VALIDATED, ValidationStatus.CALCULATION_READY)

    def __repr__(self) -> str:
        return (f"Profile(name={self.name!r}, points={len(self.main_contour)}, "
                f"issues={len(self._issues)}, status={self.status.value})")
