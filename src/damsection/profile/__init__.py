"""Dam section profiles: data model, feature identification and dict serialization."""

from .models import (
    BaseConstraint,
    BoundaryCondition,
    BoundaryConditionKind,
    BoundaryConditions,
    FeatureKind,
    FeaturePoints,
    GeometryIssue,
    IssueSeverity,
    IssueType,
    MaterialProperties,
    MaterialZone,
    Profile,
    ProfileGeometry,
    ValidationStatus,
    WaterLevels,
)
from .features import identify_geometric_features
from .serialization import profile_from_dict, profile_to_dict

__all__ = [
    'BaseConstraint',
    'BoundaryCondition',
    'BoundaryConditionKind',
    'BoundaryConditions',
    'FeatureKind',
    'FeaturePoints',
    'GeometryIssue',
    'IssueSeverity',
    'IssueType',
    'MaterialProperties',
    'MaterialZone',
    'Profile',
    'ProfileGeometry',
    'ValidationStatus',
    'WaterLevels',
    'identify_geometric_features',
    'profile_from_dict',
    'profile_to_dict',
]
