"""Geometry, engineering and boundary condition validation of a dam section."""

from .engine import validate_profile
from .results import (
    BoundaryConditionValidationResult,
    EngineeringValidationResult,
    GeometryValidationResult,
    ProfileValidationResult,
)

__all__ = [
    "validate_profile",
    "BoundaryConditionValidationResult",
    "EngineeringValidationResult",
    "GeometryValidationResult",
    "ProfileValidationResult",
]
