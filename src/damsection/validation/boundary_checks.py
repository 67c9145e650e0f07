"""
Boundary condition checks.

Besides issues, this pass records the names of conditions a calculation
would need but the profile does not define.
"""

from typing import List, Tuple

from ..profile.models import (
    BoundaryConditionKind, FeatureKind, GeometryIssue, IssueSeverity, IssueType, Profile
)

UPSTREAM_WATER_LEVEL = "upstream water level"
FOUNDATION_CONSTRAINT = "foundation constraint"
SELF_WEIGHT = "structural self-weight"
HYDROSTATIC_LOAD = "hydrostatic load"
MATERIAL_PARAMETERS = "material parameters"


def check_water_levels(profile: Profile, missing: List[str]) -> List[GeometryIssue]:
    upstream = profile.water_levels.upstream
    downstream = profile.water_levels.downstream
    issues = []

    if upstream <= 0:
        issues.append(GeometryIssue(
            type=IssueType.WATER_LEVEL,
            severity=IssueSeverity.WARNING,
            description="Upstream water level is not set or not reasonable",
            suggested_fix="Set a reasonable upstream water level",
            auto_fixable=True,
        ))
        missing.append(UPSTREAM_WATER_LEVEL)

    if downstream < 0:
        issues.append(GeometryIssue(
            type=IssueType.WATER_LEVEL,
            severity=IssueSeverity.INFO,
            description="Downstream water level is not set; no tailwater will be assumed",
            suggested_fix="Set the downstream water level if there is tailwater",
            auto_fixable=True,
        ))

    if upstream > 0 and downstream > 0 and upstream <= downstream:
        issues.append(GeometryIssue(
            type=IssueType.WATER_LEVEL,
            severity=IssueSeverity.ERROR,
            description=(f"Upstream water level {upstream:.2f}m must be above "
                         f"downstream level {downstream:.2f}m"),
            suggested_fix="Check the water level settings",
        ))
    return issues


def check_foundation_constraint(profile: Profile, missing: List[str]) -> List[GeometryIssue]:
    if profile.boundary_conditions.has(BoundaryConditionKind.FOUNDATION):
        return []
    missing.append(FOUNDATION_CONSTRAINT)
    return [GeometryIssue(
        type=IssueType.MISSING_BOUNDARY_CONDITION,
        severity=IssueSeverity.WARNING,
        description="No foundation constraint defined",
        suggested_fix="Set the foundation constraint type (fixed, normal-only or elastic)",
        auto_fixable=True,
    )]


def check_load_conditions(profile: Profile, missing: List[str]) -> List[GeometryIssue]:
    """Self-weight needs a gravity load feature, water load an upstream level."""
    if not profile.features.has(FeatureKind.GRAVITY_LOAD):
        missing.append(SELF_WEIGHT)
    if profile.water_levels.upstream <= 0:
        missing.append(HYDROSTATIC_LOAD)
    return []


def check_material_parameters(profile: Profile, missing: List[str]) -> List[GeometryIssue]:
    zones = profile.material_zones
    if not zones:
        missing.append(MATERIAL_PARAMETERS)
        return []

    issues = []
    for zone in zones:
        bad = []
        if zone.properties.density <= 0:
            bad.append("density")
        if zone.properties.elastic_modulus <= 0:
            bad.append("elastic modulus")
        if bad:
            issues.append(GeometryIssue(
                type=IssueType.INVALID_MATERIAL,
                severity=IssueSeverity.WARNING,
                description=f"Material zone '{zone.name}' has invalid {' and '.join(bad)}",
                suggested_fix="Set the density and elastic modulus of the zone material",
                auto_fixable=True,
            ))
    return issues


def run_boundary_checks(profile: Profile) -> Tuple[List[GeometryIssue], List[str]]:
    """
    All boundary condition checks of one profile.

    Returns:
        (issues, missing condition names)
    """
    missing: List[str] = []
    issues = []
    issues += check_water_levels(profile, missing)
    issues += check_foundation_constraint(profile, missing)
    issues += check_load_conditions(profile, missing)
    issues += check_material_parameters(profile, missing)
    return issues, missing
