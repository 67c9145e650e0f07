"""Run all validation passes on a profile."""

import logging
from typing import Callable, List, Tuple

from ..profile.models import GeometryIssue, IssueSeverity, IssueType, Profile
from .boundary_checks import run_boundary_checks
from .engineering_checks import APPLICABLE_STANDARDS, run_engineering_checks
from .geometry_checks import run_geometry_checks
from .results import (
    BoundaryConditionValidationResult,
    EngineeringValidationResult,
    GeometryValidationResult,
    ProfileValidationResult,
)

logger = logging.getLogger(__name__)


def _failure_issue(pass_name: str, exc: Exception) -> GeometryIssue:
    return GeometryIssue(
        type=IssueType.VALIDATION_FAILURE,
        severity=IssueSeverity.CRITICAL,
        description=f"{pass_name} validation failed: {exc}",
        suggested_fix="Check the completeness of the section data",
    )


def _run_pass(pass_name: str, check: Callable, profile: Profile) -> Tuple[bool, object]:
    """Run one pass; a failure is logged and reported as (False, issue)."""
    try:
        return True, check(profile)
    except Exception as exc:
        logger.exception("%s validation failed for profile %s", pass_name, profile.id)
        return False, _failure_issue(pass_name, exc)


def validate_geometry(profile: Profile) -> GeometryValidationResult:
    ok, outcome = _run_pass("Geometry", run_geometry_checks, profile)
    if not ok:
        return GeometryValidationResult.from_issues([outcome])
    issues, metrics = outcome
    return GeometryValidationResult.from_issues(issues, metrics)


def validate_engineering(profile: Profile) -> EngineeringValidationResult:
    ok, outcome = _run_pass("Engineering", run_engineering_checks, profile)
    issues = outcome if ok else [outcome]
    return EngineeringValidationResult.from_issues(issues, APPLICABLE_STANDARDS)


def validate_boundary_conditions(profile: Profile) -> BoundaryConditionValidationResult:
    ok, outcome = _run_pass("Boundary condition", run_boundary_checks, profile)
    if not ok:
        return BoundaryConditionValidationResult.from_issues([outcome])
    issues, missing = outcome
    return BoundaryConditionValidationResult.from_issues(issues, missing)


def validate_profile(profile: Profile) -> ProfileValidationResult:
    """
    Validate geometry, engineering rules and boundary conditions.

    Each pass runs on its own: an exception inside one pass becomes a
    single critical issue and the other passes still run. All issues are
    appended to the profile and its status is set from the overall result.

    Args:
        profile: Section to validate (callers serialise access to it)

    Returns:
        ProfileValidationResult snapshot
    """
    logger.info("Validating profile %s", profile.name or profile.id)

    geometry = validate_geometry(profile)
    logger.debug("Geometry pass: %d issues, score %.3f", len(geometry.issues), geometry.score)

    engineering = validate_engineering(profile)
    logger.debug("Engineering pass: %d issues, score %.3f",
                 len(engineering.issues), engineering.score)

    boundary = validate_boundary_conditions(profile)
    logger.debug("Boundary pass: %d issues, %d missing conditions, score %.3f",
                 len(boundary.issues), len(boundary.missing_conditions), boundary.score)

    result = ProfileValidationResult.combine(geometry, engineering, boundary,
                                             profile_id=profile.id)

    issues: List[GeometryIssue] = result.all_issues()
    for issue in issues:
        profile.add_issue(issue)
    profile.status = result.overall_status

    logger.info("Validation complete: status=%s, score=%.3f, %d issues",
                profile.status.value, result.overall_score, len(issues))
    return result
