"""
Validation result types and scoring.

Each pass starts at a score of 1.0 and loses a severity-keyed penalty per
issue, floored at 0. The geometry and engineering passes use
different penalty tables; the boundary pass scores missing conditions.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, List, Sequence, Tuple

from ..profile.models import GeometryIssue, IssueSeverity, ValidationStatus
from .. import report

GEOMETRY_SEVERITY_PENALTIES = {
    IssueSeverity.CRITICAL: 0.5,
    IssueSeverity.ERROR: 0.2,
    IssueSeverity.WARNING: 0.1,
    IssueSeverity.INFO: 0.02,
}

ENGINEERING_SEVERITY_PENALTIES = {
    IssueSeverity.CRITICAL: 0.4,
    IssueSeverity.ERROR: 0.15,
    IssueSeverity.WARNING: 0.08,
    IssueSeverity.INFO: 0.02,
}

MISSING_CONDITION_PENALTY = 0.2
BOUNDARY_BLOCKING_PENALTY = 0.1

# Pass weights in the overall score
GEOMETRY_WEIGHT = 0.4
ENGINEERING_WEIGHT = 0.4
BOUNDARY_WEIGHT = 0.2

CALCULATION_READY_SCORE = 0.9
VALIDATED_SCORE = 0.7
USER_REVIEW_SCORE = 0.8


def severity_score(issues: Sequence[GeometryIssue], penalties: Dict[IssueSeverity, float]) -> float:
    score = 1.0
    for issue in issues:
        score -= penalties[issue.severity]
    return max(0.0, score)


def completeness_score(missing_count: int, issues: Sequence[GeometryIssue]) -> float:
    score = 1.0 - missing_count * MISSING_CONDITION_PENALTY
    score -= BOUNDARY_BLOCKING_PENALTY * sum(1 for i in issues if i.is_blocking)
    return max(0.0, score)


@dataclass(frozen=True)
class PassResult:
    """Issues and score of one validation pass."""
    issues: Tuple[GeometryIssue, ...] = ()
    score: float = 1.0

    @property
    def passed_validation(self) -> bool:
        return not any(i.is_blocking for i in self.issues)

    @property
    def has_critical_issues(self) -> bool:
        return any(i.severity >= IssueSeverity.CRITICAL for i in self.issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': round(self.score, 4),
            'passed': self.passed_validation,
            'issues': [i.to_dict() for i in self.issues],
        }


@dataclass(frozen=True)
class GeometryValidationResult(PassResult):
    metrics: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_issues(cls, issues, metrics=None):
        issues = tuple(issues)
        return cls(issues=issues, score=severity_score(issues, GEOMETRY_SEVERITY_PENALTIES),
                   metrics=dict(metrics or {}))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['metrics'] = dict(self.metrics)
        return data


@dataclass(frozen=True)
class EngineeringValidationResult(PassResult):
    applicable_standards: Tuple[str, ...] = ()

    @classmethod
    def from_issues(cls, issues, applicable_standards=()):
        issues = tuple(issues)
        return cls(issues=issues, score=severity_score(issues, ENGINEERING_SEVERITY_PENALTIES),
                   applicable_standards=tuple(applicable_standards))

    @property
    def standards_compliant(self) -> bool:
        return self.passed_validation

    @property
    def requires_engineer_review(self) -> bool:
        return any(i.severity >= IssueSeverity.WARNING for i in self.issues)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['applicable_standards'] = list(self.applicable_standards)
        data['requires_engineer_review'] = self.requires_engineer_review
        return data


@dataclass(frozen=True)
class BoundaryConditionValidationResult(PassResult):
    missing_conditions: Tuple[str, ...] = ()

    @classmethod
    def from_issues(cls, issues, missing_conditions=()):
        issues = tuple(issues)
        missing = tuple(missing_conditions)
        return cls(issues=issues, score=completeness_score(len(missing), issues),
                   missing_conditions=missing)

    @property
    def conditions_complete(self) -> bool:
        return not self.missing_conditions and self.passed_validation

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['missing_conditions'] = list(self.missing_conditions)
        data['complete'] = self.conditions_complete
        return data


def overall_score(geometry: PassResult, engineering: PassResult, boundary: PassResult) -> float:
    return (GEOMETRY_WEIGHT * geometry.score +
            ENGINEERING_WEIGHT * engineering.score +
            BOUNDARY_WEIGHT * boundary.score)


def determine_status(issues: Sequence[GeometryIssue], score: float) -> ValidationStatus:
    """
    Readiness state from all issues and the overall score.

    Critical issues dominate, then any warning or worse, then the score
    thresholds.
    """
    if any(i.severity >= IssueSeverity.CRITICAL for i in issues):
        return ValidationStatus.HAS_ISSUES
    if any(i.severity >= IssueSeverity.WARNING for i in issues):
        return ValidationStatus.NEEDS_ADJUSTMENT
    if score >= CALCULATION_READY_SCORE:
        return ValidationStatus.CALCULATION_READY
    if score >= VALIDATED_SCORE:
        return ValidationStatus.VALIDATED
    return ValidationStatus.PENDING


@dataclass(frozen=True)
class ProfileValidationResult:
    """Immutable snapshot of a full three-pass validation run."""
    geometry: GeometryValidationResult
    engineering: EngineeringValidationResult
    boundary_conditions: BoundaryConditionValidationResult
    profile_id: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    validated_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def combine(cls, geometry, engineering, boundary_conditions, profile_id=""):
        return cls(geometry=geometry, engineering=engineering,
                   boundary_conditions=boundary_conditions, profile_id=profile_id)

    @property
    def overall_score(self) -> float:
        return overall_score(self.geometry, self.engineering, self.boundary_conditions)

    @property
    def overall_status(self) -> ValidationStatus:
        return determine_status(self.all_issues(), self.overall_score)

    @property
    def passed(self) -> bool:
        """Validated or ready for calculation."""
        return self.overall_status in (ValidationStatus.VALIDATED,
                                       ValidationStatus.CALCULATION_READY)

    def all_issues(self) -> List[GeometryIssue]:
        return (list(self.geometry.issues) + list(self.engineering.issues) +
                list(self.boundary_conditions.issues))

    @property
    def has_critical_issues(self) -> bool:
        return any(i.severity >= IssueSeverity.CRITICAL for i in self.all_issues())

    @property
    def has_blocking_issues(self) -> bool:
        return any(i.is_blocking for i in self.all_issues())

    @property
    def requires_user_review(self) -> bool:
        return (self.has_blocking_issues or
                self.engineering.requires_engineer_review or
                self.overall_score < USER_REVIEW_SCORE)

    def generate_report(self) -> str:
        return report.format_validation_report(self)

    def to_dict(self) -> Dict[str, Any]:
        status = self.overall_status
        return {
            'validator': 'validation',
            'id': self.id,
            'profile_id': self.profile_id,
            'validated_at': self.validated_at.isoformat(),
            'passed': self.passed,
            'geometry': self.geometry.to_dict(),
            'engineering': self.engineering.to_dict(),
            'boundary_conditions': self.boundary_conditions.to_dict(),
            'summary': {
                'status': status.value,
                'overall_score': round(self.overall_score, 4),
                'issue_count': len(self.all_issues()),
                'has_critical_issues': self.has_critical_issues,
                'requires_user_review': self.requires_user_review,
            },
        }
