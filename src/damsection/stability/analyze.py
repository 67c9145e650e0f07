"""Run the stability analysis of one dam section."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional, Tuple

from ..geometry.properties import GeometricProperties, compute_geometric_properties
from ..profile.models import MaterialProperties, Profile
from .. import report
from .loads import LoadAnalysis, compute_loads
from .parameters import AnalysisParameters, validate_parameters
from .safety import StabilityEvaluation, evaluate_stability

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Immutable snapshot of one stability analysis."""
    profile_id: str
    profile_name: str
    parameters: AnalysisParameters
    material: MaterialProperties
    geometry: GeometricProperties
    loads: LoadAnalysis
    stability: StabilityEvaluation
    warnings: Tuple[str, ...] = ()
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    analyzed_at: datetime = field(default_factory=datetime.now)

    @property
    def sliding_safety_factor(self) -> float:
        return self.stability.sliding_safety_factor

    @property
    def overturning_safety_factor(self) -> float:
        return self.stability.overturning_safety_factor

    @property
    def sliding_stable(self) -> bool:
        return self.stability.sliding_stable

    @property
    def overturning_stable(self) -> bool:
        return self.stability.overturning_stable

    @property
    def overall_stable(self) -> bool:
        return self.stability.overall_stable

    def generate_report(self) -> str:
        return report.format_analysis_report(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'validator': 'stability',
            'id': self.id,
            'profile_id': self.profile_id,
            'profile_name': self.profile_name,
            'analyzed_at': self.analyzed_at.isoformat(),
            'passed': self.overall_stable,
            'parameters': self.parameters.to_dict(),
            'material': {
                'name': self.material.name,
                'unit_weight_kn_m3': self.material.density,
            },
            'geometry': self.geometry.to_dict(),
            'loads': self.loads.to_dict(),
            'stability': self.stability.to_dict(),
            'warnings': list(self.warnings),
            'summary': {
                'area_m2': round(self.geometry.area, 2),
                'self_weight_kn_m': round(self.loads.self_weight, 1),
                'sliding_safety_factor': self.sliding_safety_factor,
                'overturning_safety_factor': self.overturning_safety_factor,
                'result': 'PASS' if self.overall_stable else 'FAIL',
            },
        }


def resolve_material(profile: Profile,
                     material: Optional[MaterialProperties] = None) -> MaterialProperties:
    """
    Pick the material whose unit weight governs the self-weight.

    An explicit material wins; otherwise the largest material zone;
    otherwise standard C30 concrete.
    """
    if material is not None:
        return material
    if profile.material_zones:
        return max(profile.material_zones, key=lambda z: z.area).properties
    logger.warning("Profile %r has no material zones; assuming C30 concrete", profile.name)
    return MaterialProperties.standard_concrete("C30")


def analyze_profile(profile: Profile,
                    params: AnalysisParameters,
                    material: Optional[MaterialProperties] = None) -> AnalysisResult:
    """
    Analyze the stability of a dam section.

    Args:
        profile: Section to analyze
        params: Analysis parameters (validated here before use)
        material: Material override for the unit weight

    Returns:
        AnalysisResult snapshot

    Raises:
        InputError: invalid contour or parameters
    """
    logger.info("Analyzing section stability: %s", profile.name or profile.id)

    warnings = validate_parameters(params)
    material = resolve_material(profile, material)

    geometry = compute_geometric_properties(profile.main_contour, profile.inner_contours)
    logger.info("Section: area=%.2f m², centroid=(%.2f, %.2f)",
                geometry.area, geometry.centroid.x, geometry.centroid.y)

    loads = compute_loads(geometry, params, material)
    stability = evaluate_stability(geometry, loads, params)

    return AnalysisResult(
        profile_id=profile.id,
        profile_name=profile.name,
        parameters=params,
        material=material,
        geometry=geometry,
        loads=loads,
        stability=stability,
        warnings=tuple(warnings) + stability.warnings,
    )
