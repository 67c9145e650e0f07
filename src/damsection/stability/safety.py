"""
Sliding and overturning safety factors.

Sliding:      K_s = f · N / (P + Fs)
Overturning:  K_o = W · a / (P · H/3 + Fs · yc)

where a is the lever arm of the self-weight about the downstream toe,
H/3 is the resultant height of a triangular water pressure diagram and yc
is the centroid height above the base.

A non-positive driving term means there is no sliding or overturning
tendency; the factor is then INFINITE_SAFETY_FACTOR rather than an error.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Dict, Any, List, Tuple

from ..geometry.properties import GeometricProperties
from .loads import LoadAnalysis
from .parameters import AnalysisParameters

logger = logging.getLogger(__name__)

# Largest representable float: stands in for an unbounded safety margin
INFINITE_SAFETY_FACTOR = sys.float_info.max


def calculate_sliding_safety_factor(loads: LoadAnalysis,
                                    friction_coefficient: float) -> Tuple[float, List[str]]:
    """
    Shear-friction sliding safety factor.

    Returns:
        (safety factor, warnings)
    """
    warnings = []
    sliding_force = loads.net_water_pressure + loads.seismic_force

    if sliding_force <= 0:
        return INFINITE_SAFETY_FACTOR, warnings

    normal = loads.effective_normal_force
    if normal <= 0:
        message = (f"Effective normal force is {normal:.1f} kN/m: uplift too large "
                   f"or section unreasonable, no sliding resistance")
        logger.warning(message)
        warnings.append(message)
        return 0.0, warnings

    return friction_coefficient * normal / sliding_force, warnings


def calculate_overturning_moments(geometry: GeometricProperties,
                                  loads: LoadAnalysis) -> Tuple[float, float]:
    """
    Resisting and overturning moments about the downstream toe (kN·m/m).

    Returns:
        (resisting_moment, overturning_moment)
    """
    resisting = loads.self_weight * geometry.toe_lever_arm

    water_arm = geometry.height / 3.0
    overturning = loads.net_water_pressure * water_arm
    overturning += loads.seismic_force * geometry.centroid_height

    return resisting, overturning


def calculate_overturning_safety_factor(geometry: GeometricProperties,
                                        loads: LoadAnalysis) -> float:
    resisting, overturning = calculate_overturning_moments(geometry, loads)
    if overturning <= 0:
        return INFINITE_SAFETY_FACTOR
    return resisting / overturning


def format_safety_factor(value: float, precision: int = 3) -> str:
    """Fixed-precision text, with the sentinel rendered as 'inf'."""
    if value >= INFINITE_SAFETY_FACTOR:
        return "inf"
    return f"{value:.{precision}f}"


@dataclass(frozen=True)
class StabilityEvaluation:
    """
    Safety factors and their acceptance thresholds.

    The stability flags are derived from the factors on every access.
    """
    sliding_safety_factor: float
    overturning_safety_factor: float
    required_sliding_safety_factor: float
    required_overturning_safety_factor: float
    resisting_moment: float = 0.0
    overturning_moment: float = 0.0
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def sliding_stable(self) -> bool:
        return self.sliding_safety_factor >= self.required_sliding_safety_factor

    @property
    def overturning_stable(self) -> bool:
        return self.overturning_safety_factor >= self.required_overturning_safety_factor

    @property
    def overall_stable(self) -> bool:
        return self.sliding_stable and self.overturning_stable

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sliding': {
                'safety_factor': self.sliding_safety_factor,
                'required': self.required_sliding_safety_factor,
                'result': 'PASS' if self.sliding_stable else 'FAIL',
            },
            'overturning': {
                'safety_factor': self.overturning_safety_factor,
                'required': self.required_overturning_safety_factor,
                'resisting_moment_knm_m': self.resisting_moment,
                'overturning_moment_knm_m': self.overturning_moment,
                'result': 'PASS' if self.overturning_stable else 'FAIL',
            },
            'overall_stable': self.overall_stable,
            'warnings': list(self.warnings),
        }


def evaluate_stability(geometry: GeometricProperties,
                       loads: LoadAnalysis,
                       params: AnalysisParameters) -> StabilityEvaluation:
    """
    Compute both safety factors for a section.

    Args:
        geometry: Section properties
        loads: Load breakdown from compute_loads
        params: Validated analysis parameters

    Returns:
        StabilityEvaluation
    """
    sliding, warnings = calculate_sliding_safety_factor(loads, params.friction_coefficient)
    resisting, overturning = calculate_overturning_moments(geometry, loads)
    overturning_sf = calculate_overturning_safety_factor(geometry, loads)

    if sliding >= INFINITE_SAFETY_FACTOR:
        logger.warning("No horizontal driving force: sliding safety factor unbounded")
    if overturning_sf >= INFINITE_SAFETY_FACTOR:
        logger.warning("No overturning moment: overturning safety factor unbounded")

    logger.info("Safety factors: sliding=%s, overturning=%s",
                format_safety_factor(sliding), format_safety_factor(overturning_sf))

    return StabilityEvaluation(
        sliding_safety_factor=sliding,
        overturning_safety_factor=overturning_sf,
        required_sliding_safety_factor=params.required_sliding_safety_factor,
        required_overturning_safety_factor=params.required_overturning_safety_factor,
        resisting_moment=resisting,
        overturning_moment=overturning,
        warnings=tuple(warnings),
    )
