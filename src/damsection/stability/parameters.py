"""
Analysis parameters for gravity dam stability checks.

Defaults follow common practice for concrete gravity dams on rock
(SL 319-2018): γw = 9.8 kN/m³, f = 0.75, K_s = 3.0, K_o = 1.5 and an
uplift reduction of 0.8 behind the drainage curtain.
"""

import logging
import math
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, List

from ..errors import InputError

logger = logging.getLogger(__name__)

# Admissible ranges
FRICTION_COEFFICIENT_RANGE = (0.0, 1.5)
SEISMIC_COEFFICIENT_RANGE = (0.0, 0.4)
UPLIFT_REDUCTION_RANGE = (0.0, 1.0)


@dataclass(frozen=True)
class AnalysisParameters:
    """
    Externally supplied load and acceptance parameters.

    Attributes:
        upstream_water_level: Reservoir head above the base (m)
        downstream_water_level: Tailwater head above the base (m)
        water_unit_weight: γw (kN/m³)
        seismic_coefficient: Horizontal seismic coefficient (fraction of g)
        friction_coefficient: Concrete/foundation friction coefficient
        required_sliding_safety_factor: Minimum acceptable sliding SF
        required_overturning_safety_factor: Minimum acceptable overturning SF
        consider_uplift: Include uplift in the effective normal force
        uplift_reduction_factor: Fraction of the average head acting as uplift
    """
    upstream_water_level: float = 100.0
    downstream_water_level: float = 10.0
    water_unit_weight: float = 9.8
    seismic_coefficient: float = 0.0
    friction_coefficient: float = 0.75
    required_sliding_safety_factor: float = 3.0
    required_overturning_safety_factor: float = 1.5
    consider_uplift: bool = True
    uplift_reduction_factor: float = 0.8

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parameters_from_dict(data: Dict[str, Any]) -> AnalysisParameters:
    """Build parameters from a JSON object; unknown keys are ignored."""
    if not isinstance(data, dict):
        raise InputError(f"Analysis parameters must be a JSON object, got {type(data).__name__}")
    known = {f.name for f in fields(AnalysisParameters)}
    return AnalysisParameters(**{k: v for k, v in data.items() if k in known})


def validate_parameters(params: AnalysisParameters) -> List[str]:
    """
    Check every parameter before any calculation uses them.

    All violations are collected and raised together. Advisory problems
    that do not prevent a calculation are logged and returned.

    Returns:
        List of warning messages

    Raises:
        InputError: one or more parameters out of range
    """
    errors = []
    warnings = []

    for name in ('upstream_water_level', 'downstream_water_level', 'water_unit_weight',
                 'seismic_coefficient', 'friction_coefficient', 'uplift_reduction_factor',
                 'required_sliding_safety_factor', 'required_overturning_safety_factor'):
        value = getattr(params, name)
        if (isinstance(value, bool) or not isinstance(value, (int, float))
                or not math.isfinite(value)):
            errors.append(f"{name} must be a finite number, got {value!r}")
    if not isinstance(params.consider_uplift, bool):
        errors.append(f"consider_uplift must be true or false, got {params.consider_uplift!r}")

    if errors:
        raise InputError("; ".join(errors), errors)

    if params.upstream_water_level < 0:
        errors.append("Upstream water level cannot be negative")
    if params.downstream_water_level < 0:
        errors.append("Downstream water level cannot be negative")
    if params.water_unit_weight <= 0:
        errors.append("Water unit weight must be greater than 0")

    lo, hi = FRICTION_COEFFICIENT_RANGE
    if not lo <= params.friction_coefficient <= hi:
        errors.append(f"Friction coefficient must be within [{lo}, {hi}], "
                      f"got {params.friction_coefficient}")

    lo, hi = SEISMIC_COEFFICIENT_RANGE
    if not lo <= params.seismic_coefficient <= hi:
        errors.append(f"Seismic coefficient must be within [{lo}, {hi}], "
                      f"got {params.seismic_coefficient}")

    lo, hi = UPLIFT_REDUCTION_RANGE
    if not lo <= params.uplift_reduction_factor <= hi:
        errors.append(f"Uplift reduction factor must be within [{lo}, {hi}], "
                      f"got {params.uplift_reduction_factor}")

    if errors:
        raise InputError("; ".join(errors), errors)

    if params.upstream_water_level <= params.downstream_water_level:
        warnings.append("Upstream water level should be higher than downstream water level")
    if params.required_sliding_safety_factor <= 1.0:
        warnings.append("Required sliding safety factor should be greater than 1.0")
    if params.required_overturning_safety_factor <= 1.0:
        warnings.append("Required overturning safety factor should be greater than 1.0")

    for message in warnings:
        logger.warning(message)

    return warnings
