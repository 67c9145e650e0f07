"""
Load analysis for a gravity dam section.

All loads are per metre of dam axis (kN/m):

- self-weight:      W  = A · γc
- net water thrust: P  = max(0, ½γw·H1² − ½γw·H2²)
- uplift:           U  = α · (H1 + H2)/2 · B · γw
- seismic inertia:  Fs = kh · W
- effective normal: N  = W − U

The uplift term is the average-head simplification of the trapezoidal
uplift diagram, reduced by α for the drainage curtain.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Any

from ..geometry.properties import GeometricProperties
from ..profile.models import MaterialProperties
from .parameters import AnalysisParameters

logger = logging.getLogger(__name__)


def calculate_self_weight(area_m2: float, unit_weight_kn_m3: float) -> float:
    """Self-weight per metre (kN/m)."""
    return area_m2 * unit_weight_kn_m3


def calculate_net_water_pressure(upstream_head_m: float, downstream_head_m: float,
                                 water_unit_weight: float) -> float:
    """
    Net horizontal water thrust per metre (kN/m).

    A tailwater higher than the reservoir never produces a negative
    driving force: the result is floored at zero.
    """
    upstream = 0.5 * water_unit_weight * upstream_head_m ** 2
    downstream = 0.5 * water_unit_weight * downstream_head_m ** 2
    return max(0.0, upstream - downstream)


def calculate_uplift_force(upstream_head_m: float, downstream_head_m: float,
                           base_width_m: float, water_unit_weight: float,
                           reduction_factor: float) -> float:
    """Uplift per metre from the average of both heads (kN/m)."""
    average_head = (upstream_head_m + downstream_head_m) / 2.0
    return reduction_factor * average_head * base_width_m * water_unit_weight


def calculate_seismic_force(self_weight_kn: float, seismic_coefficient: float) -> float:
    """Horizontal seismic inertia force per metre (kN/m)."""
    return seismic_coefficient * self_weight_kn


@dataclass(frozen=True)
class LoadAnalysis:
    """Load breakdown of one section (kN/m)."""
    self_weight: float
    net_water_pressure: float
    uplift_force: float
    seismic_force: float

    @property
    def effective_normal_force(self) -> float:
        """Self-weight less uplift; negative when uplift exceeds the weight."""
        return self.self_weight - self.uplift_force

    @property
    def horizontal_force(self) -> float:
        """Total driving force for sliding."""
        return self.net_water_pressure + self.seismic_force

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['effective_normal_force'] = self.effective_normal_force
        data['horizontal_force'] = self.horizontal_force
        return data


def compute_loads(geometry: GeometricProperties,
                  params: AnalysisParameters,
                  material: MaterialProperties) -> LoadAnalysis:
    """
    Compute the load breakdown for a section.

    Args:
        geometry: Section properties (net area, base width)
        params: Validated analysis parameters
        material: Material providing the unit weight

    Returns:
        LoadAnalysis
    """
    self_weight = calculate_self_weight(geometry.area, material.density)

    net_water = calculate_net_water_pressure(
        params.upstream_water_level, params.downstream_water_level,
        params.water_unit_weight)

    if params.consider_uplift:
        uplift = calculate_uplift_force(
            params.upstream_water_level, params.downstream_water_level,
            geometry.base_width, params.water_unit_weight,
            params.uplift_reduction_factor)
    else:
        uplift = 0.0

    seismic = calculate_seismic_force(self_weight, params.seismic_coefficient)

    loads = LoadAnalysis(
        self_weight=self_weight,
        net_water_pressure=net_water,
        uplift_force=uplift,
        seismic_force=seismic,
    )

    logger.info("Loads: W=%.1f, P=%.1f, U=%.1f, Fs=%.1f kN/m",
                self_weight, net_water, uplift, seismic)
    if loads.effective_normal_force <= 0:
        logger.warning("Effective normal force %.1f kN/m is not positive: "
                       "uplift exceeds self-weight", loads.effective_normal_force)

    return loads
