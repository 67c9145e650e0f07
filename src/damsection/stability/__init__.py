"""Load analysis and sliding/overturning stability of a gravity dam section."""

from .analyze import AnalysisResult, analyze_profile
from .loads import LoadAnalysis, compute_loads
from .parameters import AnalysisParameters, parameters_from_dict, validate_parameters
from .safety import INFINITE_SAFETY_FACTOR, StabilityEvaluation, evaluate_stability

__all__ = [
    "AnalysisParameters",
    "AnalysisResult",
    "INFINITE_SAFETY_FACTOR",
    "LoadAnalysis",
    "StabilityEvaluation",
    "analyze_profile",
    "compute_loads",
    "evaluate_stability",
    "parameters_from_dict",
    "validate_parameters",
]
