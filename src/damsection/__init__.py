"""Stability analysis and validation of 2D gravity dam cross-sections."""

from .errors import DamSectionError, InputError
from .profile import Profile, profile_from_dict
from .stability import AnalysisParameters, analyze_profile
from .validation import validate_profile

__version__ = "0.1.0"

__all__ = [
    "DamSectionError",
    "InputError",
    "Profile",
    "profile_from_dict",
    "AnalysisParameters",
    "analyze_profile",
    "validate_profile",
]
