"""
Core shared types and utilities for the calibration service.

This module provides the response matrix and helpers used by both the IRT
estimation code and the synthetic data generation layer.
"""

from calibration_service.core.constants import (
    CORRECT,
    INCORRECT,
    MISSING_VALUE,
)
from calibration_service.core.data_models import ResponseMatrix, ScoreRow
from calibration_service.core.utils import dichotomize, get_rng

__all__ = [
    "CORRECT",
    "INCORRECT",
    "MISSING_VALUE",
    "ResponseMatrix",
    "ScoreRow",
    "dichotomize",
    "get_rng",
]
