"""
IRT (Item Response Theory) module.

This module provides:
- The 2PL item response function
- JMLE calibration of item parameters with standard errors
- Standalone ability scoring
- A service facade over a score repository
- Diagnostic utilities for model validation
"""

from calibration_service.irt.diagnostics import (
    ItemFitComparison,
    compute_item_fit,
)
from calibration_service.irt.estimation.abilities import estimate_ability
from calibration_service.irt.estimation.estimator import JMLEEstimator
from calibration_service.irt.estimation.parameters import ItemParameters
from calibration_service.irt.response_function import (
    probabilities,
    probability,
)
from calibration_service.irt.service import (
    CalibrationService,
    InMemoryScoreRepository,
    ScoreRepository,
)

__all__ = [
    "CalibrationService",
    "InMemoryScoreRepository",
    "ItemFitComparison",
    "ItemParameters",
    "JMLEEstimator",
    "ScoreRepository",
    "compute_item_fit",
    "estimate_ability",
    "probabilities",
    "probability",
]
