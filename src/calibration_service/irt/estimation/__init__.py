"""
2PL estimation module.

This module provides infrastructure for calibrating two-parameter logistic
IRT models using Joint Maximum Likelihood Estimation.

Key components:
- CalibrationConfig: Configuration for calibration
- build_response_matrix: Raw scores to filtered binary input
- JMLEEstimator: Alternating ability / item parameter estimator
- CalibrationResult: Output from calibration
- estimate_ability: Standalone scoring against calibrated items
"""

from calibration_service.irt.estimation.abilities import estimate_ability
from calibration_service.irt.estimation.config import (
    CalibrationConfig,
    CalibrationSettings,
    default_config,
)
from calibration_service.irt.estimation.data_models import (
    CalibrationResult,
    ItemCalibration,
    IterationProgress,
)
from calibration_service.irt.estimation.enums import (
    ConvergenceStatus,
    EstimatorState,
)
from calibration_service.irt.estimation.estimator import JMLEEstimator
from calibration_service.irt.estimation.exceptions import (
    CalibrationError,
    CompetencyNotFoundError,
    InsufficientDataError,
    InsufficientItemsError,
    InsufficientRespondentsError,
)
from calibration_service.irt.estimation.matrix_builder import (
    build_response_matrix,
    validate_minimum_data,
)
from calibration_service.irt.estimation.parameters import ItemParameters

__all__ = [
    "CalibrationConfig",
    "CalibrationError",
    "CalibrationResult",
    "CalibrationSettings",
    "CompetencyNotFoundError",
    "ConvergenceStatus",
    "EstimatorState",
    "InsufficientDataError",
    "InsufficientItemsError",
    "InsufficientRespondentsError",
    "ItemCalibration",
    "ItemParameters",
    "IterationProgress",
    "JMLEEstimator",
    "build_response_matrix",
    "default_config",
    "estimate_ability",
    "validate_minimum_data",
]
