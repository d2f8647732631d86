"""
Synthetic data generation module for 2PL calibration.

This module produces scored answers drawn from a known 2PL model so that
calibration can be checked against the true parameters.

It is NOT intended for production inference.
"""

from calibration_service.synthetic_data.config import (
    DistributionConfig,
    GenerationConfig,
    ScoreMode,
)
from calibration_service.synthetic_data.data_models import GeneratedData
from calibration_service.synthetic_data.generators import (
    generate_score_rows,
    to_csv,
    to_dataframe,
)
from calibration_service.synthetic_data.presets import (
    get_available_presets,
    get_preset,
    load_config,
)

__all__ = [
    "DistributionConfig",
    "GeneratedData",
    "GenerationConfig",
    "ScoreMode",
    "generate_score_rows",
    "get_available_presets",
    "get_preset",
    "load_config",
    "to_csv",
    "to_dataframe",
]
