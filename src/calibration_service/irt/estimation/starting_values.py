"""
Starting value computation for JMLE.

Item difficulties start from the negative logit of the classical p-value,
abilities from the logit of each respondent's proportion correct, and all
discriminations at 1.
"""

import numpy as np
from numpy.typing import NDArray
from scipy.special import logit

from calibration_service.core.data_models import ResponseMatrix
from calibration_service.irt.estimation.config import CalibrationConfig

DEFAULT_STARTING_DISCRIMINATION = 1.0


def initial_difficulties(
    p_values: NDArray[np.float64],
    config: CalibrationConfig,
) -> NDArray[np.float64]:
    """
    b = -logit(p), with p clipped away from 0 and 1.

    Args:
        p_values: Classical proportion correct per item.
        config: Calibration configuration.

    Returns:
        Array of shape (n_items,) clamped to the difficulty bounds.
    """
    low, high = config.proportion_clip
    clipped = np.clip(p_values, low, high)
    b_min, b_max = config.bounds.difficulty
    result: NDArray[np.float64] = np.clip(-logit(clipped), b_min, b_max)
    return result


def initial_discriminations(n_items: int) -> NDArray[np.float64]:
    """All discriminations start at 1."""
    return np.full(n_items, DEFAULT_STARTING_DISCRIMINATION, dtype=np.float64)


def initial_abilities(
    data: ResponseMatrix,
    config: CalibrationConfig,
) -> NDArray[np.float64]:
    """
    theta = logit(proportion correct), with the proportion clipped.

    Respondents without responses start at 0.

    Args:
        data: Response matrix.
        config: Calibration configuration.

    Returns:
        Array of shape (n_respondents,) clamped to the ability bounds.
    """
    low, high = config.proportion_clip
    theta_min, theta_max = config.bounds.theta

    proportions = np.clip(data.respondent_proportion_correct(), low, high)
    thetas = np.clip(logit(proportions), theta_min, theta_max)

    answered = data.valid_mask.any(axis=1)
    result: NDArray[np.float64] = np.where(answered, thetas, 0.0)
    return result
