"""
Ability estimation for the 2PL model.

This module provides:
- The E-step of JMLE (every respondent's ability given item parameters)
- The centering constraint that fixes the JMLE location indeterminacy
- Standalone maximum likelihood scoring of one respondent against
  previously calibrated items
"""

import logging
from collections.abc import Hashable, Mapping

import numpy as np
from numpy.typing import NDArray

from calibration_service.core.constants import CORRECT, INCORRECT
from calibration_service.core.utils import dichotomize
from calibration_service.irt.estimation.config import CalibrationConfig
from calibration_service.irt.estimation.newton import (
    estimate_theta,
    estimate_thetas,
)
from calibration_service.irt.estimation.parameters import ItemParameters

logger = logging.getLogger(__name__)

NEUTRAL_ABILITY = 0.0


def estimate_theta_from_responses(
    responses: NDArray[np.int8],
    discriminations: NDArray[np.float64],
    difficulties: NDArray[np.float64],
    config: CalibrationConfig,
) -> float:
    """
    Maximum likelihood ability for a single response vector.

    Args:
        responses: Response codes, shape (n_items,). Missing entries are
            ignored.
        discriminations: a per item, shape (n_items,).
        difficulties: b per item, shape (n_items,).
        config: Calibration configuration.

    Returns:
        Ability estimate within the configured theta bounds.
    """
    nr = config.newton_raphson
    theta_min, theta_max = config.bounds.theta
    return float(
        estimate_theta(
            np.ascontiguousarray(responses, dtype=np.int8),
            np.ascontiguousarray(discriminations, dtype=np.float64),
            np.ascontiguousarray(difficulties, dtype=np.float64),
            theta_min,
            theta_max,
            nr.max_iterations,
            nr.tolerance,
            nr.hessian_epsilon,
        )
    )


def run_e_step(
    responses: NDArray[np.int8],
    discriminations: NDArray[np.float64],
    difficulties: NDArray[np.float64],
    thetas: NDArray[np.float64],
    config: CalibrationConfig,
) -> NDArray[np.float64]:
    """
    Re-estimate every respondent's ability given fixed item parameters.

    Each respondent is solved from θ = 0. Respondents without responses
    keep their current value.

    Args:
        responses: Response codes, shape (n_respondents, n_items).
        discriminations: a per item, shape (n_items,).
        difficulties: b per item, shape (n_items,).
        thetas: Current abilities, shape (n_respondents,).
        config: Calibration configuration.

    Returns:
        New abilities, shape (n_respondents,).
    """
    nr = config.newton_raphson
    theta_min, theta_max = config.bounds.theta
    result: NDArray[np.float64] = estimate_thetas(
        responses,
        discriminations,
        difficulties,
        thetas,
        theta_min,
        theta_max,
        nr.max_iterations,
        nr.tolerance,
        nr.hessian_epsilon,
    )
    return result


def center_abilities(
    thetas: NDArray[np.float64],
    difficulties: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64], float]:
    """
    Shift abilities to zero mean and move difficulties by the same amount.

    The 2PL likelihood is unchanged when every θ and every b shift by the
    same constant, so without this the joint estimates drift.

    Args:
        thetas: Abilities, shape (n_respondents,).
        difficulties: b per item, shape (n_items,).

    Returns:
        Tuple of (centered thetas, shifted difficulties, removed mean).
    """
    if thetas.size == 0:
        return thetas, difficulties, 0.0

    mean = float(np.mean(thetas))
    return thetas - mean, difficulties - mean, mean


def estimate_ability(
    scores: Mapping[Hashable, float | None] | None,
    item_parameters: Mapping[Hashable, ItemParameters | None],
    config: CalibrationConfig | None = None,
) -> float:
    """
    Score one respondent against calibrated items.

    Scores are dichotomized; items without a score or without calibrated
    parameters are dropped.

    Args:
        scores: Normalized score per item id.
        item_parameters: Calibrated parameters per item id.
        config: Calibration configuration. Uses defaults if None.

    Returns:
        Maximum likelihood ability, or 0.0 when no usable item remains.
    """
    if not scores:
        return NEUTRAL_ABILITY

    if config is None:
        config = CalibrationConfig()

    threshold = config.item_filter.dichotomize_threshold
    responses: list[int] = []
    discriminations: list[float] = []
    difficulties: list[float] = []

    for item_id, score in scores.items():
        params = item_parameters.get(item_id)
        if params is None or score is None:
            continue
        responses.append(
            CORRECT if dichotomize(score, threshold) else INCORRECT
        )
        discriminations.append(params.discrimination)
        difficulties.append(params.difficulty)

    if not responses:
        logger.debug(f"No calibrated items among {len(scores)} scores")
        return NEUTRAL_ABILITY

    return estimate_theta_from_responses(
        np.array(responses, dtype=np.int8),
        np.array(discriminations, dtype=np.float64),
        np.array(difficulties, dtype=np.float64),
        config,
    )
