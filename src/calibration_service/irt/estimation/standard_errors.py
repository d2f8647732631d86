"""
Standard errors for calibrated item parameters.

Observed information for one item, summed over respondents who answered it:
    I_a = Σ_j (θ_j - b)² P_j (1 - P_j)
    I_b = Σ_j a² P_j (1 - P_j)

SE = 1 / sqrt(I). Items whose information does not exceed the Hessian
epsilon get NaN: their precision is undefined, which is not an error.
"""

import numpy as np
from numpy.typing import NDArray

from calibration_service.core.data_models import ResponseMatrix
from calibration_service.irt.response_function import probabilities


def compute_standard_errors(
    data: ResponseMatrix,
    discriminations: NDArray[np.float64],
    difficulties: NDArray[np.float64],
    thetas: NDArray[np.float64],
    hessian_epsilon: float,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Standard errors of a and b for every item.

    Args:
        data: Response matrix.
        discriminations: Final a per item, shape (n_items,).
        difficulties: Final b per item, shape (n_items,).
        thetas: Final abilities, shape (n_respondents,).
        hessian_epsilon: Information at or below this value yields NaN.

    Returns:
        Tuple of (se_discrimination, se_difficulty), each shape (n_items,).
    """
    # Shape: (n_respondents, n_items)
    p = probabilities(thetas[:, np.newaxis], discriminations, difficulties)
    pq = np.where(data.valid_mask, p * (1.0 - p), 0.0)

    centered = thetas[:, np.newaxis] - difficulties[np.newaxis, :]
    info_a = np.sum(centered**2 * pq, axis=0)
    info_b = discriminations**2 * np.sum(pq, axis=0)

    return (
        _information_to_se(info_a, hessian_epsilon),
        _information_to_se(info_b, hessian_epsilon),
    )


def _information_to_se(
    information: NDArray[np.float64], hessian_epsilon: float
) -> NDArray[np.float64]:
    se = np.full(information.shape, np.nan, dtype=np.float64)
    informative = information > hessian_epsilon
    se[informative] = 1.0 / np.sqrt(information[informative])
    return se
