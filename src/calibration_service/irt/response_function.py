"""
The 2PL item response function.

    P(correct | θ, a, b) = 1 / (1 + exp(-a * (θ - b)))

Where:
    - θ: respondent ability
    - a: item discrimination
    - b: item difficulty

Exponents beyond ±EXPONENT_LIMIT short-circuit to exactly 0.0 or 1.0. At
that magnitude the true value differs from 0 or 1 by less than machine
epsilon, and exp() never sees an argument that could overflow.
"""

import numpy as np
from numba import njit  # type: ignore
from numpy.typing import ArrayLike, NDArray

EXPONENT_LIMIT = 35.0


@njit  # type: ignore
def probability(theta: float, a: float, b: float) -> float:
    """
    Probability of a correct response under the 2PL model.

    Args:
        theta: Ability.
        a: Discrimination.
        b: Difficulty.

    Returns:
        P(correct) in [0, 1].
    """
    exponent = -a * (theta - b)
    if exponent > EXPONENT_LIMIT:
        return 0.0
    if exponent < -EXPONENT_LIMIT:
        return 1.0
    return 1.0 / (1.0 + np.exp(exponent))


def probabilities(
    theta: ArrayLike, a: ArrayLike, b: ArrayLike
) -> NDArray[np.float64]:
    """
    Vectorized 2PL probabilities with the same overflow policy as
    `probability`.

    Arguments broadcast against each other, so passing thetas of shape
    (n_respondents, 1) with item parameters of shape (n_items,) yields a
    (n_respondents, n_items) matrix.
    """
    theta_arr = np.asarray(theta, dtype=np.float64)
    a_arr = np.asarray(a, dtype=np.float64)
    b_arr = np.asarray(b, dtype=np.float64)

    exponent = -a_arr * (theta_arr - b_arr)
    clipped = np.clip(exponent, -EXPONENT_LIMIT, EXPONENT_LIMIT)
    probs = 1.0 / (1.0 + np.exp(clipped))

    probs = np.where(exponent > EXPONENT_LIMIT, 0.0, probs)
    probs = np.where(exponent < -EXPONENT_LIMIT, 1.0, probs)
    result: NDArray[np.float64] = np.asarray(probs, dtype=np.float64)
    return result
