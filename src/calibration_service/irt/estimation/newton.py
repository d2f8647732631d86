"""
Newton-Raphson solvers for 2PL joint maximum likelihood.

Log-likelihood of a single response x in {0, 1}:
    ℓ = x * log P + (1 - x) * log(1 - P),   P = 1 / (1 + exp(-a(θ - b)))

Derivatives used by the three solvers:
    ∂ℓ/∂θ = a (x - P)                 ∂²ℓ/∂θ² = -a² P (1 - P)
    ∂ℓ/∂b = a (P - x)                 ∂²ℓ/∂b² = -a² P (1 - P)
    ∂ℓ/∂a = (θ - b)(x - P)            ∂²ℓ/∂a² = -(θ - b)² P (1 - P)

Every solve stops after `max_iterations`, when the second derivative is
flatter than `hessian_epsilon`, or when the step is below `tolerance`.
Entries equal to MISSING_VALUE are skipped.

The batched kernels run respondents (E-step) or items (M-step) in parallel;
each row or column is solved independently of the others.
"""

import numpy as np
from numba import njit, prange  # type: ignore
from numpy.typing import NDArray

from calibration_service.core.constants import CORRECT, MISSING_VALUE
from calibration_service.irt.response_function import probability


@njit  # type: ignore
def estimate_theta(
    responses: NDArray[np.int8],
    a: NDArray[np.float64],
    b: NDArray[np.float64],
    theta_min: float,
    theta_max: float,
    max_iterations: int,
    tolerance: float,
    hessian_epsilon: float,
) -> float:
    """
    Maximum likelihood ability for one respondent, starting from θ = 0.

    Args:
        responses: Response codes for each item, shape (n_items,).
        a: Discrimination per item, shape (n_items,).
        b: Difficulty per item, shape (n_items,).

    Returns:
        Ability estimate clamped to [theta_min, theta_max].
    """
    theta = 0.0

    for _ in range(max_iterations):
        d1 = 0.0
        d2 = 0.0
        for i in range(responses.shape[0]):
            if responses[i] == MISSING_VALUE:
                continue
            p = probability(theta, a[i], b[i])
            x = 1.0 if responses[i] == CORRECT else 0.0
            d1 += a[i] * (x - p)
            d2 -= a[i] * a[i] * p * (1.0 - p)

        if abs(d2) < hessian_epsilon:
            break

        delta = d1 / d2
        theta = min(max(theta - delta, theta_min), theta_max)

        if abs(delta) < tolerance:
            break

    return theta


@njit  # type: ignore
def estimate_difficulty(
    responses: NDArray[np.int8],
    thetas: NDArray[np.float64],
    a: float,
    b_start: float,
    b_min: float,
    b_max: float,
    max_iterations: int,
    tolerance: float,
    hessian_epsilon: float,
    damping: float,
) -> float:
    """
    Damped Newton-Raphson update of one item's difficulty.

    Args:
        responses: Response codes for this item, shape (n_respondents,).
        thetas: Ability of each respondent, shape (n_respondents,).
        a: Current discrimination (held fixed).
        b_start: Current difficulty.

    Returns:
        Updated difficulty clamped to [b_min, b_max].
    """
    b = b_start

    for _ in range(max_iterations):
        d1 = 0.0
        d2 = 0.0
        for j in range(responses.shape[0]):
            if responses[j] == MISSING_VALUE:
                continue
            p = probability(thetas[j], a, b)
            x = 1.0 if responses[j] == CORRECT else 0.0
            d1 += a * (p - x)
            d2 -= a * a * p * (1.0 - p)

        if abs(d2) < hessian_epsilon:
            break

        delta = damping * (d1 / d2)
        b = min(max(b - delta, b_min), b_max)

        if abs(delta) < tolerance:
            break

    return b


@njit  # type: ignore
def estimate_discrimination(
    responses: NDArray[np.int8],
    thetas: NDArray[np.float64],
    a_start: float,
    b: float,
    a_min: float,
    a_max: float,
    max_iterations: int,
    tolerance: float,
    hessian_epsilon: float,
    damping: float,
) -> float:
    """
    Damped Newton-Raphson update of one item's discrimination.

    Args:
        responses: Response codes for this item, shape (n_respondents,).
        thetas: Ability of each respondent, shape (n_respondents,).
        a_start: Current discrimination.
        b: Difficulty (held fixed, already updated this round).

    Returns:
        Updated discrimination clamped to [a_min, a_max].
    """
    a = a_start

    for _ in range(max_iterations):
        d1 = 0.0
        d2 = 0.0
        for j in range(responses.shape[0]):
            if responses[j] == MISSING_VALUE:
                continue
            p = probability(thetas[j], a, b)
            x = 1.0 if responses[j] == CORRECT else 0.0
            centered = thetas[j] - b
            d1 += centered * (x - p)
            d2 -= centered * centered * p * (1.0 - p)

        if abs(d2) < hessian_epsilon:
            break

        delta = damping * (d1 / d2)
        a = min(max(a - delta, a_min), a_max)

        if abs(delta) < tolerance:
            break

    return a


@njit(parallel=True)  # type: ignore
def estimate_thetas(
    responses: NDArray[np.int8],
    a: NDArray[np.float64],
    b: NDArray[np.float64],
    thetas: NDArray[np.float64],
    theta_min: float,
    theta_max: float,
    max_iterations: int,
    tolerance: float,
    hessian_epsilon: float,
) -> NDArray[np.float64]:
    """
    E-step: re-estimate every respondent's ability.

    Respondents without any observed response keep their current value.

    Args:
        responses: Response codes, shape (n_respondents, n_items).
        thetas: Current abilities, shape (n_respondents,).

    Returns:
        New ability array, shape (n_respondents,).
    """
    n_respondents, n_items = responses.shape
    out = thetas.copy()

    for j in prange(n_respondents):
        n_observed = 0
        for i in range(n_items):
            if responses[j, i] != MISSING_VALUE:
                n_observed += 1
        if n_observed == 0:
            continue
        out[j] = estimate_theta(
            responses[j],
            a,
            b,
            theta_min,
            theta_max,
            max_iterations,
            tolerance,
            hessian_epsilon,
        )

    return out


@njit(parallel=True)  # type: ignore
def update_item_parameters(
    responses: NDArray[np.int8],
    thetas: NDArray[np.float64],
    a: NDArray[np.float64],
    b: NDArray[np.float64],
    a_min: float,
    a_max: float,
    b_min: float,
    b_max: float,
    max_iterations: int,
    tolerance: float,
    hessian_epsilon: float,
    damping: float,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """
    M-step: update difficulty, then discrimination, for every item.

    Items without any observed response keep their current values.

    Args:
        responses: Response codes, shape (n_respondents, n_items).
        thetas: Abilities, shape (n_respondents,).
        a: Current discriminations, shape (n_items,).
        b: Current difficulties, shape (n_items,).

    Returns:
        Tuple of (new_a, new_b, changes) where changes[i] is the largest
        absolute change of item i's a or b.
    """
    n_respondents, n_items = responses.shape
    new_a = a.copy()
    new_b = b.copy()
    changes = np.zeros(n_items, dtype=np.float64)

    for i in prange(n_items):
        n_observed = 0
        for j in range(n_respondents):
            if responses[j, i] != MISSING_VALUE:
                n_observed += 1
        if n_observed == 0:
            continue

        column = responses[:, i]
        b_i = estimate_difficulty(
            column,
            thetas,
            a[i],
            b[i],
            b_min,
            b_max,
            max_iterations,
            tolerance,
            hessian_epsilon,
            damping,
        )
        a_i = estimate_discrimination(
            column,
            thetas,
            a[i],
            b_i,
            a_min,
            a_max,
            max_iterations,
            tolerance,
            hessian_epsilon,
            damping,
        )
        new_b[i] = b_i
        new_a[i] = a_i
        changes[i] = max(abs(b_i - b[i]), abs(a_i - a[i]))

    return new_a, new_b, changes
